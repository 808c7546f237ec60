"""Chain execution result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    """Outcome of one step in a chain."""

    index: int  # 1-based position in the sequence
    command: str
    status: StepStatus
    executed: bool = False  # False when validation rejected the step
    message: str = ""


@dataclass
class ChainResult:
    """Result of a chain invocation."""

    target: str
    sequence: list[str] = field(default_factory=list)
    steps: list[StepResult] = field(default_factory=list)
    completed: bool = False
    aborted_at: StepResult | None = None
    error: str = ""

    @property
    def steps_run(self) -> list[str]:
        """Commands that were actually invoked, in order."""
        return [s.command for s in self.steps if s.executed]

    def count(self, status: StepStatus) -> int:
        return sum(1 for s in self.steps if s.status is status)
