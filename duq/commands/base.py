"""Command base class — one subclass per assistant task.

Each command describes itself to the registry (name, target kind, whether it
writes files) and implements ``run``.  The chain executor validates steps from
these descriptors alone, so adding a command never touches the executor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from duq.exceptions import CommandError

if TYPE_CHECKING:
    from duq.context import AppContext


class TargetKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    ANY = "any"

    def accepts(self, is_directory: bool) -> bool:
        if self is TargetKind.ANY:
            return True
        return (self is TargetKind.DIRECTORY) == is_directory


@dataclass
class CommandResult:
    """What a command produced."""

    response: str = ""
    written_files: list[str] = field(default_factory=list)
    backup_ids: list[str] = field(default_factory=list)


class Command(ABC):
    """
    Abstract base for **assistant commands**.

    Responsibilities:
      • Build a prompt for the target
      • Send it to the assistant
      • Apply the response (print it, or write files through ``write_file``)
    """

    target_kind: TargetKind = TargetKind.FILE
    mutates: bool = False
    accepts_output: bool = False  # takes -o/--output
    aliases: tuple[str, ...] = ()

    # ── Required interface ──

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier used on the command line and in chains."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line help text."""
        ...

    @abstractmethod
    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        """Run against an existing, type-compatible *target*. Raises DuqError on failure."""
        ...

    # ── Helpers ──

    def supports(self, is_directory: bool) -> bool:
        return self.target_kind.accepts(is_directory)

    def ask(self, ctx: AppContext, prompt: str) -> str:
        """Send *prompt* to the assistant and echo the raw response."""
        response = ctx.assistant.ask(prompt)
        print("\n" + response)
        return response

    def write_file(self, ctx: AppContext, path: Path, content: str, result: CommandResult) -> None:
        """
        Write *content* to *path*, snapshotting an existing file first.

        The snapshot is best effort: a failed backup is logged and the write
        still happens.
        """
        path = Path(path).resolve()
        if path.is_file() and ctx.config.backs_up(self.name):
            backup_id = ctx.backup_manager.create_backup(path, self.name)
            if backup_id:
                result.backup_ids.append(backup_id)
                logger.info(f"Backed up {path} (id: {backup_id}); use 'duq revert' to undo")
            else:
                logger.warning(f"Could not back up {path}, overwriting anyway")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise CommandError(f"Failed to write {path}: {e}") from e
        result.written_files.append(str(path))
