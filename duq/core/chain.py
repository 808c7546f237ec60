"""Chain executor — run several commands against one target in sequence."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from loguru import logger

from duq.commands.base import Command, TargetKind
from duq.models.chain_result import ChainResult, StepResult, StepStatus

if TYPE_CHECKING:
    from duq.commands.registry import CommandRegistry
    from duq.context import AppContext

_STOP_HINT = "Chain execution stopped. Use --continue-on-error to ignore failed steps."


def parse_sequence(steps: str | Sequence[str]) -> list[str]:
    """Split ``"refactor, test,docstrings"`` into trimmed command names; blanks are dropped."""
    tokens = steps.split(",") if isinstance(steps, str) else steps
    return [token.strip() for token in tokens if token.strip()]


class ChainExecutor:
    """
    Sequential, fail-fast (or fail-soft) command pipeline.

    Each step is validated against the registry before it runs:

      1. unknown command name
      2. command cannot handle the target type (file vs directory)

    A rejected or failing step aborts the chain, unless *continue_on_error*
    is set, in which case rejected steps are skipped and failed steps are
    recorded before moving on.  Nothing is raised to the caller.
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    def validate(self, name: str, is_directory: bool) -> tuple[Command | None, str]:
        """Return ``(command, "")`` if the step may run, else ``(None, reason)``."""
        command = self._registry.get(name)
        if command is None:
            return None, f"Unknown command '{name}'"
        if not command.supports(is_directory):
            if is_directory:
                return None, f"Command '{name}' cannot be used on directories"
            if command.target_kind is TargetKind.DIRECTORY:
                return None, f"'{name}' command requires a directory"
            return None, f"Command '{name}' cannot be used on files"
        return command, ""

    def execute(
        self,
        ctx: AppContext,
        target: str | Path,
        steps: str | Sequence[str],
        *,
        output: str | Path | None = None,
        continue_on_error: bool = False,
    ) -> ChainResult:
        try:
            path = Path(target).expanduser().resolve()
        except (OSError, RuntimeError) as e:
            logger.error(f"Error in chain execution: {e}")
            return ChainResult(target=str(target), error=str(e))

        sequence = parse_sequence(steps)
        result = ChainResult(target=str(path), sequence=sequence)

        if not path.exists():
            result.error = f"Path not found: {path}"
            logger.error(f"Error: {result.error}")
            return result

        output_path = Path(output).expanduser().resolve() if output else None
        is_directory = path.is_dir()

        logger.info(f"Chaining commands on {path}:")
        logger.info(f"Sequence: {' → '.join(sequence)}")

        total = len(sequence)
        for index, name in enumerate(sequence, start=1):
            logger.info(f"[{index}/{total}] Running command: {name}")

            command, reason = self.validate(name, is_directory)
            if command is None:
                logger.error(f"Error: {reason}")
                if continue_on_error:
                    logger.warning("Skipping step and continuing...")
                    result.steps.append(StepResult(index, name, StepStatus.SKIPPED, message=reason))
                    continue
                return self._abort(result, StepResult(index, name, StepStatus.FAILED, message=reason))

            try:
                command.run(ctx, path, output_path)
            except Exception as e:
                message = f"Error executing command '{name}': {e}"
                logger.error(message)
                step = StepResult(index, name, StepStatus.FAILED, executed=True, message=str(e))
                if not continue_on_error:
                    return self._abort(result, step)
                result.steps.append(step)
                continue

            logger.success(f"✓ Command '{name}' completed successfully")
            result.steps.append(StepResult(index, name, StepStatus.SUCCEEDED, executed=True))

        result.completed = True
        logger.success("✓ Chain execution completed")
        return result

    @staticmethod
    def _abort(result: ChainResult, step: StepResult) -> ChainResult:
        result.steps.append(step)
        result.aborted_at = step
        logger.error(_STOP_HINT)
        return result
