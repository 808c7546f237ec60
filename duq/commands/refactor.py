"""``refactor`` — suggest improvements for a file (read-only)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from duq import prompts
from duq.commands.base import Command, CommandResult

if TYPE_CHECKING:
    from duq.context import AppContext


class RefactorCommand(Command):
    @property
    def name(self) -> str:
        return "refactor"

    @property
    def description(self) -> str:
        return "Suggest refactoring improvements for a file"

    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        logger.info(f"Suggesting refactoring for file: {target}")
        source = ctx.reader.read_file(target)
        prompt = prompts.refactor(target) + "\n\nFile content:\n" + source
        return CommandResult(response=self.ask(ctx, prompt))
