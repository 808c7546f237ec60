"""``explain`` — describe what a file does."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from duq import prompts
from duq.commands.base import Command, CommandResult

if TYPE_CHECKING:
    from duq.context import AppContext


class ExplainCommand(Command):
    @property
    def name(self) -> str:
        return "explain"

    @property
    def description(self) -> str:
        return "Explain what a file does"

    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        logger.info(f"Explaining file: {target}")
        source = ctx.reader.read_file(target)
        prompt = prompts.explain(target) + "\n\nFile content:\n" + source
        return CommandResult(response=self.ask(ctx, prompt))
