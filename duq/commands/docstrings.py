"""``docstrings`` — rewrite a file with documentation comments added."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from duq import prompts
from duq.commands.base import Command, CommandResult
from duq.exceptions import CommandError
from duq.utils import extract_code_block

if TYPE_CHECKING:
    from duq.context import AppContext


class DocstringsCommand(Command):
    mutates = True

    @property
    def name(self) -> str:
        return "docstrings"

    @property
    def description(self) -> str:
        return "Add docstrings to functions and classes in a file"

    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        logger.info(f"Adding docstrings to: {target}")
        source = ctx.reader.read_file(target)
        prompt = prompts.docstrings(target) + "\n\nFile content:\n" + source

        result = CommandResult(response=ctx.assistant.ask(prompt))
        documented = extract_code_block(result.response)
        if not documented:
            print("Raw response:\n" + result.response)
            raise CommandError("Could not extract documented code from the response")

        self.write_file(ctx, target, documented + "\n", result)
        logger.success(f"✓ Added docstrings to: {target}")
        return result
