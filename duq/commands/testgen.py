"""``test`` — generate a test file for a source file."""

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


class TestCommand(Command):
    __test__ = False  # not a pytest class

    mutates = True
    accepts_output = True

    @property
    def name(self) -> str:
        return "test"

    @property
    def description(self) -> str:
        return "Generate test cases for a file"

    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        test_file = output or prompts.default_test_path(target)
        logger.info(f"Generating tests for file: {target}")
        if output:
            logger.info(f"Output will be saved to: {test_file}")

        source = ctx.reader.read_file(target)
        prompt = prompts.test(target, test_file) + "\n\nFile content:\n" + source

        result = CommandResult(response=self.ask(ctx, prompt))
        code = extract_code_block(result.response)
        if not code:
            raise CommandError("Could not extract test code from the response")

        self.write_file(ctx, test_file, code + "\n", result)
        logger.success(f"✓ Tests saved to: {test_file}")
        return result
