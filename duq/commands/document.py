"""``document`` — generate a README for a directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from duq import prompts
from duq.commands.base import Command, CommandResult, TargetKind
from duq.core.assistant import is_fallback_response
from duq.exceptions import CommandError
from duq.utils import extract_markdown

if TYPE_CHECKING:
    from duq.context import AppContext


class DocumentCommand(Command):
    target_kind = TargetKind.DIRECTORY
    mutates = True
    accepts_output = True

    @property
    def name(self) -> str:
        return "document"

    @property
    def description(self) -> str:
        return "Generate a README for a directory"

    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        readme = output or prompts.default_readme_path(target)
        logger.info(f"Generating README for directory: {target}")
        if output:
            logger.info(f"Output will be saved to: {readme}")

        contents = ctx.reader.read_directory(target)
        prompt = (
            prompts.document(target, readme)
            + "\n\nDirectory contents:\n"
            + json.dumps(contents, indent=2, ensure_ascii=False)
        )

        result = CommandResult(response=self.ask(ctx, prompt))
        if is_fallback_response(result.response):
            raise CommandError("No README generated: the assistant did not respond")

        markdown = extract_markdown(result.response) or result.response.strip()
        self.write_file(ctx, readme, markdown + "\n", result)
        logger.success(f"✓ README saved to: {readme}")
        return result
