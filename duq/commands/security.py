"""``security`` — security review of a file or a whole directory."""

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


class SecurityCommand(Command):
    target_kind = TargetKind.ANY
    mutates = True  # only with an output path
    accepts_output = True
    aliases = ("sec",)

    @property
    def name(self) -> str:
        return "security"

    @property
    def description(self) -> str:
        return "Perform security analysis on a file or directory"

    def run(self, ctx: AppContext, target: Path, output: Path | None = None) -> CommandResult:
        is_directory = ctx.reader.is_directory(target)
        kind = "directory" if is_directory else "file"
        logger.info(f"Performing security analysis on {kind}: {target}")

        prompt = prompts.security(target, is_directory)
        if is_directory:
            contents = ctx.reader.read_directory(target)
            prompt += "\n\nDirectory contents:\n" + json.dumps(contents, indent=2, ensure_ascii=False)
        else:
            prompt += "\n\nFile content:\n" + ctx.reader.read_file(target)

        result = CommandResult(response=self.ask(ctx, prompt))
        if output is None:
            return result
        if is_fallback_response(result.response):
            raise CommandError("No security report generated: the assistant did not respond")

        report = extract_markdown(result.response) or result.response.strip()
        self.write_file(ctx, output, report + "\n", result)
        logger.success(f"✓ Security report saved to: {output}")
        return result
