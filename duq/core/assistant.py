"""External assistant runner — shells out to the Amazon Q CLI (``q chat``)."""

from __future__ import annotations

import shutil
import subprocess
from typing import TYPE_CHECKING

from loguru import logger

from duq.exceptions import AssistantError

if TYPE_CHECKING:
    from duq.config import Config

INSTALL_URL = "https://docs.aws.amazon.com/amazonq/latest/qdevcg/setting-up-q-cli.html"

FALLBACK_RESPONSE = (
    "Error: Unable to get a response from Amazon Q.\n\n"
    "Please try:\n"
    "1. Running 'q login' to ensure you're authenticated\n"
    "2. Running 'q chat' directly to test Amazon Q CLI\n"
    "3. Checking your internet connection"
)


def is_fallback_response(response: str) -> bool:
    """True if *response* is the remediation text rather than assistant output."""
    return response.startswith(FALLBACK_RESPONSE)


class AssistantRunner:
    """
    Blocking, one-shot invocation of the assistant binary.

    ``ask`` never raises: every failure is logged and replaced by a
    remediation message, which callers treat as the response text.
    """

    def __init__(self, config: Config) -> None:
        self._config = config

    @property
    def command(self) -> str:
        return self._config.assistant_command

    def is_installed(self) -> bool:
        """Check if the assistant CLI is on PATH and answers ``--version``."""
        if shutil.which(self.command) is None:
            return False
        try:
            subprocess.run(
                [self.command, "--version"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=30,
            )
        except (OSError, subprocess.SubprocessError):
            return False
        return True

    def _prepare_prompt(self, prompt: str) -> str:
        limit = self._config.max_prompt_chars
        if limit and len(prompt) > limit:
            logger.warning(f"Prompt truncated from {len(prompt)} to {limit} characters")
            return prompt[:limit]
        return prompt

    def run(self, prompt: str) -> str:
        """Invoke the assistant and return its stdout. Raises AssistantError."""
        argv = [self.command, *self._config.assistant_chat_args, self._prepare_prompt(prompt)]
        logger.debug(f"Running {self.command} with a {len(argv[-1])}-character prompt")
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._config.assistant_timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise AssistantError(f"{self.command} timed out after {e.timeout} seconds") from e
        except OSError as e:
            raise AssistantError(f"Could not start {self.command}: {e}") from e

        if completed.returncode != 0:
            detail = (completed.stderr or "").strip() or f"exit status {completed.returncode}"
            raise AssistantError(f"{self.command} failed: {detail}")
        return completed.stdout

    def ask(self, prompt: str) -> str:
        """Send *prompt* to the assistant; on any failure return the remediation text."""
        if not self.is_installed():
            logger.error("Error: Amazon Q CLI is not installed.")
            logger.warning(f"Please install it by following the instructions at: {INSTALL_URL}")
            return f"{FALLBACK_RESPONSE}\n4. Installing Amazon Q CLI: {INSTALL_URL}"

        logger.info("Generating response with Amazon Q...")
        try:
            output = self.run(prompt)
        except AssistantError as e:
            logger.error(f"Error calling Amazon Q: {e}")
            return FALLBACK_RESPONSE
        logger.info("Response generated")
        return output
