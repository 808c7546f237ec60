"""Source reader — gather file and directory text to embed in prompts."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from duq.config import Config
from duq.exceptions import SourceReadError


class SourceReader:
    """
    Reads the primary input of a command.

    Directory walks skip hidden directories entirely.  Hidden or oversized
    files keep their key but get a placeholder instead of their content, so
    the assistant still sees the project structure.
    """

    def __init__(self, config: Config) -> None:
        self._config = config

    @staticmethod
    def exists(path: str | Path) -> bool:
        return Path(path).exists()

    @staticmethod
    def is_directory(path: str | Path) -> bool:
        return Path(path).is_dir()

    def read_file(self, path: str | Path) -> str:
        """Read a whole text file; unreadable input is fatal for the command."""
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Error reading file {path}: {e}") from e

    def read_directory(self, path: str | Path) -> dict[str, str]:
        """Map every file under *path* (absolute path → text or placeholder)."""
        root = Path(path).resolve()
        if not root.is_dir():
            raise SourceReadError(f"Error reading directory {path}: not a directory")

        max_size = self._config.max_source_file_size
        skip_hidden = self._config.skip_hidden
        contents: dict[str, str] = {}

        def _on_error(err: OSError) -> None:
            logger.warning(f"Cannot walk {err.filename}: {err.strerror}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            if skip_hidden:
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            dirnames.sort()
            for filename in sorted(filenames):
                file_path = Path(dirpath) / filename
                contents[str(file_path)] = self._read_entry(file_path, max_size)

        logger.debug(f"Collected {len(contents)} file(s) from {root}")
        return contents

    @staticmethod
    def _read_entry(file_path: Path, max_size: int) -> str:
        try:
            size = file_path.stat().st_size
        except OSError as e:
            return f"[Error reading file: {e}]"
        if size > max_size or file_path.name.startswith("."):
            return f"[File too large or hidden: {size} bytes]"
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return f"[Error reading file: {e}]"
