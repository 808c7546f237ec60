"""Application configuration — JSON-based, with file locking and batch update support."""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

# Default data directory
_DEFAULT_DATA_DIR = Path.home() / ".duq"


class Config:
    """JSON-based application configuration with file locking."""

    _DEFAULTS: dict[str, Any] = {
        # Backups
        "backup_path": "",
        "max_backups_per_file": 10,
        "max_history": 100,
        "backup_commands": ["document", "test", "docstrings", "security"],
        # External assistant
        "assistant": {
            "command": "q",
            "chat_args": ["chat", "--no-interactive", "--trust-all-tools"],
            "timeout": 600,
            "max_prompt_chars": 100_000,
        },
        # Source gathering
        "source": {
            "max_file_size": 100_000,
            "skip_hidden": True,
        },
    }

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._dir = Path(data_dir) if data_dir else _DEFAULT_DATA_DIR
        self._path = self._dir / "config.json"
        self._lock = threading.Lock()
        self._defer_save = False
        self._load()

    def _load(self) -> None:
        """Load config from disk, merging with defaults."""
        self._data = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    user_data = json.load(f)
                if isinstance(user_data, dict):
                    self._deep_merge(self._data, user_data)
                else:
                    logger.warning(f"Ignoring non-object config file: {self._path}")
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to load config, using defaults: {e}")

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _save(self) -> None:
        """Persist config to disk with file locking."""
        if self._defer_save:
            return
        with self._lock:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(".tmp")
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                tmp_path.replace(self._path)
            except OSError as e:
                logger.error(f"Failed to save config: {e}")
                if tmp_path.exists():
                    tmp_path.unlink(missing_ok=True)

    @contextmanager
    def batch_update(self) -> Iterator[None]:
        """Context manager for batching multiple config changes into a single write."""
        self._defer_save = True
        try:
            yield
        finally:
            self._defer_save = False
            self._save()

    # ── Generic access ──

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key path."""
        parts = key.split(".")
        node = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a config value by dot-separated key path."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def log_dir(self) -> Path:
        return self._dir / "logs"

    @property
    def backup_path(self) -> Path:
        raw = self._data.get("backup_path", "")
        return Path(raw) if raw else self._dir / "backups"

    @backup_path.setter
    def backup_path(self, value: Path | None) -> None:
        self.set("backup_path", str(value) if value else "")

    @property
    def index_path(self) -> Path:
        return self._dir / "backup-index.json"

    @property
    def max_backups_per_file(self) -> int:
        return int(self._data.get("max_backups_per_file", 10))

    @max_backups_per_file.setter
    def max_backups_per_file(self, value: int) -> None:
        self.set("max_backups_per_file", value)

    @property
    def max_history(self) -> int:
        return int(self._data.get("max_history", 100))

    @max_history.setter
    def max_history(self, value: int) -> None:
        self.set("max_history", value)

    @property
    def backup_commands(self) -> list[str]:
        return list(self._data.get("backup_commands", []))

    def backs_up(self, command: str) -> bool:
        """Whether *command* snapshots existing files before overwriting them."""
        return command in self.backup_commands

    @property
    def assistant_command(self) -> str:
        return self.get("assistant.command", "q")

    @property
    def assistant_chat_args(self) -> list[str]:
        return list(self.get("assistant.chat_args", []))

    @property
    def assistant_timeout(self) -> float | None:
        raw = self.get("assistant.timeout")
        return float(raw) if raw else None

    @property
    def max_prompt_chars(self) -> int:
        return int(self.get("assistant.max_prompt_chars", 0) or 0)

    @property
    def max_source_file_size(self) -> int:
        return int(self.get("source.max_file_size", 100_000))

    @property
    def skip_hidden(self) -> bool:
        return bool(self.get("source.skip_hidden", True))
