"""Backup record models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class BackupEntry:
    """One immutable snapshot of a file."""

    id: str
    file_path: str  # Canonical absolute path of the original file
    timestamp: str  # ISO-8601, UTC
    operation: str  # Command that produced the backup (e.g. 'docstrings')

    def to_file_record(self) -> dict[str, Any]:
        """Serialize for the per-file list (path is the dict key)."""
        return {"id": self.id, "timestamp": self.timestamp, "operation": self.operation}

    def to_history_record(self) -> dict[str, Any]:
        """Serialize for the global history list."""
        return {
            "id": self.id,
            "filePath": self.file_path,
            "timestamp": self.timestamp,
            "operation": self.operation,
        }


class RestoreFailure(str, Enum):
    """Why a restore request could not be satisfied."""

    NO_BACKUPS_FOR_FILE = "no_backups_for_file"
    BACKUP_ID_NOT_FOUND = "backup_id_not_found"
    NO_HISTORY = "no_history"
    BACKUP_FILE_MISSING = "backup_file_missing"
    TARGET_MISSING = "target_missing"
    IO_ERROR = "io_error"


@dataclass
class RestoreResult:
    """Result of a restore operation."""

    success: bool = True
    file_path: str = ""
    timestamp: str = ""
    operation: str = ""
    backup_id: str = ""
    reason: RestoreFailure | None = None
    error: str = ""
    warnings: list[str] = field(default_factory=list)
