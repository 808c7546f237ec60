"""Restore manager — copy a backup blob back over its original file."""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from duq.core.backup import BackupQueryProtocol, canonical_path
from duq.models.backup_record import BackupEntry, RestoreFailure, RestoreResult


class RestoreManager:
    """
    Resolve a restore request to one backup entry and write it back.

    Resolution only ever picks "most recent" or an explicit id:

      * file + id     → that id within the file's list
      * file only     → newest backup of the file
      * neither       → newest backup across all files
    """

    def __init__(self, backups: BackupQueryProtocol) -> None:
        self._backups = backups

    def resolve(
        self, file_path: str | Path | None = None, backup_id: str | None = None
    ) -> BackupEntry | RestoreResult:
        """Return the entry to restore, or a failed RestoreResult explaining why not."""
        if file_path:
            path = canonical_path(file_path)
            entries = self._backups.list_backups(path)
            if not entries:
                return _failure(RestoreFailure.NO_BACKUPS_FOR_FILE, f"No backups found for {path}", path)
            if not backup_id:
                return entries[0]
            for entry in entries:
                if entry.id == backup_id:
                    return entry
            return _failure(
                RestoreFailure.BACKUP_ID_NOT_FOUND,
                f"Backup ID {backup_id} not found for {path}",
                path,
            )

        history = self._backups.list_backups()
        if not history:
            return _failure(RestoreFailure.NO_HISTORY, "No backup history found")
        return history[0]

    def restore_backup(
        self, file_path: str | Path | None = None, backup_id: str | None = None
    ) -> RestoreResult:
        """Overwrite the original file with the selected backup. Never raises."""
        try:
            resolved = self.resolve(file_path, backup_id)
        except (OSError, RuntimeError) as e:
            logger.error(f"Error restoring backup: {e}")
            return _failure(RestoreFailure.IO_ERROR, f"Error restoring backup: {e}", str(file_path or ""))
        if isinstance(resolved, RestoreResult):
            logger.error(resolved.error)
            return resolved

        entry = resolved
        blob = self._backups.blob_path(entry.id)
        target = Path(entry.file_path)

        if not blob.is_file():
            result = _failure(RestoreFailure.BACKUP_FILE_MISSING, f"Backup file not found: {blob}", entry.file_path)
        elif not target.exists():
            result = _failure(
                RestoreFailure.TARGET_MISSING, f"Target file no longer exists: {target}", entry.file_path
            )
        else:
            try:
                shutil.copyfile(blob, target)
            except OSError as e:
                result = _failure(RestoreFailure.IO_ERROR, f"Error restoring backup: {e}", entry.file_path)
            else:
                logger.info(f"Restored {target} from backup taken {entry.timestamp} ({entry.operation})")
                return RestoreResult(
                    success=True,
                    file_path=entry.file_path,
                    timestamp=entry.timestamp,
                    operation=entry.operation,
                    backup_id=entry.id,
                )

        result.backup_id = entry.id
        logger.error(result.error)
        return result


def _failure(reason: RestoreFailure, message: str, file_path: str = "") -> RestoreResult:
    return RestoreResult(success=False, file_path=file_path, reason=reason, error=message)
