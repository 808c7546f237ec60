"""Backup manager — timestamped file snapshots with a JSON index."""

from __future__ import annotations

import hashlib
import json
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from loguru import logger

from duq.models.backup_record import BackupEntry

if TYPE_CHECKING:
    from duq.config import Config


class BackupQueryProtocol(Protocol):
    """Read-only backup query interface for RestoreManager decoupling."""

    def list_backups(self, file_path: str | Path | None = None) -> list[BackupEntry]: ...

    def blob_path(self, backup_id: str) -> Path: ...


def canonical_path(file_path: str | Path) -> str:
    """Absolute, symlink-resolved path string used as the index key."""
    return str(Path(file_path).expanduser().resolve())


class BackupManager:
    """
    Snapshot store for files about to be overwritten. Also implements BackupQueryProtocol.

    Entries live in a single arena keyed by id. Two ordered id lists, newest
    first, reference the arena:

      * per-file lists, capped at ``max_backups_per_file``; evicting an id
        from here deletes its blob
      * the global history, capped at ``max_history``; evicting from here
        never touches blobs

    An entry leaves the arena once neither list references it.

    On-disk layout::

        {backup_path}/{id}          raw copy of the file
        {data_dir}/backup-index.json
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._entries: dict[str, BackupEntry] = {}
        self._files: dict[str, list[str]] = {}
        self._history: list[str] = []
        self._last_stamp: datetime | None = None
        self._load_index()

    @property
    def backup_root(self) -> Path:
        return self._config.backup_path

    @property
    def index_path(self) -> Path:
        return self._config.index_path

    def _ensure_backup_root(self) -> Path:
        root = self.backup_root
        root.mkdir(parents=True, exist_ok=True)
        return root

    def blob_path(self, backup_id: str) -> Path:
        return self.backup_root / backup_id

    # ── Index persistence ──

    def _load_index(self) -> None:
        """Load the index from disk; start empty if it is missing or corrupt."""
        path = self.index_path
        if not path.exists():
            logger.debug(f"No backup index at {path}, creating an empty one")
            try:
                self._write_index(self._files, self._history, self._entries)
            except OSError as e:
                logger.error(f"Error saving backup index: {e}")
            return

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("index root is not an object")
            self._parse_index(data)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading backup index, starting empty: {e}")
            self._entries, self._files, self._history = {}, {}, []
            return

        if self._history:
            try:
                stamp = datetime.fromisoformat(self._entries[self._history[0]].timestamp)
            except (TypeError, ValueError):
                stamp = None
            # Offset-less stamps are taken as UTC
            if stamp is not None and stamp.tzinfo is None:
                stamp = stamp.replace(tzinfo=timezone.utc)
            self._last_stamp = stamp

    def _parse_index(self, data: dict[str, Any]) -> None:
        history = data.get("history", [])
        files = data.get("files", {})
        if not isinstance(history, list):
            raise ValueError("'history' is not a list")
        if not isinstance(files, dict):
            raise ValueError("'files' is not an object")
        if not all(isinstance(records, list) for records in files.values()):
            raise ValueError("per-file backup records are not lists")

        for record in history:
            try:
                entry = BackupEntry(
                    id=record["id"],
                    file_path=record["filePath"],
                    timestamp=record["timestamp"],
                    operation=record.get("operation", ""),
                )
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed history record: {e}")
                continue
            self._entries.setdefault(entry.id, entry)
            self._history.append(entry.id)

        for file_path, records in files.items():
            ids: list[str] = []
            for record in records:
                try:
                    entry = self._entries.get(record["id"]) or BackupEntry(
                        id=record["id"],
                        file_path=file_path,
                        timestamp=record["timestamp"],
                        operation=record.get("operation", ""),
                    )
                except (KeyError, TypeError, AttributeError) as e:
                    logger.warning(f"Skipping malformed backup record for {file_path}: {e}")
                    continue
                self._entries.setdefault(entry.id, entry)
                ids.append(entry.id)
            if ids:
                self._files[file_path] = ids

    def _write_index(
        self,
        files: dict[str, list[str]],
        history: list[str],
        entries: dict[str, BackupEntry],
    ) -> None:
        """Atomically persist the index. Raises OSError on failure."""
        data = {
            "files": {
                path: [entries[eid].to_file_record() for eid in ids]
                for path, ids in files.items()
            },
            "history": [entries[eid].to_history_record() for eid in history],
        }
        path = self.index_path
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp.replace(path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    # ── Creation ──

    def _next_timestamp(self) -> datetime:
        """UTC now, bumped so that every stamp issued by this store is unique."""
        now = datetime.now(tz=timezone.utc)
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = now
        return now

    @staticmethod
    def make_backup_id(file_path: str, stamp: datetime) -> str:
        digest = hashlib.md5(file_path.encode("utf-8")).hexdigest()
        return f"{digest}-{stamp.strftime('%Y%m%dT%H%M%S%fZ')}"

    def create_backup(self, file_path: str | Path, operation: str) -> str | None:
        """
        Snapshot *file_path* before it is overwritten by *operation*.

        Best effort: any I/O failure is logged and ``None`` is returned so the
        caller's write can still go ahead.
        """
        try:
            path = canonical_path(file_path)
            stamp = self._next_timestamp()
            entry = BackupEntry(
                id=self.make_backup_id(path, stamp),
                file_path=path,
                timestamp=stamp.isoformat(),
                operation=operation,
            )
            blob = self._ensure_backup_root() / entry.id
            shutil.copyfile(path, blob)
        except (OSError, RuntimeError) as e:
            logger.error(f"Error creating backup of {file_path}: {e}")
            return None

        limit = self._config.max_backups_per_file
        file_ids = [entry.id, *self._files.get(path, [])]
        evicted = file_ids[limit:]
        history = [entry.id, *self._history]
        dropped = history[self._config.max_history:]

        files = dict(self._files)
        files[path] = file_ids[:limit]
        history = history[: self._config.max_history]
        entries = dict(self._entries)
        entries[entry.id] = entry

        live_history = set(history)
        for eid in {*evicted, *dropped}:
            owner = entries[eid].file_path
            if eid not in live_history and eid not in files.get(owner, []):
                del entries[eid]

        try:
            self._write_index(files, history, entries)
        except OSError as e:
            logger.error(f"Error saving backup index: {e}")
            blob.unlink(missing_ok=True)
            return None

        self._entries, self._files, self._history = entries, files, history

        for eid in evicted:
            try:
                self.blob_path(eid).unlink(missing_ok=True)
                logger.debug(f"Rotated old backup: {eid}")
            except OSError as e:
                logger.warning(f"Failed to remove old backup {eid}: {e}")

        logger.debug(f"Created backup {entry.id} of {path} ({operation})")
        return entry.id

    # ── Queries ──

    def list_backups(self, file_path: str | Path | None = None) -> list[BackupEntry]:
        """Backups for one file, or the global history; newest first."""
        try:
            if file_path is None:
                ids = self._history
            else:
                ids = self._files.get(canonical_path(file_path), [])
            return [self._entries[eid] for eid in ids]
        except (OSError, RuntimeError, KeyError) as e:
            logger.error(f"Error listing backups: {e}")
            return []
