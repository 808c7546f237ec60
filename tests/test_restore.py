"""Tests for the RestoreManager."""

from __future__ import annotations

from pathlib import Path

import pytest

from duq.config import Config
from duq.core.backup import BackupManager
from duq.core.restore import RestoreManager
from duq.models.backup_record import RestoreFailure


@pytest.fixture
def backups(config: Config) -> BackupManager:
    return BackupManager(config)


@pytest.fixture
def restorer(backups: BackupManager) -> RestoreManager:
    return RestoreManager(backups)


@pytest.fixture
def target(tmp_path: Path) -> Path:
    path = tmp_path / "module.py"
    path.write_bytes(b"content A\x00\xff\r\n")
    return path


class TestRestoreResolution:
    def test_restores_most_recent_backup_byte_for_byte(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        backups.create_backup(target, "docstrings")
        target.write_bytes(b"content B")

        result = restorer.restore_backup(target)

        assert result.success
        assert target.read_bytes() == b"content A\x00\xff\r\n"

    def test_result_describes_restored_entry(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        backup_id = backups.create_backup(target, "docstrings")
        entry = backups.list_backups(target)[0]

        result = restorer.restore_backup(target)

        assert result.file_path == str(target.resolve())
        assert result.timestamp == entry.timestamp
        assert result.operation == "docstrings"
        assert result.backup_id == backup_id
        assert result.reason is None

    def test_explicit_id_wins_over_recency(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        target.write_text("first", encoding="utf-8")
        first = backups.create_backup(target, "x")
        target.write_text("second", encoding="utf-8")
        backups.create_backup(target, "y")
        target.write_text("current", encoding="utf-8")

        result = restorer.restore_backup(target, first)

        assert result.success
        assert result.operation == "x"
        assert target.read_text(encoding="utf-8") == "first"

    def test_without_file_uses_newest_backup_overall(
        self, backups: BackupManager, restorer: RestoreManager, tmp_path: Path
    ) -> None:
        older = tmp_path / "older.txt"
        newer = tmp_path / "newer.txt"
        older.write_text("older original", encoding="utf-8")
        newer.write_text("newer original", encoding="utf-8")
        backups.create_backup(older, "refactor")
        backups.create_backup(newer, "docstrings")
        older.write_text("older changed", encoding="utf-8")
        newer.write_text("newer changed", encoding="utf-8")

        result = restorer.restore_backup()

        assert result.success
        assert result.file_path == str(newer.resolve())
        assert newer.read_text(encoding="utf-8") == "newer original"
        assert older.read_text(encoding="utf-8") == "older changed"

    def test_restore_does_not_create_backups(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        backups.create_backup(target, "docstrings")
        restorer.restore_backup(target)
        assert len(backups.list_backups()) == 1


class TestRestoreFailures:
    def test_no_backups_for_file(self, restorer: RestoreManager, target: Path) -> None:
        result = restorer.restore_backup(target)
        assert not result.success
        assert result.reason is RestoreFailure.NO_BACKUPS_FOR_FILE
        assert "No backups found" in result.error

    def test_unknown_id_for_file(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        backups.create_backup(target, "docstrings")
        target.write_bytes(b"changed")

        result = restorer.restore_backup(target, "no-such-id")

        assert not result.success
        assert result.reason is RestoreFailure.BACKUP_ID_NOT_FOUND
        assert target.read_bytes() == b"changed"

    def test_id_of_another_file_is_not_found(
        self, backups: BackupManager, restorer: RestoreManager, target: Path, tmp_path: Path
    ) -> None:
        other = tmp_path / "other.py"
        other.write_text("other", encoding="utf-8")
        other_id = backups.create_backup(other, "x")
        backups.create_backup(target, "y")

        result = restorer.restore_backup(target, other_id)

        assert result.reason is RestoreFailure.BACKUP_ID_NOT_FOUND

    def test_no_history(self, restorer: RestoreManager) -> None:
        result = restorer.restore_backup()
        assert not result.success
        assert result.reason is RestoreFailure.NO_HISTORY

    def test_missing_blob(self, backups: BackupManager, restorer: RestoreManager, target: Path) -> None:
        backup_id = backups.create_backup(target, "docstrings")
        backups.blob_path(backup_id).unlink()
        target.write_bytes(b"changed")

        result = restorer.restore_backup(target)

        assert not result.success
        assert result.reason is RestoreFailure.BACKUP_FILE_MISSING
        assert target.read_bytes() == b"changed"

    def test_deleted_target_is_not_recreated(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        backups.create_backup(target, "docstrings")
        target.unlink()

        result = restorer.restore_backup(target)

        assert not result.success
        assert result.reason is RestoreFailure.TARGET_MISSING
        assert "no longer exists" in result.error
        assert not target.exists()

    def test_deleted_target_guard_applies_to_history_restore(
        self, backups: BackupManager, restorer: RestoreManager, target: Path
    ) -> None:
        backups.create_backup(target, "docstrings")
        target.unlink()

        result = restorer.restore_backup()

        assert result.reason is RestoreFailure.TARGET_MISSING
        assert not target.exists()
