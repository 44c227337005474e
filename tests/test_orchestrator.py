"""Tests for the backup-or-restore decision.

Uses an in-memory ``DataStore`` fake so no docker or database is needed.
"""

import ast
import os
import time
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from wpdev_backup.backup.artifacts import artifact_name
from wpdev_backup.backup.orchestrator import BackupOrchestrator
from wpdev_backup.config.models import BackupSettings
from wpdev_backup.errors import (
    ArtifactCollision,
    ExternalCommandFailure,
    NoBackupAvailable,
    ProbeFailed,
)

ORCHESTRATOR_PY = (
    Path(__file__).parent.parent / "src" / "wpdev_backup" / "backup" / "orchestrator.py"
)

FIXED_NOW = datetime(2026, 1, 15, 10, 15, 0)


class FakeDataStore:
    """Records calls; exports write a small dump file."""

    def __init__(
        self,
        rows: int = 0,
        fail_count: bool = False,
        fail_export: bool = False,
        fail_import: bool = False,
    ) -> None:
        self.rows = rows
        self.fail_count = fail_count
        self.fail_export = fail_export
        self.fail_import = fail_import
        self.count_calls: list[str] = []
        self.exported: list[Path] = []
        self.imported: list[Path] = []

    def row_count(self, table: str) -> int:
        self.count_calls.append(table)
        if self.fail_count:
            raise ExternalCommandFailure("wp db query failed", returncode=1)
        return self.rows

    def export(self, path: Path) -> None:
        if self.fail_export:
            path.write_text("-- truncated")
            raise ExternalCommandFailure("wp db export failed", returncode=1)
        path.write_text("-- dump\n")
        self.exported.append(path)

    def import_dump(self, path: Path) -> None:
        if self.fail_import:
            raise ExternalCommandFailure("wp db import failed", returncode=1)
        self.imported.append(path)


def _settings(backup_dir: Path, **kwargs) -> BackupSettings:
    return BackupSettings(backup_dir=backup_dir, sentinel_table="wp_posts", **kwargs)


def _orchestrator(store, backup_dir: Path, now=lambda: FIXED_NOW, **kwargs):
    return BackupOrchestrator(store, _settings(backup_dir, **kwargs), now=now)


def _write_artifact(directory: Path, name: str, mtime: float) -> Path:
    path = directory / name
    path.write_text(f"-- {name}\n")
    os.utime(path, (mtime, mtime))
    return path


# ------------------------------------------------------------------
# Empty database
# ------------------------------------------------------------------


class TestEmptyDatabase:
    """Zero rows in the sentinel table leads to the restore path."""

    def test_restores_newest_of_three(self, tmp_path):
        now = time.time()
        _write_artifact(tmp_path, "db-backup-2026-01-01-000000.sql", now - 300)
        newest = _write_artifact(tmp_path, "db-backup-2026-01-02-000000.sql", now - 5)
        _write_artifact(tmp_path, "db-backup-2026-01-03-000000.sql", now - 100)

        store = FakeDataStore(rows=0)
        outcome = _orchestrator(store, tmp_path).run()

        assert outcome.action == "restored"
        assert outcome.artifact == newest
        assert store.imported == [newest]
        assert store.exported == []
        assert "restored successfully" in outcome.message

    def test_no_backup_available_is_not_an_error(self, tmp_path):
        store = FakeDataStore(rows=0)
        outcome = _orchestrator(store, tmp_path).run()

        assert outcome.action == "no_backup"
        assert outcome.artifact is None
        assert outcome.message == "No backup found. Starting with empty database."

    def test_no_backup_has_no_side_effects(self, tmp_path):
        store = FakeDataStore(rows=0)
        _orchestrator(store, tmp_path).run()

        assert store.imported == []
        assert store.exported == []
        assert list(tmp_path.iterdir()) == []

    def test_creates_missing_backup_dir(self, tmp_path):
        backup_dir = tmp_path / "nested" / "backups"
        outcome = _orchestrator(FakeDataStore(rows=0), backup_dir).run()
        assert backup_dir.is_dir()
        assert outcome.action == "no_backup"

    def test_import_failure_is_fatal(self, tmp_path):
        _write_artifact(tmp_path, "db-backup-2026-01-01-000000.sql", time.time())
        store = FakeDataStore(rows=0, fail_import=True)
        with pytest.raises(ExternalCommandFailure, match="import"):
            _orchestrator(store, tmp_path).run()


# ------------------------------------------------------------------
# Populated database
# ------------------------------------------------------------------


class TestPopulatedDatabase:
    """Nonzero rows lead to an export into a new artifact."""

    def test_exports_exactly_one_new_file(self, tmp_path):
        existing = _write_artifact(
            tmp_path, "db-backup-2025-12-31-235959.sql", time.time() - 60
        )
        store = FakeDataStore(rows=12)

        outcome = _orchestrator(store, tmp_path).run()

        expected = tmp_path / artifact_name(FIXED_NOW)
        assert outcome.action == "exported"
        assert outcome.artifact == expected
        assert outcome.row_count == 12
        assert set(tmp_path.iterdir()) == {existing, expected}
        assert expected.read_text() == "-- dump\n"

    def test_store_left_unmodified(self, tmp_path):
        store = FakeDataStore(rows=3)
        _orchestrator(store, tmp_path).run()
        assert store.imported == []
        assert store.rows == 3

    def test_two_runs_one_second_apart_do_not_collide(self, tmp_path):
        moments = iter([FIXED_NOW, FIXED_NOW + timedelta(seconds=1)])
        orchestrator = _orchestrator(FakeDataStore(rows=1), tmp_path, now=lambda: next(moments))

        first = orchestrator.run()
        second = orchestrator.run()

        assert first.artifact != second.artifact
        assert len(list(tmp_path.glob("*.sql"))) == 2

    def test_two_runs_same_second_collide(self, tmp_path):
        """Same-second runs map to one name; the second run refuses to overwrite."""
        orchestrator = _orchestrator(FakeDataStore(rows=1), tmp_path)
        first = orchestrator.run()

        with pytest.raises(ArtifactCollision):
            orchestrator.run()

        assert list(tmp_path.glob("*.sql")) == [first.artifact]
        assert first.artifact.read_text() == "-- dump\n"

    def test_export_failure_leaves_no_artifact(self, tmp_path):
        store = FakeDataStore(rows=5, fail_export=True)
        with pytest.raises(ExternalCommandFailure, match="export"):
            _orchestrator(store, tmp_path).run()
        assert list(tmp_path.iterdir()) == []


# ------------------------------------------------------------------
# Row-count probe policy
# ------------------------------------------------------------------


class TestRowCountProbe:
    """Single read, and fail-open vs ProbeFailed."""

    def test_row_count_read_once_per_run(self, tmp_path):
        store = FakeDataStore(rows=4)
        _orchestrator(store, tmp_path).run()
        assert store.count_calls == ["wp_posts"]

    def test_fail_open_treats_failure_as_empty(self, tmp_path):
        newest = _write_artifact(tmp_path, "db-backup-2026-01-01-000000.sql", time.time())
        store = FakeDataStore(fail_count=True)

        outcome = _orchestrator(store, tmp_path, fail_open=True).run()

        assert outcome.probe_failed is True
        assert outcome.action == "restored"
        assert store.imported == [newest]

    def test_fail_open_without_backup(self, tmp_path):
        outcome = _orchestrator(FakeDataStore(fail_count=True), tmp_path).run()
        assert outcome.action == "no_backup"
        assert outcome.probe_failed is True

    def test_fail_closed_raises_probe_failed(self, tmp_path):
        _write_artifact(tmp_path, "db-backup-2026-01-01-000000.sql", time.time())
        store = FakeDataStore(fail_count=True)

        with pytest.raises(ProbeFailed, match="wp_posts") as exc_info:
            _orchestrator(store, tmp_path, fail_open=False).run()

        assert isinstance(exc_info.value.__cause__, ExternalCommandFailure)
        assert store.imported == []
        assert store.exported == []

    def test_successful_probe_not_flagged(self, tmp_path):
        outcome = _orchestrator(FakeDataStore(rows=0), tmp_path).run()
        assert outcome.probe_failed is False


# ------------------------------------------------------------------
# Forced actions
# ------------------------------------------------------------------


class TestForcedActions:
    def test_export_ignores_row_count(self, tmp_path):
        store = FakeDataStore(rows=0)
        outcome = _orchestrator(store, tmp_path).export()
        assert outcome.action == "exported"
        assert store.count_calls == []
        assert outcome.artifact.exists()

    def test_restore_latest(self, tmp_path):
        now = time.time()
        _write_artifact(tmp_path, "old.sql", now - 50)
        newest = _write_artifact(tmp_path, "new.sql", now)
        store = FakeDataStore(rows=99)

        outcome = _orchestrator(store, tmp_path).restore()

        assert outcome.artifact == newest
        assert store.imported == [newest]
        assert store.count_calls == []

    def test_restore_explicit_path(self, tmp_path):
        chosen = _write_artifact(tmp_path, "chosen.sql", time.time() - 500)
        _write_artifact(tmp_path, "newer.sql", time.time())
        store = FakeDataStore()

        outcome = _orchestrator(store, tmp_path).restore(chosen)

        assert outcome.artifact == chosen
        assert store.imported == [chosen]

    def test_restore_without_backup_raises(self, tmp_path):
        with pytest.raises(NoBackupAvailable):
            _orchestrator(FakeDataStore(), tmp_path).restore()

    def test_restore_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            _orchestrator(FakeDataStore(), tmp_path).restore(tmp_path / "gone.sql")


# ------------------------------------------------------------------
# Source-level checks
# ------------------------------------------------------------------


class TestNoProcessCalls:
    """The orchestrator reaches external tools only through the DataStore."""

    def test_no_subprocess_import(self):
        tree = ast.parse(ORCHESTRATOR_PY.read_text())
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    assert alias.name not in {"subprocess", "os"}
            if isinstance(node, ast.ImportFrom) and node.module:
                assert not node.module.startswith("wpdev_backup.adapters.runner")
                assert not node.module.startswith("wpdev_backup.adapters.docker")

    def test_no_hardcoded_container_names(self):
        source = ORCHESTRATOR_PY.read_text()
        assert "webdevwordpress" not in source
