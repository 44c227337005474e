"""Idempotent backup-or-restore orchestration.

``BackupOrchestrator.run`` reads the sentinel table's row count once and
performs exactly one action:

- empty database + artifact present  -> restore the newest artifact
- empty database + no artifact       -> nothing ("starting empty")
- database has rows                  -> export a new timestamped artifact

The store is any ``DataStore``; the orchestrator never shells out itself.

Usage:
    from wpdev_backup.backup.orchestrator import BackupOrchestrator
    from wpdev_backup.config.models import BackupSettings

    orchestrator = BackupOrchestrator(store, BackupSettings(backup_dir=Path("backups")))
    outcome = orchestrator.run()
    print(outcome.message)
"""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from wpdev_backup.adapters.base import DataStore
from wpdev_backup.backup.artifacts import find_latest_artifact, new_artifact_path
from wpdev_backup.backup.models import BackupOutcome
from wpdev_backup.config.models import BackupSettings
from wpdev_backup.errors import ExternalCommandFailure, NoBackupAvailable, ProbeFailed

logger = logging.getLogger(__name__)


class BackupOrchestrator:
    """Decides between restore and export for one database.

    Args:
        store: Data store to query, export from and import into.
        settings: Backup directory, sentinel table and fail-open policy.
        now: Wall-clock source used for artifact timestamps.
    """

    def __init__(
        self,
        store: DataStore,
        settings: BackupSettings,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._settings = settings
        self._now = now

    @property
    def backup_dir(self) -> Path:
        return self._settings.backup_dir

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def probe_row_count(self) -> tuple[int, bool]:
        """Read the sentinel row count once.

        Returns:
            ``(row_count, probe_failed)``.  ``probe_failed`` is True when the
            query failed and fail-open downgraded it to zero rows.

        Raises:
            ProbeFailed: If the query failed and ``fail_open`` is disabled.
        """
        table = self._settings.sentinel_table
        try:
            return self._store.row_count(table), False
        except ExternalCommandFailure as e:
            if not self._settings.fail_open:
                raise ProbeFailed(f"Could not count rows in {table}: {e}") from e
            logger.warning(
                "Row count query on %s failed, treating database as empty: %s", table, e
            )
            return 0, True

    def run(self) -> BackupOutcome:
        """Restore or export depending on whether the database has data.

        Returns:
            ``BackupOutcome`` describing the single action taken.

        Raises:
            ProbeFailed: Row count failed with fail-open disabled.
            ExternalCommandFailure: Export or import failed.
            ArtifactCollision: An export in the same second already exists.
        """
        self.backup_dir.mkdir(parents=True, exist_ok=True)

        row_count, probe_failed = self.probe_row_count()

        if row_count == 0:
            logger.info("Database is empty. Attempting to restore from latest backup...")
            latest = find_latest_artifact(self.backup_dir)
            if latest is None:
                logger.info("No backup found. Starting with empty database.")
                return BackupOutcome(action="no_backup", probe_failed=probe_failed)
            outcome = self._restore(latest)
        else:
            logger.info("Database has data. Exporting current state to unique backup...")
            outcome = self._export()

        return outcome.model_copy(update={"row_count": row_count, "probe_failed": probe_failed})

    # ------------------------------------------------------------------
    # Forced actions
    # ------------------------------------------------------------------

    def export(self) -> BackupOutcome:
        """Export unconditionally into a new artifact."""
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        return self._export()

    def restore(self, artifact: Path | None = None) -> BackupOutcome:
        """Restore ``artifact`` (or the latest one) unconditionally.

        Raises:
            NoBackupAvailable: If no artifact was given and none exists.
            FileNotFoundError: If the given artifact does not exist.
        """
        if artifact is None:
            artifact = find_latest_artifact(self.backup_dir)
            if artifact is None:
                raise NoBackupAvailable(f"No backup found in {self.backup_dir}")
        elif not artifact.is_file():
            raise FileNotFoundError(f"Backup file not found: {artifact}")
        return self._restore(artifact)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _restore(self, artifact: Path) -> BackupOutcome:
        self._store.import_dump(artifact)
        logger.info("Database restored successfully from backup: %s", artifact)
        return BackupOutcome(action="restored", artifact=artifact)

    def _export(self) -> BackupOutcome:
        target = new_artifact_path(self.backup_dir, self._now())

        # Dump to a side file so a failed export never looks like an artifact
        partial = target.with_name(target.name + ".partial")
        try:
            self._store.export(partial)
            partial.rename(target)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

        logger.info("Backup created: %s", target)
        return BackupOutcome(action="exported", artifact=target)
