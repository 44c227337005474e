"""Backup-or-restore orchestration and artifact handling.

Usage:
    from wpdev_backup.backup import BackupOrchestrator, BackupOutcome
    from wpdev_backup.backup import find_latest_artifact, list_artifacts
"""

from wpdev_backup.backup.artifacts import (
    artifact_name,
    find_latest_artifact,
    list_artifacts,
    new_artifact_path,
)
from wpdev_backup.backup.models import BackupArtifact, BackupOutcome
from wpdev_backup.backup.orchestrator import BackupOrchestrator

__all__ = [
    "BackupOrchestrator",
    "BackupOutcome",
    "BackupArtifact",
    "artifact_name",
    "new_artifact_path",
    "list_artifacts",
    "find_latest_artifact",
]
