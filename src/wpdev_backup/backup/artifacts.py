"""Backup artifact naming and lookup.

Artifacts are flat files named ``db-backup-YYYY-MM-DD-HHMMSS.sql``.
Names have one-second resolution; two exports in the same second map to
the same name, which ``new_artifact_path`` reports as
``ArtifactCollision`` instead of overwriting.

Usage:
    from wpdev_backup.backup.artifacts import find_latest_artifact, new_artifact_path

    latest = find_latest_artifact(Path("backups"))
    target = new_artifact_path(Path("backups"), datetime.now())
"""

from datetime import datetime
from pathlib import Path

from wpdev_backup.backup.models import BackupArtifact
from wpdev_backup.errors import ArtifactCollision

ARTIFACT_PREFIX = "db-backup-"
ARTIFACT_SUFFIX = ".sql"
TIMESTAMP_FORMAT = "%Y-%m-%d-%H%M%S"


def artifact_name(moment: datetime) -> str:
    """File name for an artifact created at ``moment``.

    Example:
        >>> artifact_name(datetime(2026, 1, 15, 9, 5, 7))
        'db-backup-2026-01-15-090507.sql'
    """
    return f"{ARTIFACT_PREFIX}{moment.strftime(TIMESTAMP_FORMAT)}{ARTIFACT_SUFFIX}"


def new_artifact_path(directory: Path, moment: datetime) -> Path:
    """Path for a new artifact; never points at an existing file.

    Raises:
        ArtifactCollision: If an artifact with the same timestamp exists.
    """
    path = directory / artifact_name(moment)
    if path.exists():
        raise ArtifactCollision(
            f"Backup artifact already exists: {path} "
            f"(another backup was taken within the same second)"
        )
    return path


def list_artifacts(directory: Path) -> list[BackupArtifact]:
    """All ``*.sql`` files in ``directory``, newest modification first.

    A missing directory yields an empty list.
    """
    if not directory.is_dir():
        return []

    artifacts: list[BackupArtifact] = []
    for path in directory.glob(f"*{ARTIFACT_SUFFIX}"):
        if not path.is_file():
            continue
        stat = path.stat()
        artifacts.append(
            BackupArtifact(
                path=path,
                size=stat.st_size,
                modified_at=datetime.fromtimestamp(stat.st_mtime),
            )
        )

    # Ties on mtime fall back to name so the order is deterministic
    artifacts.sort(key=lambda a: (a.modified_at, a.path.name), reverse=True)
    return artifacts


def find_latest_artifact(directory: Path) -> Path | None:
    """Most recently modified ``*.sql`` file in ``directory``, or None."""
    artifacts = list_artifacts(directory)
    return artifacts[0].path if artifacts else None
