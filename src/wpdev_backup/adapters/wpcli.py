"""wp-cli data store running inside the wp-cli container.

Provides ``WpCliDataStore``, a ``DataStore`` implementation that drives
``wp db query/export/import`` through ``docker exec`` and moves dump
files between host and container with ``docker cp``.

Usage:
    from wpdev_backup.adapters.docker import DockerRuntime
    from wpdev_backup.adapters.wpcli import WpCliDataStore

    store = WpCliDataStore(DockerRuntime(), container="webdevwordpress-wpcli")
    if store.row_count("wp_posts"):
        store.export(Path("backups/db-backup-2026-01-15-101500.sql"))
"""

import logging
from pathlib import Path

from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.errors import ExternalCommandFailure

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = "/var/www/html/wpcli-cache/db-backup.sql"


class WpCliDataStore:
    """``DataStore`` backed by wp-cli in a running container.

    Args:
        runtime: Docker runtime used for ``exec`` and ``cp``.
        container: Name of the container that has ``wp`` installed.
        cache_path: Scratch path inside the container used to stage dumps.
    """

    def __init__(
        self,
        runtime: DockerRuntime,
        container: str,
        cache_path: str = DEFAULT_CACHE_PATH,
    ) -> None:
        self._runtime = runtime
        self._container = container
        self._cache_path = cache_path

    def _wp(self, *args: str) -> str:
        result = self._runtime.exec(self._container, ["wp", *args, "--allow-root"])
        return result.stdout

    def row_count(self, table: str) -> int:
        out = self._wp(
            "db", "query", f"SELECT COUNT(*) FROM {table};", "--skip-column-names"
        )
        value = out.strip().splitlines()[-1].strip() if out.strip() else ""
        try:
            return int(value)
        except ValueError as e:
            raise ExternalCommandFailure(
                f"Unexpected row count output for {table}: {out.strip()!r}"
            ) from e

    def export(self, path: Path) -> None:
        logger.debug("Exporting database via wp-cli to %s", self._cache_path)
        self._wp("db", "export", self._cache_path)
        self._runtime.copy_from(self._container, self._cache_path, path)

    def import_dump(self, path: Path) -> None:
        logger.debug("Staging %s at %s:%s", path, self._container, self._cache_path)
        self._runtime.copy_to(path, self._container, self._cache_path)
        self._wp("db", "import", self._cache_path)
