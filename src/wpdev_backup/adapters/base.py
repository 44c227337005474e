"""Data store protocol definition.

Defines the ``DataStore`` Protocol that every backend must implement.
The orchestrator only ever talks to this interface, so its decision
logic can be exercised with in-memory fakes.

Usage:
    from wpdev_backup.adapters.base import DataStore

    def snapshot(store: DataStore, path: Path) -> None:
        if store.row_count("wp_posts") > 0:
            store.export(path)
"""

from pathlib import Path
from typing import Protocol


class DataStore(Protocol):
    """Database access interface used by the backup orchestrator.

    All methods are blocking.  Implementations raise
    ``ExternalCommandFailure`` when the underlying tool or connection
    fails; they never return partial results.
    """

    def row_count(self, table: str) -> int:
        """Count rows in a table.

        Args:
            table: Table name (already validated as a plain identifier).

        Returns:
            Number of rows in ``table``.

        Raises:
            ExternalCommandFailure: If the count could not be obtained.

        Example:
            if store.row_count("wp_posts") == 0:
                ...
        """
        ...

    def export(self, path: Path) -> None:
        """Write a full logical dump of the database to ``path``.

        Raises:
            ExternalCommandFailure: If the dump fails.
        """
        ...

    def import_dump(self, path: Path) -> None:
        """Load a full logical dump from ``path`` into the database.

        Raises:
            ExternalCommandFailure: If the import fails.  The database may be
                left partially loaded.
        """
        ...
