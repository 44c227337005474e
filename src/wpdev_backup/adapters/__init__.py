"""Data store adapters package.

Provides the ``DataStore`` Protocol, the wp-cli and direct MySQL
implementations, and the Docker runtime / command runner they sit on.

Usage:
    from wpdev_backup.adapters import DataStore, DockerRuntime, WpCliDataStore
    from wpdev_backup.adapters import MySQLDataStore
"""

from wpdev_backup.adapters.base import DataStore
from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.adapters.mysql import MySQLDataStore
from wpdev_backup.adapters.runner import CommandResult, run_command
from wpdev_backup.adapters.wpcli import WpCliDataStore

__all__ = [
    "DataStore",
    "DockerRuntime",
    "MySQLDataStore",
    "WpCliDataStore",
    "CommandResult",
    "run_command",
]
