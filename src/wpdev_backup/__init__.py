"""wpdev-backup: restore-or-export orchestrator for a local WordPress database.

Waits for MySQL/MariaDB to accept connections, then either restores the
newest timestamped dump into an empty database or exports a new dump of
a populated one.  Stores are pluggable behind the ``DataStore`` Protocol
(wp-cli in a container, or a direct MySQL connection).

Usage:
    from wpdev_backup import BackupOrchestrator, load_config, build_data_store
    from wpdev_backup import wait_until_ready, ReadinessTimeout
"""

__version__ = "0.1.0"

# Adapters
from wpdev_backup.adapters.base import DataStore
from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.adapters.mysql import MySQLDataStore
from wpdev_backup.adapters.wpcli import WpCliDataStore

# Backup
from wpdev_backup.backup.models import BackupOutcome
from wpdev_backup.backup.orchestrator import BackupOrchestrator

# Config
from wpdev_backup.config.loader import load_config
from wpdev_backup.config.models import OrchestratorConfig

# Errors
from wpdev_backup.errors import (
    ArtifactCollision,
    ConfigurationError,
    ExternalCommandFailure,
    NoBackupAvailable,
    ProbeFailed,
    ReadinessTimeout,
    WpdevBackupError,
)

# Factory
from wpdev_backup.factory import build_data_store, build_orchestrator

# Readiness
from wpdev_backup.readiness.poller import ReadinessResult, wait_until_ready

__all__ = [
    # Adapters
    "DataStore",
    "DockerRuntime",
    "MySQLDataStore",
    "WpCliDataStore",
    # Backup
    "BackupOrchestrator",
    "BackupOutcome",
    # Config
    "load_config",
    "OrchestratorConfig",
    # Errors
    "WpdevBackupError",
    "ConfigurationError",
    "ReadinessTimeout",
    "ExternalCommandFailure",
    "ProbeFailed",
    "NoBackupAvailable",
    "ArtifactCollision",
    # Factory
    "build_data_store",
    "build_orchestrator",
    # Readiness
    "wait_until_ready",
    "ReadinessResult",
]
