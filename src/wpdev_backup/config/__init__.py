"""Configuration management: models and layered loading.

Usage:
    >>> from wpdev_backup.config import load_config, OrchestratorConfig
"""

from wpdev_backup.config.loader import load_config
from wpdev_backup.config.models import (
    BackupSettings,
    ContainerSettings,
    DatabaseSettings,
    LoggingSettings,
    OrchestratorConfig,
    ReadinessSettings,
)

__all__ = [
    "load_config",
    "OrchestratorConfig",
    "DatabaseSettings",
    "ContainerSettings",
    "ReadinessSettings",
    "BackupSettings",
    "LoggingSettings",
]
