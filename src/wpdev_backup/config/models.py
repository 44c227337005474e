"""Pydantic models for orchestrator configuration."""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_$]+(\.[A-Za-z0-9_$]+)?$")


class DatabaseSettings(BaseModel):
    """Connection parameters for the MySQL/MariaDB server."""

    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    name: str = "wordpress"


class ContainerSettings(BaseModel):
    """Docker containers of the local WordPress stack."""

    stack_name: str = "webdevwordpress"
    docker_bin: str = "docker"
    wpcli_container: str | None = None      # default: <stack>-wpcli
    db_container: str | None = None         # default: <stack>-db
    cache_path: str = "/var/www/html/wpcli-cache/db-backup.sql"

    @model_validator(mode="after")
    def _default_container_names(self) -> "ContainerSettings":
        if not self.wpcli_container:
            self.wpcli_container = f"{self.stack_name}-wpcli"
        if not self.db_container:
            self.db_container = f"{self.stack_name}-db"
        return self


class ReadinessSettings(BaseModel):
    """How to wait for the database."""

    probe: Literal["mysqladmin", "tcp", "sql"] = "mysqladmin"
    interval: float = Field(default=5.0, gt=0)   # seconds between probes
    timeout: float = Field(default=60.0, gt=0)   # give up after this many seconds

    @property
    def probe_timeout(self) -> float:
        """Longest a single probe may run, in seconds."""
        return min(self.interval, self.timeout)


class BackupSettings(BaseModel):
    """Where backups live and how emptiness is decided."""

    backup_dir: Path = Path("backups")
    sentinel_table: str = "wp_posts"
    provider: Literal["wpcli", "mysql"] = "wpcli"
    fail_open: bool = True      # treat a failed row count as "empty"

    @field_validator("sentinel_table")
    @classmethod
    def _plain_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"sentinel_table must be a plain table name, got {value!r}")
        return value

    @field_validator("backup_dir")
    @classmethod
    def _expand_backup_dir(cls, value: Path) -> Path:
        return value.expanduser()


class LoggingSettings(BaseModel):
    """Log destination and verbosity."""

    log_file: Path | None = Path("/tmp/webdevwordpress.log")
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level {value!r}")
        return value


class OrchestratorConfig(BaseModel):
    """Complete orchestrator configuration."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    container: ContainerSettings = Field(default_factory=ContainerSettings)
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)
    backup: BackupSettings = Field(default_factory=BackupSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
