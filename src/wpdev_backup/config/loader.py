"""Layered configuration loading: defaults, TOML file, .env, environment."""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError

from wpdev_backup.config.models import OrchestratorConfig
from wpdev_backup.errors import ConfigurationError

DEFAULT_CONFIG_FILE = Path("wpdev-backup.toml")
DEFAULT_ENV_FILE = Path(".env")

# Environment variable -> (section, field)
ENV_VARS: dict[str, tuple[str, str]] = {
    "BACKUP_DIR": ("backup", "backup_dir"),
    "TABLE_TO_CHECK": ("backup", "sentinel_table"),
    "BACKUP_PROVIDER": ("backup", "provider"),
    "BACKUP_FAIL_OPEN": ("backup", "fail_open"),
    "MYSQL_HOST": ("database", "host"),
    "MYSQL_PORT": ("database", "port"),
    "MYSQL_USER": ("database", "user"),
    "MYSQL_PASSWORD": ("database", "password"),
    "MYSQL_DATABASE": ("database", "name"),
    "STACK_NAME": ("container", "stack_name"),
    "DOCKER_BIN": ("container", "docker_bin"),
    "WPCLI_CONTAINER": ("container", "wpcli_container"),
    "DB_CONTAINER": ("container", "db_container"),
    "WPCLI_CACHE_PATH": ("container", "cache_path"),
    "DB_READINESS_PROBE": ("readiness", "probe"),
    "DB_POLL_INTERVAL": ("readiness", "interval"),
    "DB_TIMEOUT_SECONDS": ("readiness", "timeout"),
    "LOG_FILE": ("logging", "log_file"),
    "LOG_LEVEL": ("logging", "level"),
}


def _read_toml(config_path: Path) -> dict[str, Any]:
    with open(config_path, "rb") as f:
        return tomllib.load(f)


def _apply_env(
    data: dict[str, Any], values: Mapping[str, str | None], env_prefix: str
) -> None:
    """Overlay recognised variables from ``values`` onto ``data`` in place."""
    for name, (section, field) in ENV_VARS.items():
        value = values.get(f"{env_prefix}{name}")
        if value is None:
            continue
        if section == "logging" and field == "log_file" and value == "":
            data.setdefault(section, {})[field] = None
            continue
        data.setdefault(section, {})[field] = value


def load_config(
    config_path: Path | None = None,
    env_file: Path | None = DEFAULT_ENV_FILE,
    env_prefix: str = "",
    environ: Mapping[str, str] | None = None,
) -> OrchestratorConfig:
    """Load orchestrator configuration.

    Later layers override earlier ones:

    1. Model defaults
    2. TOML file (``[database]``, ``[container]``, ``[readiness]``,
       ``[backup]``, ``[logging]`` tables)
    3. ``.env`` file values
    4. Process environment

    Args:
        config_path: TOML file.  When None, ``wpdev-backup.toml`` in the
            current directory is used if present.
        env_file: ``.env`` file to read; skipped when None or missing.
        env_prefix: Prefix for every variable name (``APP_`` reads
            ``APP_BACKUP_DIR``).
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Validated ``OrchestratorConfig``.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        ConfigurationError: If the merged values fail validation or the
            TOML file cannot be parsed.
    """
    if environ is None:
        environ = os.environ

    data: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        toml_path: Path | None = config_path
    else:
        toml_path = DEFAULT_CONFIG_FILE if DEFAULT_CONFIG_FILE.exists() else None

    if toml_path is not None:
        try:
            raw = _read_toml(toml_path)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {toml_path}: {e}") from e
        for section in OrchestratorConfig.model_fields:
            if section not in raw:
                continue
            if not isinstance(raw[section], dict):
                raise ConfigurationError(f"[{section}] in {toml_path} must be a table")
            data[section] = dict(raw[section])

    if env_file is not None and env_file.exists():
        _apply_env(data, dotenv_values(env_file), env_prefix)

    _apply_env(data, environ, env_prefix)

    try:
        return OrchestratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
