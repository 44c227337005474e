"""Build stores, probes and orchestrators from configuration.

Usage:
    from wpdev_backup.config import load_config
    from wpdev_backup.factory import build_data_store, build_orchestrator

    config = load_config()
    store = build_data_store(config)
    outcome = build_orchestrator(config, store).run()
"""

from collections.abc import Callable

from wpdev_backup.adapters.base import DataStore
from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.adapters.mysql import MySQLDataStore
from wpdev_backup.adapters.wpcli import WpCliDataStore
from wpdev_backup.backup.orchestrator import BackupOrchestrator
from wpdev_backup.config.models import OrchestratorConfig
from wpdev_backup.errors import ConfigurationError
from wpdev_backup.readiness.probes import mysqladmin_probe, sql_probe, tcp_probe


def build_runtime(config: OrchestratorConfig) -> DockerRuntime:
    """Docker runtime using the configured binary."""
    return DockerRuntime(docker_bin=config.container.docker_bin)


def build_mysql_store(config: OrchestratorConfig) -> MySQLDataStore:
    db = config.database
    return MySQLDataStore(
        host=db.host,
        port=db.port,
        user=db.user,
        password=db.password,
        database=db.name,
    )


def build_data_store(
    config: OrchestratorConfig, runtime: DockerRuntime | None = None
) -> DataStore:
    """Create the ``DataStore`` selected by ``backup.provider``.

    Raises:
        ConfigurationError: If the provider is unknown.
    """
    provider = config.backup.provider
    if provider == "wpcli":
        return WpCliDataStore(
            runtime or build_runtime(config),
            container=config.container.wpcli_container,
            cache_path=config.container.cache_path,
        )
    if provider == "mysql":
        return build_mysql_store(config)
    raise ConfigurationError(f"Unknown backup provider: {provider}")


def build_readiness_probe(
    config: OrchestratorConfig,
    runtime: DockerRuntime | None = None,
    store: DataStore | None = None,
) -> Callable[[], bool]:
    """Create the readiness probe selected by ``readiness.probe``.

    The ``sql`` probe reuses ``store`` when it is a ``MySQLDataStore``.

    Raises:
        ConfigurationError: If the probe kind is unknown.
    """
    kind = config.readiness.probe
    db = config.database
    if kind == "mysqladmin":
        return mysqladmin_probe(
            runtime or build_runtime(config),
            container=config.container.db_container,
            host=db.host,
            port=db.port,
            user=db.user,
            password=db.password,
            command_timeout=config.readiness.probe_timeout,
        )
    if kind == "tcp":
        return tcp_probe(db.host, db.port, connect_timeout=config.readiness.probe_timeout)
    if kind == "sql":
        if not isinstance(store, MySQLDataStore):
            store = build_mysql_store(config)
        return sql_probe(store)
    raise ConfigurationError(f"Unknown readiness probe: {kind}")


def probe_description(config: OrchestratorConfig) -> str:
    """Name of the readiness target used in log lines."""
    if config.readiness.probe == "mysqladmin":
        return f"database container {config.container.db_container}"
    return f"database {config.database.host}:{config.database.port}"


def build_orchestrator(
    config: OrchestratorConfig, store: DataStore | None = None
) -> BackupOrchestrator:
    """Assemble a ``BackupOrchestrator`` for the configured store."""
    return BackupOrchestrator(store or build_data_store(config), config.backup)
