"""Tests for building stores, probes and orchestrators from configuration."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.adapters.mysql import MySQLDataStore
from wpdev_backup.adapters.wpcli import WpCliDataStore
from wpdev_backup.backup.orchestrator import BackupOrchestrator
from wpdev_backup.config.models import OrchestratorConfig
from wpdev_backup.errors import ConfigurationError
from wpdev_backup.factory import (
    build_data_store,
    build_orchestrator,
    build_readiness_probe,
    build_runtime,
    probe_description,
)


def _config(**sections) -> OrchestratorConfig:
    return OrchestratorConfig.model_validate(sections)


@pytest.fixture
def no_engine():
    """Keep MySQLDataStore from creating a real engine."""
    with patch("wpdev_backup.adapters.mysql.create_engine_pooled") as factory:
        factory.return_value = MagicMock()
        yield factory


class TestBuildRuntime:
    def test_uses_configured_binary(self):
        runtime = build_runtime(_config(container={"docker_bin": "podman"}))
        assert isinstance(runtime, DockerRuntime)
        assert runtime._docker_bin == "podman"


class TestBuildDataStore:
    def test_wpcli_is_default(self):
        store = build_data_store(_config(container={"stack_name": "shop"}))
        assert isinstance(store, WpCliDataStore)
        assert store._container == "shop-wpcli"

    def test_wpcli_reuses_runtime(self):
        runtime = DockerRuntime()
        store = build_data_store(OrchestratorConfig(), runtime=runtime)
        assert store._runtime is runtime

    def test_mysql_provider(self, no_engine):
        config = _config(
            backup={"provider": "mysql"},
            database={"host": "db", "port": 3307, "password": "pw"},
        )
        store = build_data_store(config)

        assert isinstance(store, MySQLDataStore)
        url = no_engine.call_args.args[0]
        assert url.drivername == "mysql+pymysql"
        assert url.host == "db"
        assert url.port == 3307

    def test_unknown_provider(self):
        config = OrchestratorConfig()
        config.backup.provider = "postgres"
        with pytest.raises(ConfigurationError, match="postgres"):
            build_data_store(config)


class TestBuildReadinessProbe:
    def test_mysqladmin_probe_targets_db_container(self):
        runtime = MagicMock()
        runtime.container_exists.return_value = False
        probe = build_readiness_probe(
            _config(container={"stack_name": "blog"}), runtime=runtime
        )

        assert probe() is False
        runtime.container_exists.assert_called_once_with("blog-db", timeout=5.0)

    def test_probe_timeout_capped_by_interval(self):
        runtime = MagicMock()
        runtime.container_exists.return_value = False
        config = _config(readiness={"interval": 0.5, "timeout": 10})
        build_readiness_probe(config, runtime=runtime)()
        assert runtime.container_exists.call_args.kwargs["timeout"] == 0.5

    def test_tcp_probe(self):
        config = _config(readiness={"probe": "tcp"}, database={"host": "h", "port": 1234})
        with patch("wpdev_backup.readiness.probes.socket.create_connection") as conn:
            assert build_readiness_probe(config)() is True
        conn.assert_called_once_with(("h", 1234), timeout=5.0)

    def test_sql_probe_reuses_mysql_store(self, no_engine):
        config = _config(readiness={"probe": "sql"}, backup={"provider": "mysql"})
        store = build_data_store(config)
        no_engine.reset_mock()

        with patch.object(MySQLDataStore, "ping", return_value=True) as ping:
            probe = build_readiness_probe(config, store=store)
            assert probe() is True

        ping.assert_called_once_with()
        no_engine.assert_not_called()

    def test_sql_probe_with_wpcli_store_builds_its_own(self, no_engine):
        config = _config(readiness={"probe": "sql"})
        build_readiness_probe(config, store=build_data_store(config))
        no_engine.assert_called_once()

    def test_unknown_probe(self):
        config = OrchestratorConfig()
        config.readiness.probe = "http"
        with pytest.raises(ConfigurationError, match="http"):
            build_readiness_probe(config)


class TestProbeDescription:
    def test_container_description(self):
        assert probe_description(OrchestratorConfig()) == (
            "database container webdevwordpress-db"
        )

    def test_host_description(self):
        config = _config(readiness={"probe": "tcp"}, database={"host": "db", "port": 3306})
        assert probe_description(config) == "database db:3306"


class TestBuildOrchestrator:
    def test_uses_given_store_and_settings(self, tmp_path):
        store = MagicMock()
        config = _config(backup={"backup_dir": str(tmp_path)})

        orchestrator = build_orchestrator(config, store)

        assert isinstance(orchestrator, BackupOrchestrator)
        assert orchestrator.backup_dir == Path(tmp_path)
        assert orchestrator._store is store

    def test_builds_store_when_missing(self):
        orchestrator = build_orchestrator(OrchestratorConfig())
        assert isinstance(orchestrator._store, WpCliDataStore)
