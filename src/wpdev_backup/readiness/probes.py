"""Readiness probe factories.

Each factory returns a zero-argument callable suitable for
``wait_until_ready``.  Probes may raise; the poller treats that as
"not ready yet".
"""

import socket
import time
from collections.abc import Callable

from wpdev_backup.adapters.docker import DockerRuntime
from wpdev_backup.adapters.mysql import MySQLDataStore
from wpdev_backup.errors import ExternalCommandFailure


def mysqladmin_probe(
    runtime: DockerRuntime,
    container: str,
    host: str = "localhost",
    port: int = 3306,
    user: str = "root",
    password: str = "",
    command_timeout: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Callable[[], bool]:
    """``mysqladmin ping`` inside the database container.

    Returns False while the container does not exist yet.  With
    ``command_timeout`` set, the container lookup and the ping together
    take at most that many seconds; an expired budget raises
    ``ExternalCommandFailure``.
    """

    def probe() -> bool:
        deadline = None if command_timeout is None else clock() + command_timeout
        if not runtime.container_exists(container, timeout=command_timeout):
            return False
        remaining = None
        if deadline is not None:
            remaining = deadline - clock()
            if remaining <= 0:
                raise ExternalCommandFailure(
                    f"No time left to ping {container} within {command_timeout:g}s"
                )
        env = {"MYSQL_PWD": password} if password else None
        runtime.exec(
            container,
            ["mysqladmin", "ping", f"-h{host}", f"-P{port}", f"-u{user}", "--silent"],
            env=env,
            timeout=remaining,
        )
        return True

    return probe


def tcp_probe(host: str, port: int, connect_timeout: float = 2.0) -> Callable[[], bool]:
    """Plain TCP connect to ``host:port``."""

    def probe() -> bool:
        with socket.create_connection((host, port), timeout=connect_timeout):
            return True

    return probe


def sql_probe(store: MySQLDataStore) -> Callable[[], bool]:
    """``SELECT 1`` through the store's engine."""
    return store.ping
