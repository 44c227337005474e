"""Direct MySQL/MariaDB data store.

Provides ``MySQLDataStore``, a ``DataStore`` implementation that counts
rows through a SQLAlchemy engine (PyMySQL driver) and produces/loads
logical dumps with the ``mysqldump`` and ``mysql`` client binaries.

Usage:
    from wpdev_backup.adapters.mysql import MySQLDataStore

    store = MySQLDataStore(
        host="127.0.0.1", port=3306, user="root", password="", database="wordpress"
    )
    rows = store.row_count("wp_posts")
    store.close()
"""

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from wpdev_backup.adapters.runner import run_command
from wpdev_backup.errors import ExternalCommandFailure


def create_engine_pooled(url: URL, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine with a small connection pool.

    Default pool settings:

    - ``pool_size=1``: One run, one connection.
    - ``pool_pre_ping=True``: Validate connections before checkout.
    - ``pool_recycle=300``: Recycle connections every 5 minutes.
    - ``connect_timeout=5``: Fail fast while the server is still starting.

    Args:
        url: ``mysql+pymysql`` connection URL.
        **kwargs: Additional keyword arguments forwarded to ``create_engine``.

    Returns:
        Configured ``Engine``.
    """
    defaults: dict[str, Any] = {
        "pool_size": 1,
        "max_overflow": 0,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "connect_args": {"connect_timeout": 5},
        "echo": False,
    }
    # Caller kwargs override defaults
    merged = {**defaults, **kwargs}
    return create_engine(url, **merged)


class MySQLDataStore:
    """``DataStore`` talking to the database server directly.

    Args:
        host: Server host name.
        port: Server TCP port.
        user: Login user.
        password: Login password (passed to client binaries via ``MYSQL_PWD``).
        database: Database (schema) name.
        mysqldump_bin: ``mysqldump`` executable.
        mysql_bin: ``mysql`` executable.
        **engine_kwargs: Forwarded to ``create_engine_pooled``.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        mysqldump_bin: str = "mysqldump",
        mysql_bin: str = "mysql",
        **engine_kwargs: Any,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._database = database
        self._mysqldump_bin = mysqldump_bin
        self._mysql_bin = mysql_bin
        url = URL.create(
            "mysql+pymysql",
            username=user,
            password=password or None,
            host=host,
            port=port,
            database=database,
        )
        self._engine: Engine = create_engine_pooled(url, **engine_kwargs)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def row_count(self, table: str) -> int:
        try:
            with self._engine.connect() as conn:
                return int(conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar() or 0)
        except SQLAlchemyError as e:
            raise ExternalCommandFailure(f"Row count query on {table} failed: {e}") from e

    def ping(self) -> bool:
        """Run ``SELECT 1``; raises on connection failure."""
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    # ------------------------------------------------------------------
    # Dump / load
    # ------------------------------------------------------------------

    def _client_args(self) -> list[str]:
        return [f"--host={self._host}", f"--port={self._port}", f"--user={self._user}"]

    def _client_env(self) -> dict[str, str]:
        return {"MYSQL_PWD": self._password} if self._password else {}

    def export(self, path: Path) -> None:
        run_command(
            [
                self._mysqldump_bin,
                *self._client_args(),
                "--single-transaction",
                "--routines",
                "--triggers",
                self._database,
            ],
            stdout_path=path,
            env=self._client_env(),
        )

    def import_dump(self, path: Path) -> None:
        run_command(
            [self._mysql_bin, *self._client_args(), self._database],
            stdin_path=path,
            env=self._client_env(),
        )

    def close(self) -> None:
        """Dispose of the connection pool."""
        self._engine.dispose()
