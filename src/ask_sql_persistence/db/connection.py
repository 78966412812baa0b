"""
ask_sql_persistence.db.connection

Connection strategies for the persistence adapter.

Responsibilities:
- Define the `SqlConnection` interface the adapter talks to.
- `ClientConnection`: one persistent connection reused for every call.
- `PoolConnection`: a connection checked out of a pool per unit of work.
- Build either variant from settings.
"""

from __future__ import annotations

import abc
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager
from typing import Any

from sqlalchemy import URL, Connection, Engine, create_engine, make_url, pool, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.expression import Executable

from ask_sql_persistence.observability.logging import get_logger
from ask_sql_persistence.settings import Settings

log = get_logger(__name__)


class SqlConnection(abc.ABC):
    """
    Minimal surface the adapter needs from a database connection.
    Driver errors (`sqlalchemy.exc.SQLAlchemyError`) propagate unchanged.
    """

    @abc.abstractmethod
    def check_connection(self) -> None:
        """Raise if the database cannot be reached."""

    @abc.abstractmethod
    def begin(self) -> AbstractContextManager[Connection]:
        """Yield a connection inside a unit of work (commit on exit, rollback on error)."""

    @abc.abstractmethod
    def end(self) -> None:
        """Release driver resources. Safe to call more than once."""

    def execute(
        self,
        statement: str | Executable,
        parameters: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        if isinstance(statement, str):
            statement = text(statement)
        with self.begin() as conn:
            result = conn.execute(statement, parameters)
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]

    def __enter__(self) -> SqlConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.end()


class ClientConnection(SqlConnection):
    """
    Single persistent client. The connection opens on first use and stays open
    until `end()`; NullPool makes it the only connection the engine ever holds.
    """

    def __init__(self, database_url: str | URL, **engine_options: Any) -> None:
        self._engine: Engine = create_engine(
            database_url, poolclass=pool.NullPool, **engine_options
        )
        self._conn: Connection | None = None

    def _connection(self) -> Connection:
        if self._conn is None or self._conn.closed:
            self._conn = self._engine.connect()
            log.debug("client.connected", backend=self._engine.dialect.name)
        return self._conn

    def check_connection(self) -> None:
        conn = self._connection()
        try:
            self._ping(conn)
        except SQLAlchemyError as exc:
            # The server dropped the held connection between calls; reconnect once.
            log.warning("client.reconnecting", error=str(exc))
            conn.invalidate()
            conn.close()
            self._conn = None
            self._ping(self._connection())

    @staticmethod
    def _ping(conn: Connection) -> None:
        conn.exec_driver_sql("SELECT 1")
        conn.rollback()

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        conn = self._connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def end(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._engine.dispose()


class PoolConnection(SqlConnection):
    """Pooled connections: each unit of work checks one out and returns it."""

    def __init__(
        self,
        database_url: str | URL,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_pre_ping: bool = True,
        **engine_options: Any,
    ) -> None:
        url = make_url(database_url)
        # SQLite's default pool classes do not accept QueuePool sizing arguments.
        if url.get_backend_name() != "sqlite":
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
            )
        # pool_pre_ping detects connections dropped by the server between invocations.
        self._engine: Engine = create_engine(url, pool_pre_ping=pool_pre_ping, **engine_options)

    def check_connection(self) -> None:
        with self._engine.connect():
            pass

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        with self._engine.begin() as conn:
            yield conn

    def end(self) -> None:
        self._engine.dispose()


def create_connection(settings: Settings) -> SqlConnection:
    url = settings.sqlalchemy_url
    if settings.connection_mode == "client":
        return ClientConnection(url, echo=settings.echo_sql)
    return PoolConnection(
        url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        echo=settings.echo_sql,
    )


# --- Module Notes -----------------------------------------------------------
# Lambda containers are reused across invocations, so either strategy is normally
# created once at module import of the skill handler and never ended explicitly.
