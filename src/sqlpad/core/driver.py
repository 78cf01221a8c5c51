"""Async database driver seam.

The executor only needs ``connect(connection_string)`` and
``execute_query(sql)`` returning a column schema and a row stream. The
MySQL implementation is built on aiomysql; tests substitute in-process fakes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import aiomysql
import pymysql
from pymysql.constants import CLIENT

from sqlpad.constants import FETCH_BATCH_SIZE
from sqlpad.core.connection_string import parse_connection_string
from sqlpad.core.errors import ConnectError, QueryError
from sqlpad.utils.app_logger import get_logger

logger = get_logger(__name__)


@dataclass
class QueryStream:
    """Column schema plus an async iterator over raw row tuples."""

    columns: list[str]
    rows: AsyncIterator[Sequence[Any]]


class DriverConnection(Protocol):
    async def execute_query(self, sql: str) -> QueryStream: ...

    async def close(self) -> None: ...


class Driver(Protocol):
    async def connect(self, connection_string: str) -> DriverConnection: ...


async def _empty_rows() -> AsyncIterator[Sequence[Any]]:
    return
    yield  # pragma: no cover


class MySqlConnection:
    """aiomysql connection wrapper."""

    def __init__(self, connection: aiomysql.Connection) -> None:
        self._connection = connection

    async def execute_query(self, sql: str) -> QueryStream:
        """Send ``sql`` verbatim as a single command.

        Leading result sets without columns (``SET @x = ...``) are skipped so
        the first row-returning statement is shown.

        Raises:
            QueryError: If the server rejects the statement
        """
        cursor = await self._connection.cursor()
        try:
            await cursor.execute(sql)
            while cursor.description is None:
                if not await cursor.nextset():
                    break
        except pymysql.MySQLError as e:
            await cursor.close()
            raise QueryError(f"Query failed: {e}") from e

        if cursor.description is None:
            await cursor.close()
            return QueryStream(columns=[], rows=_empty_rows())

        columns = [str(column[0]) for column in cursor.description]
        return QueryStream(columns=columns, rows=self._iter_rows(cursor))

    async def _iter_rows(self, cursor: aiomysql.Cursor) -> AsyncIterator[Sequence[Any]]:
        try:
            while True:
                try:
                    batch = await cursor.fetchmany(FETCH_BATCH_SIZE)
                except pymysql.MySQLError as e:
                    raise QueryError(f"Reading rows failed: {e}") from e
                if not batch:
                    break
                for row in batch:
                    yield row
        finally:
            await cursor.close()

    async def close(self) -> None:
        self._connection.close()


class MySqlDriver:
    """Opens MySQL connections with aiomysql.

    Multi-statement support is enabled so templates that set session variables
    before their SELECT run as one command.
    """

    async def connect(self, connection_string: str) -> MySqlConnection:
        """Open a connection.

        Raises:
            ConnectError: If the connection string is invalid or the server
                cannot be reached or rejects the login
        """
        settings = parse_connection_string(connection_string)

        kwargs: dict[str, Any] = {
            "host": settings.host,
            "port": settings.port,
            "user": settings.user,
            "password": settings.password,
            "db": settings.database,
            "charset": settings.charset,
            "autocommit": True,
            "client_flag": CLIENT.MULTI_STATEMENTS,
        }
        if settings.connect_timeout is not None:
            kwargs["connect_timeout"] = settings.connect_timeout

        logger.debug("Connecting to %s:%s", settings.host, settings.port)
        try:
            connection = await aiomysql.connect(**kwargs)
        except (pymysql.MySQLError, OSError) as e:
            raise ConnectError(f"Could not connect to {settings.host}:{settings.port}") from e

        return MySqlConnection(connection)
