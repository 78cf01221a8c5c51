"""
QueryExecutor: one connect/execute/read round trip turned into a display grid.

Failures never escape ``execute``. A connect, query, read or timeout fault
becomes a two-row ``Error`` table holding the innermost fault's message, so
callers render failures exactly like results.
"""

import asyncio
from typing import Any

from sqlpad.constants import DEFAULT_QUERY_TIMEOUT
from sqlpad.core.driver import Driver, MySqlDriver
from sqlpad.core.errors import ConnectError, ExecutionError, QueryError, QueryTimeoutError
from sqlpad.models.result import ResultTable
from sqlpad.utils.app_logger import get_logger
from sqlpad.utils.formatting import format_cell_value

logger = get_logger(__name__)


def _innermost(exc: BaseException) -> BaseException:
    """Follow explicit causes and exception groups down to the original fault."""
    seen: set[int] = set()
    current = exc
    while id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, BaseExceptionGroup) and current.exceptions:
            current = current.exceptions[0]
        elif current.__cause__ is not None:
            current = current.__cause__
        else:
            break
    return current


def fault_message(exc: BaseException) -> str:
    """Human-readable message of the innermost fault behind ``exc``."""
    fault = _innermost(exc)
    args: tuple[Any, ...] = fault.args

    # MySQL driver errors carry (code, message)
    if len(args) == 2 and isinstance(args[0], int) and isinstance(args[1], str):
        return args[1]

    message = str(fault)
    return message or repr(fault)


class QueryExecutor:
    """
    Runs a single SQL command and converts the result set into a ResultTable.

    Each call opens its own connection, sends the SQL text verbatim, reads the
    column schema once and streams the rows. The connection is closed when the
    call finishes, whether it succeeded, failed, timed out or was abandoned by
    its caller.
    """

    def __init__(
        self,
        driver: Driver | None = None,
        timeout_seconds: float | None = DEFAULT_QUERY_TIMEOUT,
    ) -> None:
        """
        Initialize QueryExecutor.

        Args:
            driver: Async driver (defaults to the aiomysql-backed MySQL driver)
            timeout_seconds: Deadline for the whole round trip (None = no deadline)
        """
        self.driver = driver if driver is not None else MySqlDriver()
        self.timeout_seconds = timeout_seconds or None

    async def execute(self, connection_string: str, sql: str) -> ResultTable:
        """
        Execute ``sql`` and return the display grid.

        Returns:
            ResultTable with the header as row 0, or the two-row error table
        """
        try:
            if self.timeout_seconds is None:
                return await self._run(connection_string, sql)
            try:
                return await asyncio.wait_for(
                    self._run(connection_string, sql), timeout=self.timeout_seconds
                )
            except asyncio.TimeoutError as e:
                raise QueryTimeoutError(
                    f"Query exceeded timeout of {self.timeout_seconds:g}s"
                ) from e
        except QueryTimeoutError as e:
            logger.info(e.message)
            return ResultTable.error(e.message)
        except Exception as e:
            message = fault_message(e)
            logger.info(f"Query failed: {message}")
            return ResultTable.error(message)

    async def _run(self, connection_string: str, sql: str) -> ResultTable:
        try:
            connection = await self.driver.connect(connection_string)
        except ExecutionError:
            raise
        except Exception as e:
            raise ConnectError(f"Could not connect: {e}") from e

        try:
            try:
                stream = await connection.execute_query(sql)
            except ExecutionError:
                raise
            except Exception as e:
                raise QueryError(f"Query failed: {e}") from e

            if not stream.columns:
                return ResultTable()

            rows: list[tuple[str, ...]] = [tuple(stream.columns)]
            async for raw in stream.rows:
                rows.append(tuple(format_cell_value(value) for value in raw))

            logger.debug(f"Query returned {len(rows) - 1} rows")
            return ResultTable(rows=tuple(rows))
        finally:
            await connection.close()
