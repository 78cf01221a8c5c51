"""Exception hierarchy for SqlPad.

Every exception carries an ``exit_code`` so CLI commands can map failures to
process return values.
"""

from sqlpad.constants import (
    EXIT_DATABASE_ERROR,
    EXIT_DECRYPT_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_NETWORK_ERROR,
    EXIT_QUERY_ERROR,
    EXIT_TIMEOUT_ERROR,
)


class SqlPadError(Exception):
    """Base exception for all SqlPad errors."""

    exit_code: int = EXIT_GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ExecutionError(SqlPadError):
    """Any failure while connecting, executing or reading a query."""

    exit_code: int = EXIT_DATABASE_ERROR


class ConnectError(ExecutionError):
    """Bad connection string, unreachable server or rejected credentials."""

    exit_code: int = EXIT_NETWORK_ERROR


class QueryError(ExecutionError):
    """Malformed SQL or a server-side execution fault."""

    exit_code: int = EXIT_QUERY_ERROR


class QueryTimeoutError(ExecutionError):
    """Execution exceeded its deadline."""

    exit_code: int = EXIT_TIMEOUT_ERROR


class DecryptError(SqlPadError):
    """Stored blob is corrupt, truncated or was sealed with another key."""

    exit_code: int = EXIT_DECRYPT_ERROR
