"""Parsing of ADO-style ``Key=Value;`` connection strings.

Keys are case-insensitive and may contain spaces
(``Server=localhost; Port=3306; User ID=root; Password=secret;``). Keys the
driver has no use for, such as ``AllowUserVariables``, are accepted and
ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlpad.constants import DEFAULT_MYSQL_PORT
from sqlpad.core.errors import ConnectError

_ALIASES: dict[str, str] = {
    "server": "host",
    "host": "host",
    "datasource": "host",
    "address": "host",
    "port": "port",
    "userid": "user",
    "uid": "user",
    "user": "user",
    "username": "user",
    "password": "password",
    "pwd": "password",
    "database": "database",
    "initialcatalog": "database",
    "db": "database",
    "charset": "charset",
    "characterset": "charset",
    "connecttimeout": "connect_timeout",
    "connectiontimeout": "connect_timeout",
}


@dataclass(frozen=True)
class ConnectionSettings:
    """Driver-neutral view of a parsed connection string."""

    host: str = "localhost"
    port: int = DEFAULT_MYSQL_PORT
    user: str | None = None
    password: str = ""
    database: str | None = None
    charset: str = "utf8mb4"
    connect_timeout: float | None = None
    extras: dict[str, str] = field(default_factory=dict, compare=False)


def _normalize_key(key: str) -> str:
    return "".join(key.split()).replace("_", "").lower()


def _parse_number(name: str, value: str, kind: type) -> int | float:
    try:
        number = kind(value)
    except ValueError as e:
        raise ConnectError(f"Invalid {name} in connection string: {value!r}") from e
    if number <= 0:
        raise ConnectError(f"Invalid {name} in connection string: {value!r}")
    return number


def parse_connection_string(connection_string: str) -> ConnectionSettings:
    """Parse ``connection_string`` into :class:`ConnectionSettings`.

    Raises:
        ConnectError: If the string is empty or a segment is not ``key=value``
    """
    if not connection_string or not connection_string.strip():
        raise ConnectError("Connection string is empty")

    values: dict[str, str] = {}
    extras: dict[str, str] = {}
    for segment in connection_string.split(";"):
        if not segment.strip():
            continue
        key, sep, value = segment.partition("=")
        if not sep or not key.strip():
            raise ConnectError(f"Invalid connection string segment: {segment.strip()!r}")

        normalized = _normalize_key(key)
        target = _ALIASES.get(normalized)
        if target is None:
            extras[normalized] = value.strip()
        else:
            values[target] = value.strip()

    settings: dict[str, object] = {"extras": extras}
    for name in ("host", "user", "password", "database", "charset"):
        if values.get(name):
            settings[name] = values[name]
    if "port" in values:
        settings["port"] = _parse_number("port", values["port"], int)
    if "connect_timeout" in values:
        settings["connect_timeout"] = _parse_number(
            "connect timeout", values["connect_timeout"], float
        )

    return ConnectionSettings(**settings)  # type: ignore[arg-type]


def mask_connection_string(connection_string: str) -> str:
    """Replace password values with asterisks for display."""
    segments = []
    for segment in connection_string.split(";"):
        key, sep, value = segment.partition("=")
        if sep and _ALIASES.get(_normalize_key(key)) == "password" and value.strip():
            segments.append(f"{key}={'*' * 8}")
        else:
            segments.append(segment)
    return ";".join(segments)
