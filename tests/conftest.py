"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import AsyncIterator, Callable, Generator, Sequence
from pathlib import Path
from typing import Any

import pytest

from sqlpad.core.driver import QueryStream
from sqlpad.core.preference_store import MemoryPreferenceStore
from sqlpad.core.vault import CredentialVault
from sqlpad.models.config import AppConfig

# Low iteration count keeps key derivation fast in tests
TEST_KDF_ITERATIONS = 1000


class FakeResult:
    """Scripted outcome for one SQL text."""

    def __init__(
        self,
        columns: Sequence[str] = (),
        rows: Sequence[Sequence[Any]] = (),
        *,
        error: BaseException | None = None,
        read_error: BaseException | None = None,
        gate: threading.Event | None = None,
        delay: float = 0.0,
    ) -> None:
        self.columns = list(columns)
        self.rows = [tuple(row) for row in rows]
        self.error = error
        self.read_error = read_error
        self.gate = gate
        self.delay = delay


class FakeConnection:
    """In-process stand-in for a driver connection."""

    def __init__(self, driver: "FakeDriver", connection_string: str) -> None:
        self.driver = driver
        self.connection_string = connection_string
        self.closed = False

    async def execute_query(self, sql: str) -> QueryStream:
        self.driver.executed.append(sql)
        result = self.driver.results.get(sql, self.driver.default)

        if result.gate is not None:
            await asyncio.to_thread(result.gate.wait, 5.0)
        if result.delay:
            await asyncio.sleep(result.delay)
        if result.error is not None:
            raise result.error

        return QueryStream(columns=result.columns, rows=self._rows(result))

    async def _rows(self, result: FakeResult) -> AsyncIterator[Sequence[Any]]:
        for row in result.rows:
            yield row
        if result.read_error is not None:
            raise result.read_error

    async def close(self) -> None:
        self.closed = True
        with self.driver.lock:
            self.driver.closed += 1


class FakeDriver:
    """Async driver double recording connections and executed SQL."""

    def __init__(
        self,
        default: FakeResult | None = None,
        *,
        connect_error: BaseException | None = None,
    ) -> None:
        self.default = default or FakeResult(["Database"], [["information_schema"], ["mysql"]])
        self.results: dict[str, FakeResult] = {}
        self.connect_error = connect_error
        self.connections: list[FakeConnection] = []
        self.executed: list[str] = []
        self.closed = 0
        self.lock = threading.Lock()

    def script(self, sql: str, result: FakeResult) -> None:
        self.results[sql] = result

    async def connect(self, connection_string: str) -> FakeConnection:
        if self.connect_error is not None:
            raise self.connect_error
        connection = FakeConnection(self, connection_string)
        with self.lock:
            self.connections.append(connection)
        return connection


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll ``predicate`` until it holds or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def fake_driver() -> FakeDriver:
    """Driver returning a two-row ``Database`` result for any SQL."""
    return FakeDriver()


@pytest.fixture
def fake_result() -> type[FakeResult]:
    """The FakeResult class, for scripting per-SQL outcomes."""
    return FakeResult


@pytest.fixture
def driver_factory() -> type[FakeDriver]:
    """The FakeDriver class, for tests that need custom construction."""
    return FakeDriver


@pytest.fixture
def waiter() -> Callable[..., bool]:
    """Polling helper for asserting on background work."""
    return wait_until


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary configuration directory for testing.

    Args:
        tmp_path: Pytest temporary directory fixture

    Returns:
        Path to temporary config directory
    """
    config_dir = tmp_path / ".sqlpad-test"
    config_dir.mkdir(mode=0o700)
    return config_dir


@pytest.fixture
def sample_app_config(tmp_config_dir: Path) -> AppConfig:
    """Application configuration pointing at the temporary directory."""
    return AppConfig(
        config_dir=tmp_config_dir,
        prefs_file="test_prefs.json",
        log_file="test.log",
        max_display_cells=2048,
        query_timeout_seconds=60,
    )


@pytest.fixture
def memory_store() -> MemoryPreferenceStore:
    return MemoryPreferenceStore()


@pytest.fixture
def vault(memory_store: MemoryPreferenceStore) -> CredentialVault:
    """Vault over an in-memory store with a fixed passphrase."""
    return CredentialVault(
        memory_store,
        "/opt/sqlpad/install",
        storage_key="sqlpad.preference.test",
        iterations=TEST_KDF_ITERATIONS,
    )


@pytest.fixture
def cleanup_loggers() -> Generator[None, None, None]:
    """Clean up logger state after tests.

    Yields:
        None (runs test, then cleans up)
    """
    yield

    import logging

    from sqlpad.utils import app_logger

    app_logger._loggers.clear()
    app_logger._configured = False

    logger = logging.getLogger("sqlpad")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
