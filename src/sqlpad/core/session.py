"""
ExecutionSession: cooperative bridge between a frame loop and query execution.

The host loop calls :meth:`ExecutionSession.start` when the user runs a query
and :meth:`ExecutionSession.poll` once per frame. Work runs on a thread pool,
each job driving the executor's coroutine with ``asyncio.run``; ``poll`` never
waits. Starting a new query supersedes the one in flight: its result is
discarded when it arrives, although the call itself runs to completion so its
connection still gets closed.
"""

import asyncio
import concurrent.futures
import threading
import time
from collections.abc import Callable
from enum import Enum

from sqlpad.constants import DEFAULT_FRAME_INTERVAL_MS, MAX_THREAD_POOL_SIZE
from sqlpad.core.query_executor import QueryExecutor, fault_message
from sqlpad.models.result import ResultTable
from sqlpad.utils.app_logger import get_logger

logger = get_logger(__name__)


class SessionState(str, Enum):
    """Lifecycle of the session's current execution."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ExecutionSession:
    """
    Four-state machine: Idle → Running → Completed | Failed → Idle.

    Completed and Failed hold the finished table until the next ``poll``
    hands it over, after which the session is Idle again. At most one
    execution (the most recently started) can have its table adopted.

    Attributes:
        executor: QueryExecutor used for every execution
    """

    def __init__(
        self,
        executor: QueryExecutor | None = None,
        *,
        max_workers: int = MAX_THREAD_POOL_SIZE,
        pool: concurrent.futures.Executor | None = None,
    ) -> None:
        """
        Initialize ExecutionSession.

        Args:
            executor: QueryExecutor to run (default: MySQL executor)
            max_workers: Worker threads when the session owns its pool; abandoned
                executions keep a worker busy until they finish
            pool: Optional externally managed executor
        """
        self.executor = executor if executor is not None else QueryExecutor()
        self._owns_pool = pool is None
        self._pool = pool or concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="sqlpad-query"
        )
        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._generation = 0
        self._future: concurrent.futures.Future[ResultTable] | None = None
        self._pending: ResultTable | None = None
        self._table: ResultTable | None = None
        self._closed = False

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def table(self) -> ResultTable | None:
        """Most recently adopted table (None before the first completion)."""
        with self._lock:
            return self._table

    @property
    def generation(self) -> int:
        """Number of executions started so far."""
        with self._lock:
            return self._generation

    def start(self, connection_string: str, sql: str) -> int:
        """
        Begin executing ``sql``, superseding any execution still in flight.

        The arguments are captured here; later edits to the caller's settings
        do not affect this execution.

        Returns:
            Generation number identifying this execution

        Raises:
            RuntimeError: If the session has been closed
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Session is closed")

            superseded = self._future if self._state is SessionState.RUNNING else None
            self._generation += 1
            generation = self._generation
            self._pending = None
            self._state = SessionState.RUNNING

        if superseded is not None:
            self._abandon(superseded, generation - 1)

        logger.debug(f"Starting execution {generation}")
        future = self._pool.submit(self._execute, connection_string, sql)
        with self._lock:
            if self._generation == generation:
                self._future = future
        future.add_done_callback(lambda done: self._on_done(generation, done))
        return generation

    def poll(self) -> ResultTable | None:
        """
        Non-blocking check, safe to call every frame.

        Returns:
            The finished table exactly once per execution (success or error
            table), otherwise None
        """
        with self._lock:
            if self._state not in (SessionState.COMPLETED, SessionState.FAILED):
                return None

            table = self._pending
            self._pending = None
            self._future = None
            self._table = table
            self._state = SessionState.IDLE
            generation = self._generation

        logger.debug(f"Adopted result of execution {generation}")
        return table

    def close(self) -> None:
        """Abandon any execution in flight, drop the table and release the pool.

        The pool is shut down without waiting. A worker still blocked on the
        database keeps running and is joined at interpreter exit, so only the
        executor deadline bounds how long an abandoned execution can live.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            in_flight = self._future if self._state is SessionState.RUNNING else None
            generation = self._generation
            self._generation += 1
            self._state = SessionState.IDLE
            self._future = None
            self._pending = None
            self._table = None

        if in_flight is not None:
            self._abandon(in_flight, generation)
        if self._owns_pool:
            self._pool.shutdown(wait=False)

    def __enter__(self) -> "ExecutionSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _execute(self, connection_string: str, sql: str) -> ResultTable:
        return asyncio.run(self.executor.execute(connection_string, sql))

    def _on_done(self, generation: int, future: concurrent.futures.Future[ResultTable]) -> None:
        if future.cancelled():
            return

        error = future.exception()
        if error is not None:
            table = ResultTable.error(fault_message(error))
        else:
            table = future.result()

        with self._lock:
            if generation != self._generation or self._state is not SessionState.RUNNING:
                stale = True
            else:
                stale = False
                self._pending = table
                self._state = SessionState.FAILED if table.failed else SessionState.COMPLETED

        if stale:
            logger.debug(f"Discarded result of superseded execution {generation}")

    @staticmethod
    def _abandon(future: concurrent.futures.Future[ResultTable], generation: int) -> None:
        # Queued work never opened a connection and can be dropped outright
        if future.cancel():
            logger.debug(f"Cancelled queued execution {generation}")
        else:
            logger.info(f"Execution {generation} superseded; its result will be ignored")


def run_until_complete(
    session: ExecutionSession,
    on_frame: Callable[[], None] | None = None,
    *,
    frame_interval: float = DEFAULT_FRAME_INTERVAL_MS / 1000,
    max_frames: int | None = None,
) -> ResultTable | None:
    """
    Drive ``session`` like a render loop until its execution finishes.

    Calls ``poll`` once per frame and ``on_frame`` between frames.

    Returns:
        The adopted table, or None if nothing was running or ``max_frames``
        elapsed first
    """
    frames = 0
    while True:
        table = session.poll()
        if table is not None:
            return table
        if not session.is_running:
            return None
        if max_frames is not None and frames >= max_frames:
            return None

        if on_frame is not None:
            on_frame()
        frames += 1
        time.sleep(frame_interval)
