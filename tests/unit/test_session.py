"""Unit tests for ExecutionSession, the frame-loop bridge to query execution."""

import threading

import pytest

from sqlpad.core.query_executor import QueryExecutor
from sqlpad.core.session import ExecutionSession, SessionState, run_until_complete

CONNECTION = "Server=localhost; UserID=root;"


@pytest.fixture
def make_session(fake_driver):
    sessions: list[ExecutionSession] = []

    def factory(driver=None, **kwargs) -> ExecutionSession:
        session = ExecutionSession(QueryExecutor(driver or fake_driver), **kwargs)
        sessions.append(session)
        return session

    yield factory

    for session in sessions:
        session.close()


class TestLifecycle:
    """State transitions and exactly-once adoption."""

    def test_idle_poll_returns_none(self, make_session) -> None:
        session = make_session()

        assert session.state is SessionState.IDLE
        assert session.poll() is None
        assert session.table is None

    def test_result_adopted_exactly_once(self, make_session, waiter) -> None:
        session = make_session()

        session.start(CONNECTION, "SHOW DATABASES;")
        assert waiter(lambda: session.state is SessionState.COMPLETED)

        table = session.poll()

        assert table is not None
        assert table.rows[0] == ("Database",)
        assert session.table is table
        assert session.state is SessionState.IDLE
        assert session.poll() is None

    def test_error_result_sets_failed_state(
        self, make_session, driver_factory, waiter
    ) -> None:
        session = make_session(driver_factory(connect_error=OSError("refused")))

        session.start(CONNECTION, "SELECT 1")
        assert waiter(lambda: session.state is SessionState.FAILED)

        table = session.poll()

        assert table.failed is True
        assert table.rows == (("Error",), ("refused",))
        assert session.state is SessionState.IDLE

    def test_poll_while_running_returns_none(
        self, make_session, fake_driver, fake_result
    ) -> None:
        gate = threading.Event()
        fake_driver.script("SLOW", fake_result(["a"], [["1"]], gate=gate))
        session = make_session()

        session.start(CONNECTION, "SLOW")
        try:
            assert session.is_running
            assert session.poll() is None
        finally:
            gate.set()

    def test_generation_increments(self, make_session) -> None:
        session = make_session()

        first = session.start(CONNECTION, "SHOW DATABASES;")
        second = session.start(CONNECTION, "SHOW DATABASES;")

        assert second == first + 1
        assert session.generation == second


class TestSupersession:
    """Starting a new execution discards the previous one's result."""

    def test_superseded_result_never_adopted(
        self, make_session, fake_driver, fake_result, waiter
    ) -> None:
        gate = threading.Event()
        fake_driver.script("OLD", fake_result(["old"], [["stale"]], gate=gate))
        fake_driver.script("NEW", fake_result(["new"], [["fresh"]]))
        session = make_session()

        session.start(CONNECTION, "OLD")
        assert waiter(lambda: "OLD" in fake_driver.executed)
        session.start(CONNECTION, "NEW")

        table = run_until_complete(session, frame_interval=0.005)
        assert table.header == ("new",)

        gate.set()
        # The abandoned execution still finishes and closes its connection
        assert waiter(lambda: fake_driver.closed == 2)
        assert session.poll() is None
        assert session.table.header == ("new",)

    def test_superseded_late_finish_does_not_override_running(
        self, make_session, fake_driver, fake_result, waiter
    ) -> None:
        old_gate = threading.Event()
        new_gate = threading.Event()
        fake_driver.script("OLD", fake_result(["old"], [["stale"]], gate=old_gate))
        fake_driver.script("NEW", fake_result(["new"], [["fresh"]], gate=new_gate))
        session = make_session()

        session.start(CONNECTION, "OLD")
        assert waiter(lambda: "OLD" in fake_driver.executed)
        session.start(CONNECTION, "NEW")
        assert waiter(lambda: "NEW" in fake_driver.executed)

        old_gate.set()
        assert waiter(lambda: fake_driver.closed == 1)
        assert session.state is SessionState.RUNNING
        assert session.poll() is None

        new_gate.set()
        table = run_until_complete(session, frame_interval=0.005)
        assert table.header == ("new",)

    def test_queued_execution_cancelled(
        self, make_session, fake_driver, fake_result, waiter
    ) -> None:
        gate = threading.Event()
        fake_driver.script("BLOCK", fake_result(["a"], [["1"]], gate=gate))
        session = make_session(max_workers=1)

        session.start(CONNECTION, "BLOCK")
        assert waiter(lambda: "BLOCK" in fake_driver.executed)
        session.start(CONNECTION, "QUEUED")
        session.start(CONNECTION, "LAST")

        gate.set()
        table = run_until_complete(session, frame_interval=0.005)

        assert table is not None
        assert "QUEUED" not in fake_driver.executed
        assert fake_driver.executed[-1] == "LAST"

    def test_arguments_captured_at_start(self, make_session, fake_driver, waiter) -> None:
        settings = {"connection": "Server=first;", "sql": "SELECT 1"}
        session = make_session()

        session.start(settings["connection"], settings["sql"])
        settings["connection"] = "Server=second;"
        settings["sql"] = "SELECT 2"
        run_until_complete(session, frame_interval=0.005)

        assert fake_driver.executed == ["SELECT 1"]
        assert fake_driver.connections[0].connection_string == "Server=first;"


class TestClose:
    def test_close_discards_in_flight_result(
        self, make_session, fake_driver, fake_result, waiter
    ) -> None:
        gate = threading.Event()
        fake_driver.script("SLOW", fake_result(["a"], [["1"]], gate=gate))
        session = make_session()

        session.start(CONNECTION, "SLOW")
        assert waiter(lambda: "SLOW" in fake_driver.executed)
        session.close()
        gate.set()

        assert waiter(lambda: fake_driver.closed == 1)
        assert session.state is SessionState.IDLE
        assert session.poll() is None

    def test_start_after_close_raises(self, make_session) -> None:
        session = make_session()
        session.close()

        with pytest.raises(RuntimeError, match="closed"):
            session.start(CONNECTION, "SELECT 1")

    def test_close_is_idempotent(self, make_session) -> None:
        session = make_session()

        session.close()
        session.close()

    def test_context_manager(self, fake_driver) -> None:
        with ExecutionSession(QueryExecutor(fake_driver)) as session:
            session.start(CONNECTION, "SHOW DATABASES;")
            table = run_until_complete(session, frame_interval=0.005)

        assert table.row_count == 2


class TestRunUntilComplete:
    def test_returns_none_when_idle(self, make_session) -> None:
        assert run_until_complete(make_session()) is None

    def test_calls_frame_callback_while_running(
        self, make_session, fake_driver, fake_result
    ) -> None:
        fake_driver.script("SLOW", fake_result(["a"], [["1"]], delay=0.1))
        session = make_session()
        frames: list[int] = []

        session.start(CONNECTION, "SLOW")
        table = run_until_complete(
            session, lambda: frames.append(1), frame_interval=0.005
        )

        assert table.rows == (("a",), ("1",))
        assert frames

    def test_max_frames_stops_early(self, make_session, fake_driver, fake_result) -> None:
        gate = threading.Event()
        fake_driver.script("SLOW", fake_result(["a"], [["1"]], gate=gate))
        session = make_session()

        session.start(CONNECTION, "SLOW")
        try:
            assert run_until_complete(session, frame_interval=0.001, max_frames=3) is None
            assert session.is_running
        finally:
            gate.set()
