"""Unit tests for Pydantic models and value objects."""

import pytest
from pydantic import ValidationError

from sqlpad.constants import DEFAULT_CONNECTION_STRING, DEFAULT_QUERY_TEXT
from sqlpad.core.errors import (
    ConnectError,
    DecryptError,
    ExecutionError,
    QueryError,
    QueryTimeoutError,
    SqlPadError,
)
from sqlpad.models import AppConfig, ConnectionConfig, ResultTable


class TestConnectionConfig:
    """Tests for ConnectionConfig model."""

    def test_defaults(self) -> None:
        config = ConnectionConfig()

        assert config.connection_string == DEFAULT_CONNECTION_STRING
        assert config.query_text == DEFAULT_QUERY_TEXT
        assert config.query_text == "SHOW DATABASES;"

    def test_assignment_validated(self) -> None:
        config = ConnectionConfig()

        with pytest.raises(ValidationError):
            config.query_text = None  # type: ignore[assignment]

    def test_copy_is_independent(self) -> None:
        config = ConnectionConfig(query_text="SELECT 1;")
        copy = config.model_copy()

        copy.query_text = "SELECT 2;"

        assert config.query_text == "SELECT 1;"


class TestAppConfig:
    """Tests for AppConfig model."""

    def test_defaults(self, tmp_path) -> None:
        config = AppConfig(config_dir=tmp_path)

        assert config.prefs_file == "prefs.json"
        assert config.log_file == "app.log"
        assert config.max_display_cells == 2048
        assert config.min_column_width == 32
        assert config.query_timeout_seconds == 300
        assert config.frame_interval_ms == 50

    def test_config_dir_required(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig()  # type: ignore[call-arg]

    def test_kdf_iterations_not_configurable(self) -> None:
        assert "kdf_iterations" not in AppConfig.model_fields

    def test_min_column_width_floor(self, tmp_path) -> None:
        with pytest.raises(ValidationError):
            AppConfig(config_dir=tmp_path, min_column_width=31)


class TestResultTableModel:
    def test_exported_from_models(self) -> None:
        table = ResultTable.from_rows(["a"], [["1"], ["2"]])

        assert table.header == ("a",)
        assert table.row_count == 2


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error_cls,exit_code",
        [
            (SqlPadError, 1),
            (ExecutionError, 8),
            (ConnectError, 7),
            (QueryError, 9),
            (QueryTimeoutError, 12),
            (DecryptError, 5),
        ],
    )
    def test_exit_codes(self, error_cls: type[SqlPadError], exit_code: int) -> None:
        error = error_cls("message")

        assert error.exit_code == exit_code
        assert error.message == "message"
        assert str(error) == "message"

    def test_execution_errors_share_base(self) -> None:
        for error_cls in (ConnectError, QueryError, QueryTimeoutError):
            assert issubclass(error_cls, ExecutionError)
        assert not issubclass(DecryptError, ExecutionError)
