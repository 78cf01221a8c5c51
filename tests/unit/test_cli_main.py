"""Tests for the primary CLI entry point and alias handling."""

import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from sqlpad import __version__
from sqlpad.cli.main import cli, main


@pytest.fixture(autouse=True)
def _reset_logging(cleanup_loggers: None) -> None:
    """The CLI group configures logging on every invocation."""


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_template_alias_exposes_command(tmp_path: Path) -> None:
    """The ``t`` shortcut should map to the templates command."""
    runner = CliRunner()
    env = {"SQLPAD_CONFIG_DIR": str(tmp_path)}

    result = runner.invoke(cli, ["t", "--help"], env=env)

    assert result.exit_code == 0
    assert "built-in SQL templates" in result.output


def test_console_alias_help(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["c", "--help"], env={"SQLPAD_CONFIG_DIR": str(tmp_path)})

    assert result.exit_code == 0
    assert "Interactive SQL console" in result.output


def test_log_file_written_to_config_dir(tmp_path: Path) -> None:
    CliRunner().invoke(cli, ["--config-dir", str(tmp_path), "templates"])

    assert (tmp_path / "app.log").exists()


def test_main_returns_exit_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        sys, "argv", ["sqlpad", "--config-dir", str(tmp_path), "config", "set", "max_display_cells", "0"]
    )

    assert main() == 3


def test_main_success(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(sys, "argv", ["sqlpad", "--config-dir", str(tmp_path), "templates"])

    assert main() == 0


def test_main_usage_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(sys, "argv", ["sqlpad", "--config-dir", str(tmp_path), "no-such-command"])

    assert main() == 2
