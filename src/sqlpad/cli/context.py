"""Objects shared by CLI commands: configuration, vault and executor wiring."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from sqlpad.constants import DEFAULT_CONFIG_DIR, EXIT_CONFIG_ERROR
from sqlpad.core.config import ConfigManager
from sqlpad.core.driver import Driver
from sqlpad.core.preference_store import JsonPreferenceStore
from sqlpad.core.query_executor import QueryExecutor
from sqlpad.core.vault import CredentialVault
from sqlpad.models.config import AppConfig
from sqlpad.renderers.grid import GridRenderer


@dataclass
class CliEnvironment:
    """Everything a command needs, built from the click context."""

    config_manager: ConfigManager
    config: AppConfig
    vault: CredentialVault
    driver: Driver | None = None

    def executor(self, timeout_seconds: int | None = None) -> QueryExecutor:
        timeout = self.config.query_timeout_seconds if timeout_seconds is None else timeout_seconds
        return QueryExecutor(driver=self.driver, timeout_seconds=timeout or None)

    def renderer(self, max_cells: int | None = None) -> GridRenderer:
        return GridRenderer(
            max_cells=max_cells or self.config.max_display_cells,
            min_column_width=self.config.min_column_width,
        )


def load_environment(ctx: click.Context) -> CliEnvironment:
    """Load config and open the vault for the current invocation.

    Exits with EXIT_CONFIG_ERROR when config.json is invalid.
    """
    obj: dict[str, Any] = ctx.obj or {}
    config_dir = Path(obj.get("config_dir", DEFAULT_CONFIG_DIR))

    manager = ConfigManager(config_dir)
    try:
        config = manager.load()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_CONFIG_ERROR)

    vault = CredentialVault(
        JsonPreferenceStore(config.prefs_path),
        obj.get("passphrase"),
    )
    return CliEnvironment(
        config_manager=manager, config=config, vault=vault, driver=obj.get("driver")
    )
