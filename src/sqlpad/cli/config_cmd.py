"""Configuration management CLI commands."""

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sqlpad.cli.context import load_environment
from sqlpad.constants import EXIT_CONFIG_ERROR
from sqlpad.core.connection_string import mask_connection_string
from sqlpad.models.config import AppConfig
from sqlpad.utils.app_logger import get_logger

console = Console()
logger = get_logger(__name__)


@click.group(name="config")
def config_group() -> None:
    """Manage application settings and the stored connection."""
    pass


@config_group.command(name="show")
@click.option("--reveal", is_flag=True, help="Show the password in the connection string")
@click.pass_context
def config_show(ctx: click.Context, reveal: bool) -> None:
    """Show all settings plus the stored connection string and query."""
    env = load_environment(ctx)

    table = Table(title="Configuration Settings")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_column("Type", style="dim")
    for key, value in sorted(env.config_manager.to_dict().items()):
        table.add_row(key, Text(str(value)), type(value).__name__)
    console.print(table)

    stored = env.vault.load()
    connection = stored.connection_string if reveal else mask_connection_string(stored.connection_string)
    console.print("[bold]Connection string:[/bold]", Text(connection, style="green"))
    console.print("[bold]Query text:[/bold]")
    console.print(Text(stored.query_text))
    console.print(f"[dim]Configuration file: {env.config_manager.config_path}[/dim]")


@config_group.command(name="get")
@click.argument("key", type=str)
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Get a configuration value."""
    env = load_environment(ctx)
    value = env.config_manager.get(key)

    if value is None:
        console.print(f"[yellow]Configuration key '{key}' not set[/yellow]")
    else:
        console.print(f"[bold]{key}[/bold] =", Text(str(value), style="green"))


@config_group.command(name="set")
@click.argument("key", type=str)
@click.argument("value", type=str)
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value."""
    env = load_environment(ctx)

    converted = value if key in AppConfig.model_fields else _convert_value(value)
    try:
        env.config_manager.set(key, converted)
    except ValueError as e:
        console.print(f"[red]Error setting config: {e}[/red]")
        ctx.exit(EXIT_CONFIG_ERROR)

    env.config_manager.save()
    stored = env.config_manager.get(key)
    console.print(f"[green]✓[/green] Set [bold]{key}[/bold] =", Text(str(stored), style="green"))
    logger.info(f"Configuration updated: {key} = {stored}")


@config_group.command(name="reset")
@click.argument("key", type=str, required=False)
@click.option("--all", "reset_all", is_flag=True, help="Reset all configuration to defaults")
@click.pass_context
def config_reset(ctx: click.Context, key: str | None, reset_all: bool) -> None:
    """Reset configuration to default values."""
    env = load_environment(ctx)

    if reset_all:
        env.config_manager.reset_to_defaults()
        env.config_manager.save()
        console.print("[green]✓[/green] Reset all configuration to defaults")
        logger.info("Configuration reset to defaults")
    elif key:
        env.config_manager.reset_key(key)
        env.config_manager.save()
        console.print(f"[green]✓[/green] Reset [bold]{key}[/bold] to default")
        logger.info(f"Configuration key reset: {key}")
    else:
        console.print("[yellow]Specify a key to reset or use --all flag[/yellow]")


@config_group.command(name="set-connection")
@click.argument("connection_string", type=str)
@click.pass_context
def config_set_connection(ctx: click.Context, connection_string: str) -> None:
    """Store the connection string (encrypted)."""
    env = load_environment(ctx)
    settings = env.vault.load()
    settings.connection_string = connection_string
    env.vault.save(settings)
    console.print(
        "[green]✓[/green] Stored connection string",
        Text(mask_connection_string(connection_string), style="green"),
    )


@config_group.command(name="set-query")
@click.argument("sql", type=str)
@click.pass_context
def config_set_query(ctx: click.Context, sql: str) -> None:
    """Store the default query text (encrypted)."""
    env = load_environment(ctx)
    settings = env.vault.load()
    settings.query_text = sql
    env.vault.save(settings)
    console.print("[green]✓[/green] Stored query text")


@config_group.command(name="forget")
@click.confirmation_option(prompt="Remove the stored connection string and query?")
@click.pass_context
def config_forget(ctx: click.Context) -> None:
    """Remove the stored connection string and query text."""
    env = load_environment(ctx)
    env.vault.forget()
    console.print("[green]✓[/green] Stored connection settings removed")


def _convert_value(value_str: str) -> bool | int | float | str:
    """Convert string value to appropriate Python type.

    Args:
        value_str: String representation of value

    Returns:
        Converted value (bool, int, float, or str)
    """
    if value_str.lower() in ("true", "yes", "on"):
        return True
    if value_str.lower() in ("false", "no", "off"):
        return False

    try:
        return int(value_str)
    except ValueError:
        pass

    try:
        return float(value_str)
    except ValueError:
        pass

    return value_str
