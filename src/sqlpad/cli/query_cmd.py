"""
CLI commands for running queries.

Provides:
- ``query``: run one statement and print the grid
- ``console``: interactive loop over the same execution session
- ``templates``: list the built-in SQL templates

Both execution commands restore the stored connection string and query text
on start and save them back on exit.
"""

from __future__ import annotations

import time

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sqlpad.cli.context import CliEnvironment, load_environment
from sqlpad.constants import DEFAULT_QUERY_TIMEOUT, EXIT_INVALID_ARGS, EXIT_QUERY_ERROR
from sqlpad.core.connection_string import mask_connection_string
from sqlpad.core.session import ExecutionSession, run_until_complete
from sqlpad.models.connection import ConnectionConfig
from sqlpad.models.result import ResultTable
from sqlpad.renderers.grid import GridRenderer
from sqlpad.utils.app_logger import get_logger
from sqlpad.utils.templates import TEMPLATES, get_template

console = Console()
logger = get_logger(__name__)

_QUIT_COMMANDS = {"\\q", "quit", "exit"}


def _execute(
    session: ExecutionSession,
    settings: ConnectionConfig,
    env: CliEnvironment,
) -> ResultTable | None:
    """Start ``settings`` on ``session`` and drive frames until it finishes."""
    started = time.monotonic()
    session.start(settings.connection_string, settings.query_text)

    with console.status("[cyan]Executing...[/cyan]") as status:

        def _on_frame() -> None:
            status.update(f"[cyan]Executing... {time.monotonic() - started:.1f}s[/cyan]")

        table = run_until_complete(
            session,
            _on_frame,
            frame_interval=env.config.frame_interval_ms / 1000,
        )

    logger.debug(f"Execution finished in {time.monotonic() - started:.2f}s")
    return table


def _show(table: ResultTable | None, renderer: GridRenderer) -> None:
    if table is None:
        return
    renderer.render(table, console)
    if not table.failed and not table.is_empty:
        console.print(f"[dim]{table.row_count} row(s)[/dim]")


@click.command(name="query")
@click.argument("sql", required=False)
@click.option("--connection", "-c", "connection_string", help="Connection string to use")
@click.option(
    "--template",
    "-t",
    type=click.Choice(sorted(TEMPLATES), case_sensitive=False),
    help="Run a built-in SQL template instead of SQL text",
)
@click.option("--timeout", type=click.IntRange(min=0), help="Query deadline in seconds (0 = none)")
@click.option("--max-cells", type=click.IntRange(min=1), help="Truncation budget in cells")
@click.option(
    "--save/--no-save",
    default=True,
    show_default=True,
    help="Store the connection string and query text for next time",
)
@click.pass_context
def query_command(
    ctx: click.Context,
    sql: str | None,
    connection_string: str | None,
    template: str | None,
    timeout: int | None,
    max_cells: int | None,
    save: bool,
) -> None:
    """Execute SQL and display the result grid.

    Without SQL or --template, the stored query text is executed.
    """
    env = load_environment(ctx)
    settings = env.vault.load()

    if connection_string:
        settings.connection_string = connection_string
    if template:
        settings.query_text = get_template(template).sql
    elif sql:
        settings.query_text = sql

    if not settings.query_text.strip():
        console.print("[red]Error: No SQL to execute[/red]")
        ctx.exit(EXIT_INVALID_ARGS)

    renderer = env.renderer(max_cells)
    with ExecutionSession(env.executor(timeout)) as session:
        table = _execute(session, settings, env)

    _show(table, renderer)

    if save:
        env.vault.save(settings)

    if table is not None and table.failed:
        ctx.exit(EXIT_QUERY_ERROR)


def _read_statement() -> str | None:
    """Prompt for input until a line ends with ';' or is a backslash command."""
    lines: list[str] = []
    while True:
        prompt = "sql" if not lines else "  ."
        try:
            line = click.prompt(prompt, prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            return None

        stripped = line.strip()
        if not lines and (not stripped or stripped.startswith("\\") or stripped in _QUIT_COMMANDS):
            return stripped
        lines.append(line)
        if stripped.endswith(";"):
            return "\n".join(lines)


def _print_connection(connection_string: str) -> None:
    console.print("Connection:", Text(mask_connection_string(connection_string), style="green"))


def _print_console_help() -> None:
    console.print(
        "[bold]Commands[/bold]\n"
        "  <sql>;               execute SQL (end with ';')\n"
        "  (empty line)         execute the current query again\n"
        "  \\c <connection>      change the connection string\n"
        "  \\t <template>        load a built-in template and execute it\n"
        "  \\s                   show the current settings\n"
        "  \\q                   quit"
    )


def _console_timeout(configured: int) -> int:
    """Deadline for console executions; the console never runs without one."""
    if configured > 0:
        return configured
    console.print(
        f"[yellow]query_timeout_seconds is 0; console uses {DEFAULT_QUERY_TIMEOUT}s instead[/yellow]"
    )
    return DEFAULT_QUERY_TIMEOUT


@click.command(name="console")
@click.option("--connection", "-c", "connection_string", help="Connection string to use")
@click.pass_context
def console_command(ctx: click.Context, connection_string: str | None) -> None:
    """Interactive SQL console."""
    env = load_environment(ctx)
    settings = env.vault.load()
    if connection_string:
        settings.connection_string = connection_string

    renderer = env.renderer()
    _print_connection(settings.connection_string)
    _print_console_help()

    try:
        timeout = _console_timeout(env.config.query_timeout_seconds)
        with ExecutionSession(env.executor(timeout)) as session:
            while True:
                statement = _read_statement()
                if statement is None or statement in _QUIT_COMMANDS:
                    break

                if statement.startswith("\\c"):
                    value = statement[2:].strip()
                    if not value:
                        console.print("[red]Usage: \\c <connection string>[/red]")
                        continue
                    settings.connection_string = value
                    _print_connection(value)
                    continue

                if statement.startswith("\\t"):
                    try:
                        settings.query_text = get_template(statement[2:].strip()).sql
                    except ValueError as e:
                        console.print(f"[red]{e}[/red]")
                        continue
                elif statement == "\\s":
                    _print_connection(settings.connection_string)
                    console.print(Text(settings.query_text))
                    continue
                elif statement.startswith("\\"):
                    _print_console_help()
                    continue
                elif statement:
                    settings.query_text = statement

                if not settings.query_text.strip():
                    console.print("[yellow]Nothing to execute[/yellow]")
                    continue

                console.print(Text(settings.query_text, style="dim"))
                _show(_execute(session, settings, env), renderer)
    finally:
        env.vault.save(settings)


@click.command(name="templates")
def templates_command() -> None:
    """List the built-in SQL templates."""
    table = Table(show_header=True, header_style="bold cyan", border_style="cyan", show_lines=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Description", no_wrap=True)
    table.add_column("SQL")
    for template in TEMPLATES.values():
        table.add_row(template.name, template.label, Text(template.sql))
    console.print(table)
