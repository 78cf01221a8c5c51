"""Main CLI entry point using Click framework."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from sqlpad import __version__
from sqlpad.constants import DEFAULT_CONFIG_DIR, DEFAULT_LOG_FILE, EXIT_SUCCESS
from sqlpad.utils.app_logger import setup_logging

console = Console()


class AliasedGroup(click.Group):
    """Custom Click Group that supports command aliases."""

    aliases = {
        "q": "query",
        "c": "console",
        "t": "templates",
    }

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Override to support command aliases."""
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))


@click.group(cls=AliasedGroup)
@click.version_option(version=__version__, prog_name="sqlpad")
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_DIR,
    help="Configuration directory path",
    envvar="SQLPAD_CONFIG_DIR",
)
@click.option(
    "--passphrase",
    envvar="SQLPAD_PASSPHRASE",
    default=None,
    help="Secret used to encrypt stored settings (default: installation path)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.pass_context
def cli(ctx: click.Context, config_dir: Path, passphrase: str | None, verbose: bool) -> None:
    """SqlPad ad-hoc SQL console.

    Run SQL against a MySQL server and view the result as a grid. The
    connection string and query text are stored encrypted between runs.
    """
    ctx.ensure_object(dict)

    ctx.obj["config_dir"] = config_dir
    ctx.obj["verbose"] = verbose
    ctx.obj["passphrase"] = passphrase

    try:
        setup_logging(
            config_dir / DEFAULT_LOG_FILE,
            console_level=logging.DEBUG if verbose else logging.WARNING,
        )
    except OSError as e:
        console.print(f"[yellow]Warning: Could not initialize logging: {e}[/yellow]")


from sqlpad.cli.config_cmd import config_group  # noqa: E402
from sqlpad.cli.query_cmd import console_command, query_command, templates_command  # noqa: E402

cli.add_command(query_command)
cli.add_command(console_command)
cli.add_command(templates_command)
cli.add_command(config_group)


def main() -> int:
    """Main entry point for CLI."""
    try:
        # Non-standalone mode returns ctx.exit() codes instead of raising
        result = cli(obj={}, standalone_mode=False)
        return result if isinstance(result, int) else EXIT_SUCCESS
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        console.print("[yellow]Aborted[/yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
