"""Config commands.

Provides commands to show, initialize and locate the brewctl configuration.
"""

from typing import Annotated

import typer
from rich.table import Table

from brewctl.cli.types import require_config
from brewctl.core.config import BrewctlConfig, ConfigError, save_config
from brewctl.core.paths import get_config_path
from brewctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the brewctl configuration.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config = require_config()
    path = get_config_path()

    table = Table(title="brewctl configuration", header_style="bold_header", border_style="border")
    table.add_column("Setting", style="info")
    table.add_column("Value")
    table.add_row("brewfile", str(config.resolve_brewfile()))
    table.add_row("brew_command", config.brew_command)
    table.add_row("mas_command", config.mas_command)
    table.add_row("dump_describe", str(config.dump_describe).lower())
    console.print(table)

    if not path.exists():
        print_info(f"No config file at {path}; showing defaults.")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(BrewctlConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
