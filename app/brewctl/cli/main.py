"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from brewctl import __version__
from brewctl.cli.commands import config, dump, listing, ui
from brewctl.utils.log import configure_console_logging

# Create main Typer app
app = typer.Typer(
    name="brewctl",
    help="Interactive console for Homebrew Brewfiles.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"brewctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """brewctl - Inspect and manage the packages listed in a Brewfile.

    Browse formulae, casks, App Store apps and taps, look up their details,
    uninstall them and keep the Brewfile in sync.
    """
    configure_console_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.add_typer(ui.app, name="ui")
app.add_typer(listing.app, name="list")
app.add_typer(dump.app, name="dump")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
