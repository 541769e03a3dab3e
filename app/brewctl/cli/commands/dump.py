"""Dump command regenerating the Brewfile.

This module provides the `brewctl dump` command, a thin wrapper around
`brew bundle dump`.
"""

import asyncio

import typer

from brewctl.cli.types import BrewfileOption, build_service, require_config
from brewctl.core.errors import BrewctlError
from brewctl.utils.formatting import print_error, print_success

app = typer.Typer(
    name="dump",
    help="Regenerate the Brewfile from installed software.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def dump(brewfile: BrewfileOption = None) -> None:
    """Write installed formulae, casks, App Store apps and taps to the Brewfile."""
    service = build_service(require_config(), brewfile)

    try:
        asyncio.run(service.dump_brewfile())
        parsed = service.read_and_parse()
    except BrewctlError as e:
        print_error(f"Dump failed: {e}")
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Could not run {service.mapper.brew}: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Brewfile written to {service.brewfile} ({len(parsed.entries)} entries)")
