"""UI command launching the interactive console.

This module provides the `brewctl ui` command.
"""

from typing import Annotated

import typer

from brewctl.cli.types import BrewfileOption, build_service, require_config
from brewctl.core.session import Session
from brewctl.tui.app import BrewctlApp
from brewctl.utils.formatting import print_error, print_warning
from brewctl.utils.log import configure_file_logging

app = typer.Typer(
    name="ui",
    help="Launch the interactive console.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def ui(
    brewfile: BrewfileOption = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Write debug logs to the state directory.",
        ),
    ] = False,
) -> None:
    """Browse and manage Brewfile entries interactively.

    Keys: j/k move, / filter, enter info, x delete, d dump, r refresh,
    c cleanup, u update+upgrade, q quit.
    """
    config = require_config()
    try:
        configure_file_logging(debug)
    except (RuntimeError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    service = build_service(config, brewfile)
    for program in service.missing_programs():
        print_warning(f"{program} not found on PATH; commands using it will fail.")
    session = Session(service)
    BrewctlApp(session, debug=debug).run()
