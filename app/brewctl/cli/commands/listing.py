"""List command for printing Brewfile entries.

This module provides the `brewctl list` command.
"""

import json
from typing import Annotated

import typer

from brewctl.cli.types import BrewfileOption, build_service, require_config
from brewctl.core.errors import ManifestUnavailableError
from brewctl.core.session import filter_entries
from brewctl.models.entry import Entry
from brewctl.utils.formatting import (
    console,
    create_entry_table,
    format_entry_row,
    print_error,
    print_info,
    print_warning,
)

app = typer.Typer(
    name="list",
    help="List the entries of a Brewfile.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def list_entries(
    brewfile: BrewfileOption = None,
    filter_text: Annotated[
        str,
        typer.Option(
            "--filter",
            "-F",
            help="Only show entries whose name contains this text.",
        ),
    ] = "",
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the formulae, casks, App Store apps and taps in a Brewfile.

    Examples:
        brewctl list
        brewctl list --filter python
        brewctl list --brewfile ~/dotfiles/Brewfile --json
    """
    service = build_service(require_config(), brewfile)

    try:
        parsed = service.read_and_parse()
    except ManifestUnavailableError as e:
        print_error(str(e))
        print_info("Run 'brewctl dump' to create a Brewfile from your installed software.")
        raise typer.Exit(code=1) from e

    entries = filter_entries(parsed.entries, filter_text.strip())

    if json_output:
        _print_json(entries, parsed.warnings)
        return

    for warning in parsed.warnings:
        print_warning(warning)

    if not entries:
        print_info("No entries found.")
        return

    table = create_entry_table(title=f"Brewfile ({service.brewfile})")
    for entry in entries:
        table.add_row(*format_entry_row(entry))
    console.print(table)
    console.print(f"[muted]{len(entries)} of {len(parsed.entries)} entries[/]")


def _print_json(entries: list[Entry], warnings: tuple[str, ...]) -> None:
    """Print entries and warnings as JSON."""
    payload = {
        "entries": [
            {
                "id": entry.id,
                "kind": entry.kind.value,
                "name": entry.name,
                "line": entry.line_number,
                "attributes": entry.attributes,
            }
            for entry in entries
        ],
        "warnings": list(warnings),
    }
    typer.echo(json.dumps(payload, indent=2))
