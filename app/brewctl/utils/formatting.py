"""Rich output for the non-interactive commands.

Messages go through two themed consoles: results on stdout, warnings and
errors on stderr so that `brewctl list --json` stays machine-readable.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from brewctl.core.theme import get_theme

if TYPE_CHECKING:
    from brewctl.models.entry import Entry


def _color_system(stream: object) -> str | None:
    """Force truecolor on terminals so hex theme colors render exactly."""
    isatty = getattr(stream, "isatty", None)
    return "truecolor" if callable(isatty) and isatty() else None


console = Console(theme=get_theme(), color_system=_color_system(sys.stdout))
err_console = Console(theme=get_theme(), stderr=True, color_system=_color_system(sys.stderr))


def create_entry_table(title: str = "Brewfile") -> Table:
    """Create the table used by `brewctl list`.

    Columns: Line, Kind, Name, ID, Attributes.
    """
    table = Table(
        title=title,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Line", style="muted", justify="right")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("ID", style="muted")
    table.add_column("Attributes", style="text", overflow="ellipsis")
    return table


def format_entry_row(entry: Entry) -> tuple[str, str, str, str, str]:
    """Format an entry as a row of create_entry_table, colored by kind.

    Boolean flags are shown by name alone; names and ids are escaped since
    tap names and attribute values may contain Rich markup characters.
    """
    style = f"kind.{entry.kind.name.lower()}"
    attributes = ", ".join(
        key if value is True else f"{key}: {value}" for key, value in entry.attributes.items()
    )
    return (
        str(entry.line_number),
        f"[{style}]{entry.kind.label}[/]",
        f"[{style}]{escape(entry.name)}[/]",
        escape(entry.id),
        escape(attributes) or "-",
    )


def print_info(message: str) -> None:
    console.print(f"[info]{escape(message)}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{escape(message)}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {escape(message)}")
