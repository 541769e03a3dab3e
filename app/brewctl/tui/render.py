"""Rendering helpers turning session snapshots into Rich renderables."""

from collections.abc import Sequence

from rich.text import Text

from brewctl.core.session import EntryRow
from brewctl.core.theme import ThemeColors

KEY_HELP = "d:dump  r:refresh  /:filter  enter:info  x:delete  c:cleanup  u:update+upgrade  q:quit"

EMPTY_LIST = "(empty)"


def visible_window(count: int, selected: int, height: int) -> tuple[int, int]:
    """Return the [start, end) slice of rows to draw so the selection is visible.

    The selection is kept roughly centered once the list is longer than the
    available height.
    """
    if count <= 0 or height <= 0:
        return 0, 0
    if count <= height:
        return 0, count
    start = max(0, min(selected - height // 2, count - height))
    return start, start + height


def render_entry_list(
    rows: Sequence[EntryRow],
    selected: int,
    height: int,
    colors: ThemeColors,
) -> Text:
    """Render the entry list, highlighting the selected row."""
    if not rows:
        return Text(EMPTY_LIST, style=colors.muted)

    start, end = visible_window(len(rows), selected, height)
    text = Text(no_wrap=True, overflow="ellipsis")
    for index in range(start, end):
        row = rows[index]
        line = Text(row.label, style=colors.kind_color(row.kind))
        if index == selected:
            line.stylize(f"bold {colors.text} on {colors.selected}")
        text.append_text(line)
        if index < end - 1:
            text.append("\n")
    return text


def render_status(
    message: str,
    *,
    filter_text: str = "",
    pending: int = 0,
    debug: bool = False,
) -> str:
    """Render the two-line status area: key help and the latest message."""
    details: list[str] = []
    if filter_text:
        details.append(f"filter: {filter_text}")
    if pending:
        details.append(f"{pending} running")
    if debug:
        details.append("debug")
    suffix = f"  [{', '.join(details)}]" if details else ""
    return f"{KEY_HELP}\n{message}{suffix}"
