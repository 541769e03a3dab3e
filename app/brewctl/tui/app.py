"""Textual application for the interactive console.

The app holds no state of its own beyond widgets: every key press maps to a
Session method, and every Session change triggers a redraw from a fresh
snapshot. Long-running session coroutines run as Textual workers so input
keeps flowing while commands execute.
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Static

from brewctl.core.errors import BrewctlError
from brewctl.core.session import Session
from brewctl.core.theme import ThemeColors, load_theme
from brewctl.tui.render import render_entry_list, render_status
from brewctl.tui.screens import ConfirmScreen, FilterScreen

logger = logging.getLogger(__name__)


class BrewctlApp(App[None]):
    """Interactive Brewfile console."""

    TITLE = "brewctl"

    CSS = """
    #main {
        height: 1fr;
    }
    #entries {
        width: 45%;
        border: round $primary;
        padding: 0 1;
    }
    #panes {
        width: 55%;
    }
    #details-pane, #info-pane {
        height: 1fr;
        border: round $primary;
        padding: 0 1;
    }
    #status {
        height: 4;
        border: round $secondary;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("j,down", "move(1)", "Down", show=False),
        Binding("k,up", "move(-1)", "Up", show=False),
        Binding("r", "reload", "Refresh"),
        Binding("d", "dump", "Dump"),
        Binding("slash", "filter", "Filter"),
        Binding("enter", "info", "Info"),
        Binding("x", "delete", "Delete"),
        Binding("c", "cleanup", "Cleanup"),
        Binding("u", "update", "Update+upgrade"),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        session: Session,
        *,
        debug: bool = False,
        colors: ThemeColors | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            session: Session driving all state.
            debug: Show a debug marker on the status line.
            colors: Theme colors. If None, loads the user theme.
        """
        super().__init__()
        self.session = session
        self.debug_mode = debug
        self.theme_colors = colors or load_theme()
        self._view_ready = False
        session.add_listener(self._on_session_change)

    def compose(self) -> ComposeResult:
        with Horizontal(id="main"):
            yield Static(id="entries")
            with Vertical(id="panes"):
                with VerticalScroll(id="details-pane"):
                    yield Static("Select a package to view local details.", id="details")
                with VerticalScroll(id="info-pane"):
                    yield Static("Press enter to load source info.", id="info")
        yield Static(id="status")

    def on_mount(self) -> None:
        self.query_one("#entries", Static).border_title = "Packages"
        self.query_one("#details-pane").border_title = "Local Details"
        self.query_one("#info-pane").border_title = "Source Info"
        self._view_ready = True
        self.refresh_view()
        self._run(self.session.load)

    def on_resize(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw every pane from the current session snapshot."""
        if not self._view_ready:
            return
        snapshot = self.session.snapshot()
        entries = self.query_one("#entries", Static)
        height = max(entries.content_size.height, 1)
        entries.update(
            render_entry_list(snapshot.rows, snapshot.selected_index, height, self.theme_colors)
        )
        self.query_one("#details", Static).update(Text(snapshot.detail_text))
        self.query_one("#info", Static).update(Text(snapshot.info_text))
        self.query_one("#status", Static).update(
            Text(
                render_status(
                    snapshot.status_message,
                    filter_text=snapshot.filter_text,
                    pending=self.session.pending_tasks,
                    debug=self.debug_mode,
                )
            )
        )

    def _on_session_change(self) -> None:
        self.refresh_view()

    def _run(self, operation: Callable[[], Coroutine[Any, Any, Any]]) -> None:
        """Run a session coroutine as a worker so input is never blocked."""
        self.run_worker(operation(), group="session", exclusive=False)

    # Actions

    def action_move(self, delta: int) -> None:
        self.session.move_selection(delta)

    def action_reload(self) -> None:
        self._run(lambda: self.session.load(self.session.selected_index))

    def action_dump(self) -> None:
        self._run(self.session.dump)

    def action_info(self) -> None:
        self._run(self.session.fetch_info_text_for_selection)

    def action_filter(self) -> None:
        self.push_screen(FilterScreen(self.session.filter_text), self._on_filter)

    def action_delete(self) -> None:
        entry = self.session.selected_entry
        if entry is None:
            return

        try:
            preview = self.session.delete_preview()
        except BrewctlError as e:
            logger.debug("Delete rejected for %s: %s", entry.id, e)
            self.session.report(str(e))
            return

        previous_index = self.session.selected_index

        def on_second(confirmed: bool | None) -> None:
            if not confirmed:
                self.session.report("Delete canceled.")
                return
            self._run(lambda: self.session.delete_selected(previous_index, entry_id=entry.id))

        def on_first(confirmed: bool | None) -> None:
            if not confirmed:
                self.session.report("Delete canceled.")
                return
            self.push_screen(ConfirmScreen(f"Confirm delete {entry.name}? (y/N)"), on_second)

        self.push_screen(ConfirmScreen(f"Run delete command?\n{preview}"), on_first)

    def action_cleanup(self) -> None:
        def on_answer(confirmed: bool | None) -> None:
            if not confirmed:
                self.session.report("Cleanup canceled.")
                return
            self._run(self.session.cleanup)

        self.push_screen(ConfirmScreen("Run brew cleanup?"), on_answer)

    def action_update(self) -> None:
        def on_answer(confirmed: bool | None) -> None:
            if not confirmed:
                self.session.report("Update/upgrade canceled.")
                return
            self._run(self.session.bulk_update_all)

        self.push_screen(
            ConfirmScreen("Run brew update and brew upgrade for all packages?"), on_answer
        )

    def _on_filter(self, value: str | None) -> None:
        if value is None:
            self.session.report("Filter canceled.")
            return
        self.session.set_filter(value)
        self.session.select(0)
