"""Interactive session state machine.

The Session is the single owner of the entry list, the active filter, the
selection cursor and per-entry cached state. Every user intent maps onto one
method. Methods that touch the outside world are coroutines or schedule
background tasks; none of them blocks further input.

Fetch completions are written into the entry that was targeted when the
fetch was issued (looked up again by id, so a reload in between still lands
on the right record). The presentation is only asked to refresh for a
detail completion if that entry is still selected.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from brewctl.core.errors import BrewctlError, UnexpectedFailureError
from brewctl.core.summary import NO_INFO, format_entry_details, format_info_pane
from brewctl.models.command import Intent
from brewctl.models.entry import Entry, EntryKind, EntryStatus

if TYPE_CHECKING:
    from brewctl.core.service import BrewService

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a user intent.

    Attributes:
        success: Whether the operation completed successfully.
        message: Status-line message describing the outcome.
        error: The error if the operation failed.
        count: Number of entries loaded (load operations only).
        warnings: Parse warnings (load operations only).
        output: Command output worth showing, if any.
    """

    success: bool
    message: str
    error: BrewctlError | None = None
    count: int | None = None
    warnings: tuple[str, ...] = ()
    output: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class EntryRow:
    """One line of the entry list."""

    id: str
    kind: EntryKind
    name: str
    status: EntryStatus

    @property
    def label(self) -> str:
        """List label: `[kind] name`, with ` !` for entries in error."""
        marker = " !" if self.status == EntryStatus.ERROR else ""
        return f"[{self.kind.label}] {self.name}{marker}"


@dataclass(frozen=True, slots=True)
class RenderSnapshot:
    """Everything the presentation surface needs to draw one frame."""

    rows: tuple[EntryRow, ...]
    selected_index: int
    detail_text: str
    info_text: str
    status_message: str
    filter_text: str


def filter_entries(entries: Sequence[Entry], text: str) -> list[Entry]:
    """Return entries whose name contains text (case-insensitive), in order."""
    if not text:
        return list(entries)
    needle = text.lower()
    return [e for e in entries if needle in e.name.lower()]


def clamp_index(index: int, length: int) -> int:
    """Clamp an index into [0, length - 1], or 0 when length is 0."""
    if length <= 0:
        return 0
    return max(0, min(length - 1, index))


class Session:
    """Authoritative state of one interactive session.

    Example:
        >>> session = Session(BrewService(ShellCommandGateway(), Path("Brewfile")))
        >>> await session.load()
        >>> session.move_selection(1)
        >>> await session.fetch_info_text_for_selection()
    """

    def __init__(self, service: BrewService) -> None:
        """Initialize an empty session.

        Args:
            service: Service used for every manifest and command operation.
        """
        self._service = service
        self._all_entries: list[Entry] = []
        self._by_id: dict[str, Entry] = {}
        self._visible_entries: list[Entry] = []
        self._filter_text = ""
        self._selected_index = 0
        self._status_message = ""
        self._details_in_flight: set[str] = set()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._listeners: list[Listener] = []

    # =========================================================================
    # State accessors
    # =========================================================================

    @property
    def all_entries(self) -> tuple[Entry, ...]:
        """All entries from the last successful load."""
        return tuple(self._all_entries)

    @property
    def visible_entries(self) -> tuple[Entry, ...]:
        """Entries matching the current filter, in Brewfile order."""
        return tuple(self._visible_entries)

    @property
    def filter_text(self) -> str:
        """Current filter text."""
        return self._filter_text

    @property
    def selected_index(self) -> int:
        """Index of the selection in visible_entries (0 when empty)."""
        return self._selected_index

    @property
    def selected_entry(self) -> Entry | None:
        """The selected entry, or None when nothing is visible."""
        if not self._visible_entries:
            return None
        return self._visible_entries[self._selected_index]

    @property
    def status_message(self) -> str:
        """Latest status-line message."""
        return self._status_message

    @property
    def pending_tasks(self) -> int:
        """Number of background operations still running."""
        return len(self._tasks)

    def report(self, message: str) -> None:
        """Show a message on the status line (cancellations, hints)."""
        self._set_status(message)

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked whenever the display should refresh."""
        self._listeners.append(listener)

    def snapshot(self) -> RenderSnapshot:
        """Build a render snapshot of the current state."""
        entry = self.selected_entry
        if entry is not None:
            detail_text = format_entry_details(entry)
        elif self._filter_text and self._all_entries:
            detail_text = f"No items match filter: {self._filter_text}"
        else:
            detail_text = "No items to display. Press d to dump Brewfile."
        return RenderSnapshot(
            rows=tuple(EntryRow(e.id, e.kind, e.name, e.status) for e in self._visible_entries),
            selected_index=self._selected_index,
            detail_text=detail_text,
            info_text=format_info_pane(entry) if entry is not None else NO_INFO,
            status_message=self._status_message,
            filter_text=self._filter_text,
        )

    async def wait_idle(self) -> None:
        """Wait until every background operation has completed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # =========================================================================
    # Synchronous intents
    # =========================================================================

    def set_filter(self, text: str) -> None:
        """Filter visible entries by case-insensitive name match.

        Selection resets to the first match. No details are fetched here;
        callers follow up with move_selection or select.
        """
        self._filter_text = text.strip()
        self._apply_filter()
        self._selected_index = 0
        if not self._visible_entries and self._filter_text:
            self._status_message = "No results."
        self._notify()

    def move_selection(self, delta: int) -> asyncio.Task[None] | None:
        """Move the selection by delta, clamped to the visible range.

        Returns:
            The scheduled detail fetch, if one was started.
        """
        if not self._visible_entries:
            return None
        return self.select(self._selected_index + delta)

    def select(self, index: int) -> asyncio.Task[None] | None:
        """Select a visible entry by index (clamped).

        Returns:
            The scheduled detail fetch, if one was started.
        """
        if not self._visible_entries:
            return None
        self._selected_index = clamp_index(index, len(self._visible_entries))
        task = self.fetch_details_for_selection()
        self._notify()
        return task

    def fetch_details_for_selection(self) -> asyncio.Task[None] | None:
        """Start fetching details for the selected entry.

        No-op when details are cached, a fetch for this entry is already in
        flight, or the entry kind has no details command.

        Returns:
            The scheduled fetch task, or None if nothing was started.
        """
        entry = self.selected_entry
        if entry is None or entry.has_details or entry.id in self._details_in_flight:
            return None
        if not self._service.mapper.supports(entry.kind, Intent.DETAILS):
            return None

        self._details_in_flight.add(entry.id)
        entry.status = EntryStatus.LOADING
        return self._spawn(self._fetch_details(entry), f"details:{entry.id}")

    def delete_preview(self, entry: Entry | None = None) -> str:
        """Return the command a delete of the selection would run.

        Raises:
            UnsupportedOperationError: If the entry kind cannot be deleted.
            MissingIdentifierError: If a store app has no numeric id.
        """
        target = entry or self.selected_entry
        if target is None:
            msg = "Nothing selected"
            raise UnexpectedFailureError(msg)
        return self._service.mapper.resolve(target, Intent.DELETE).display()

    # =========================================================================
    # Asynchronous intents
    # =========================================================================

    async def load(self, preferred_index: int = 0) -> OperationResult:
        """Read and parse the Brewfile, replacing all entries.

        On failure the previous entries, filter and selection are kept.

        Args:
            preferred_index: Index to select after loading (clamped).

        Returns:
            OperationResult with the entry count and parse warnings.
        """
        self._set_status("Refreshing Brewfile list...")
        try:
            parsed = await asyncio.to_thread(self._service.read_and_parse)
        except Exception as e:
            return self._fail(e, "Failed to load Brewfile")

        self._replace_entries(parsed.entries)
        self._selected_index = clamp_index(preferred_index, len(self._visible_entries))

        if parsed.warnings:
            message = f"Refreshed with {parsed.warning_count} parse warning(s)."
        else:
            message = f"Loaded {len(parsed.entries)} items from Brewfile."
        logger.info("Loaded %d entries (%d warnings)", len(parsed.entries), parsed.warning_count)

        self._status_message = message
        self.fetch_details_for_selection()
        self._notify()
        return OperationResult(
            success=True,
            message=message,
            count=len(parsed.entries),
            warnings=parsed.warnings,
        )

    async def fetch_info_text_for_selection(self) -> OperationResult:
        """Fetch info text for the selected entry.

        Always re-executes, since the output reflects external state. The
        result overwrites the entry's info text and info error.
        """
        entry = self.selected_entry
        if entry is None:
            return self._fail(UnexpectedFailureError("Nothing selected"))

        try:
            self._service.mapper.resolve(entry, Intent.INFO)
        except BrewctlError as e:
            return self._fail(e)

        entry.status = EntryStatus.LOADING
        self._set_status(f"Loading source info for {entry.name}...")
        try:
            text = await self._service.fetch_info_text(entry)
        except Exception as e:
            error = self._wrap(e)
            target = self._current_record(entry)
            target.info_text = None
            target.info_error = str(error)
            target.status = EntryStatus.ERROR
            return self._fail(error)

        target = self._current_record(entry)
        target.info_text = text
        target.info_error = None
        target.status = EntryStatus.READY
        return self._succeed(f"Loaded source info for {entry.name}.", output=text)

    async def delete_selected(
        self, previous_index: int | None = None, *, entry_id: str | None = None
    ) -> OperationResult:
        """Uninstall an entry and remove it from the list.

        Confirmation is the caller's job. After the uninstall succeeds the
        entry is removed immediately and a background `brew bundle dump`
        plus reload resynchronizes the list. A failed resync is reported but
        never restores the removed entry.

        Args:
            previous_index: Selection index to restore after removal.
                Defaults to the current selection.
            entry_id: Entry the user confirmed, looked up in the current
                list so a reload that moved the selection meanwhile does
                not change the target. Defaults to the selected entry.
        """
        if entry_id is None:
            entry = self.selected_entry
            if entry is None:
                return self._fail(UnexpectedFailureError("Nothing selected"))
        else:
            found = self._by_id.get(entry_id)
            if found is None:
                msg = f"{entry_id} is no longer in the Brewfile"
                return self._fail(UnexpectedFailureError(msg))
            entry = found
        if previous_index is None:
            previous_index = self._selected_index

        try:
            self._service.mapper.resolve(entry, Intent.DELETE)
        except BrewctlError as e:
            return self._fail(e)

        self._set_status(f"Deleting {entry.name}...")
        try:
            output = await self._service.delete_entry(entry)
        except Exception as e:
            return self._fail(e)

        self._remove_optimistically(entry.id, previous_index)
        message = f"{output}. Syncing Brewfile in background..."
        self._spawn(self._sync_after_delete(entry, previous_index), f"resync:{entry.id}")
        return self._succeed(message, output=output)

    async def dump(self) -> OperationResult:
        """Regenerate the Brewfile and reload it."""
        self._set_status("Dumping Brewfile...")
        try:
            output = await self._service.dump_brewfile()
        except Exception as e:
            return self._fail(e)
        logger.debug("brew bundle dump output: %s", output)
        return self._after_command(
            await self.load(self._selected_index), f"Dump complete: {self._service.brewfile}."
        )

    async def cleanup(self) -> OperationResult:
        """Run `brew cleanup` and reload."""
        self._set_status("Running brew cleanup...")
        try:
            output = await self._service.cleanup()
        except Exception as e:
            return self._fail(e)
        logger.debug("brew cleanup output: %s", output)
        return self._after_command(await self.load(), "Cleanup complete.", output=output)

    async def bulk_update_all(self) -> OperationResult:
        """Run `brew update` then `brew upgrade`, then reload.

        The upgrade is only attempted after a successful update. The
        returned error carries the command of whichever step failed.
        """
        self._set_status("Running brew update and brew upgrade...")
        try:
            output = await self._service.update_and_upgrade_all()
        except Exception as e:
            return self._fail(e)
        logger.debug("Update/upgrade output: %s", output)
        return self._after_command(
            await self.load(self._selected_index), "Update/upgrade complete.", output=output
        )

    # =========================================================================
    # Internals
    # =========================================================================

    async def _fetch_details(self, target: Entry) -> None:
        error: BrewctlError | None = None
        details: Any = None
        try:
            details = await self._service.fetch_details(target)
        except Exception as e:
            error = self._wrap(e)
        finally:
            self._details_in_flight.discard(target.id)

        entry = self._current_record(target)
        if error is None:
            entry.details = details
            entry.error = None
            entry.status = EntryStatus.READY
        else:
            logger.warning("Failed to fetch details for %s: %s", target.id, error)
            entry.error = str(error)
            entry.status = EntryStatus.ERROR

        selected = self.selected_entry
        if selected is not None and selected.id == target.id:
            self._notify()

    async def _sync_after_delete(self, deleted: Entry, preferred_index: int) -> None:
        try:
            await self._service.dump_brewfile()
        except Exception as e:
            error = self._wrap(e)
            logger.warning("Brewfile sync after deleting %s failed: %s", deleted.id, error)
            self._set_status(f"Warning: {deleted.name} deleted, but Brewfile sync failed: {error}")
            return

        result = await self.load(preferred_index)
        if result.success:
            self._set_status("Delete synced with Brewfile.")
        else:
            logger.warning("Reload after deleting %s failed: %s", deleted.id, result.message)
            self._set_status(
                f"Warning: {deleted.name} deleted, but reload failed: {result.message}"
            )

    def _after_command(
        self, load_result: OperationResult, message: str, output: str | None = None
    ) -> OperationResult:
        """Combine a command's outcome with the reload that follows it."""
        if load_result.failed:
            return load_result
        return self._succeed(
            f"{message} {load_result.message}",
            count=load_result.count,
            warnings=load_result.warnings,
            output=output,
        )

    def _replace_entries(self, entries: Sequence[Entry]) -> None:
        self._all_entries = list(entries)
        self._by_id = {}
        for entry in self._all_entries:
            self._by_id.setdefault(entry.id, entry)
        self._apply_filter()

    def _apply_filter(self) -> None:
        self._visible_entries = filter_entries(self._all_entries, self._filter_text)

    def _remove_optimistically(self, entry_id: str, preferred_index: int) -> None:
        self._replace_entries([e for e in self._all_entries if e.id != entry_id])
        self._selected_index = clamp_index(preferred_index, len(self._visible_entries))
        self.fetch_details_for_selection()

    def _current_record(self, target: Entry) -> Entry:
        """Return the record a completion for target should be written into."""
        if target in self._all_entries:
            return target
        return self._by_id.get(target.id, target)

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _wrap(self, error: Exception) -> BrewctlError:
        if isinstance(error, BrewctlError):
            return error
        logger.error("Unexpected failure: %s", error, exc_info=error)
        return UnexpectedFailureError(f"{type(error).__name__}: {error}")

    def _fail(self, error: Exception, prefix: str | None = None) -> OperationResult:
        wrapped = self._wrap(error)
        message = f"Error: {prefix}: {wrapped}" if prefix else f"Error: {wrapped}"
        self._set_status(message)
        return OperationResult(success=False, message=message, error=wrapped)

    def _succeed(
        self,
        message: str,
        *,
        count: int | None = None,
        warnings: tuple[str, ...] = (),
        output: str | None = None,
    ) -> OperationResult:
        self._set_status(message)
        return OperationResult(
            success=True, message=message, count=count, warnings=warnings, output=output
        )

    def _set_status(self, message: str) -> None:
        self._status_message = message
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener()
            except Exception:
                logger.exception("Session listener failed")
