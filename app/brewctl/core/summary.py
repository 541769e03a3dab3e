"""Plain-text summaries of entries for the detail and info panes."""

import json
from dataclasses import dataclass, field
from typing import Any

from brewctl.models.entry import Entry, EntryKind, EntryStatus

INFO_PLACEHOLDER = "Press enter to load source info."
NO_INFO = "No source info available."


@dataclass(frozen=True, slots=True)
class LocalSummary:
    """Install location and dependencies extracted from cached details."""

    location: str = "Unknown"
    dependencies: tuple[str, ...] = field(default_factory=tuple)


def extract_local_summary(entry: Entry) -> LocalSummary:
    """Extract install location and dependencies from `brew info --json=v2` output.

    Args:
        entry: Entry whose cached details are inspected.

    Returns:
        LocalSummary; "Unknown" location when details are missing or unexpected.
    """
    details = entry.details
    if not isinstance(details, dict):
        return LocalSummary()

    if entry.kind == EntryKind.PACKAGE:
        formula = _first_record(details.get("formulae"))
        installed = _first_record(formula.get("installed"))
        location = (
            _string(installed.get("prefix"))
            or _string(formula.get("linked_keg"))
            or _string(formula.get("rack"))
            or "Unknown"
        )
        return LocalSummary(location, _string_list(formula.get("dependencies")) or ("None",))

    if entry.kind == EntryKind.CASK:
        cask = _first_record(details.get("casks"))
        location = _first_string(cask.get("installed")) or _first_string(cask.get("name"))
        depends_on = cask.get("depends_on")
        if not isinstance(depends_on, dict):
            depends_on = {}
        dependencies = _string_list(depends_on.get("formula")) + _string_list(
            depends_on.get("cask")
        )
        return LocalSummary(location or "Unknown", dependencies or ("None",))

    if entry.kind == EntryKind.STORE_APP:
        return LocalSummary("Managed by App Store", ("None",))

    return LocalSummary()


def format_entry_details(entry: Entry) -> str:
    """Render the local details pane for an entry."""
    lines = [
        f"Type: {entry.kind.value}",
        f"Name: {entry.name}",
        f"ID: {entry.id}",
        f"Line: {entry.line_number}",
        f"Raw: {entry.raw.strip()}",
        f"Status: {entry.status.value}",
        "",
    ]

    if entry.error:
        lines.append(f"Error: {entry.error}")

    lines.append("Attributes:")
    lines.append(_stringify(entry.attributes))

    if entry.status == EntryStatus.LOADING and not entry.has_details:
        lines.extend(["", "Loading details..."])
    else:
        summary = extract_local_summary(entry)
        lines.extend(
            [
                "",
                f"Location: {summary.location}",
                f"Dependencies: {', '.join(summary.dependencies)}",
            ]
        )

    if entry.info_error:
        lines.extend(["", f"Last source info error: {entry.info_error}"])

    return "\n".join(lines)


def format_info_pane(entry: Entry | None) -> str:
    """Render the info pane for the selected entry."""
    if entry is None:
        return NO_INFO
    if entry.info_error is not None:
        return f"Error loading source info:\n{entry.info_error}"
    if entry.info_text is not None:
        return entry.info_text or "(no output)"
    return INFO_PLACEHOLDER


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2, sort_keys=True)
    except (TypeError, ValueError):
        return str(value)


def _first_record(value: Any) -> dict[str, Any]:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _first_string(value: Any) -> str | None:
    if isinstance(value, list) and value:
        return _string(value[0])
    return None


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))
