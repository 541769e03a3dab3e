"""Entry models for Brewfile contents.

This module defines the data structures representing the lines of a
Brewfile (formulae, casks, Mac App Store apps and taps) together with the
per-entry state tracked by an interactive session.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Attribute values parsed from trailing modifiers (`link: false`, `restart_service`)
AttributeValue = str | bool


class EntryKind(Enum):
    """Enumeration of Brewfile entry kinds."""

    PACKAGE = "package"
    CASK = "cask"
    STORE_APP = "store-app"
    TAP = "tap"
    UNKNOWN = "unknown"

    @property
    def id_prefix(self) -> str:
        """Prefix used when building entry ids for this kind."""
        if self is EntryKind.STORE_APP:
            return "mas"
        return self.value

    @property
    def label(self) -> str:
        """Short label shown in entry lists."""
        return {
            EntryKind.PACKAGE: "brew",
            EntryKind.CASK: "cask",
            EntryKind.STORE_APP: "mas",
            EntryKind.TAP: "tap",
            EntryKind.UNKNOWN: "unknown",
        }[self]


class EntryStatus(Enum):
    """Progress of external operations against an entry.

    Transitions are `idle -> loading -> ready | error`; an explicit info
    refetch re-enters `loading`.
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(slots=True, eq=False)
class Entry:
    """A single Brewfile line and the session state attached to it.

    Provenance fields (id, kind, name, raw, line_number) never change after
    parsing. The remaining fields are owned by the session and updated as
    operations against this entry complete.

    Attributes:
        id: Stable identifier (`package:wget`, `mas:497799835`, `unknown:7`).
        kind: Entry kind.
        name: Formula, cask, tap or app name.
        raw: Original line text.
        line_number: 1-based line number in the Brewfile.
        attributes: Trailing modifiers (`link: false` -> {"link": "false"}).
        status: Current operation status.
        details: Payload of the last successful detail fetch.
        info_text: Output of the last successful info fetch.
        info_error: Error of the last failed info fetch.
        error: Error of the last failed detail fetch (or parse error).
    """

    id: str
    kind: EntryKind
    name: str
    raw: str
    line_number: int
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    status: EntryStatus = EntryStatus.IDLE
    details: Any = None
    info_text: str | None = None
    info_error: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "Entry id cannot be empty"
            raise ValueError(msg)

    @property
    def has_details(self) -> bool:
        """Check if details have been fetched for this entry."""
        return self.details is not None

    @property
    def store_id(self) -> int | None:
        """Return the numeric App Store id, if it can be resolved.

        The `id` attribute wins; otherwise the suffix of a `mas:` entry id
        is used.
        """
        candidate = self.attributes.get("id")
        if isinstance(candidate, str) and candidate.isdigit():
            return int(candidate)
        prefix, _, suffix = self.id.partition(":")
        if prefix == EntryKind.STORE_APP.id_prefix and suffix.isdigit():
            return int(suffix)
        return None


@dataclass(frozen=True, slots=True)
class ParsedBrewfile:
    """Result of parsing Brewfile text.

    Attributes:
        entries: One entry per non-blank, non-comment line.
        warnings: One message per malformed line.
    """

    entries: tuple[Entry, ...]
    warnings: tuple[str, ...] = ()

    @property
    def warning_count(self) -> int:
        """Number of malformed lines."""
        return len(self.warnings)
