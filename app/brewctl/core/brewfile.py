"""Brewfile reading and parsing.

This module turns Brewfile text into Entry objects. Parsing never fails:
lines that cannot be understood become `unknown` entries and produce a
warning, so a single bad line never hides the rest of the file.
"""

import logging
import re
from pathlib import Path

from brewctl.core.errors import ManifestUnavailableError
from brewctl.models.entry import AttributeValue, Entry, EntryKind, EntryStatus, ParsedBrewfile

logger = logging.getLogger(__name__)

# Declarative lines: `brew "wget"`, `cask "iterm2", greedy: true`, `tap "x/y"`
_DECLARATIVE_RE = re.compile(r'^(brew|package|cask|tap)\s+"([^"]+)"(?:\s*,\s*(.+))?$')

# Store apps: `mas "Xcode", id: 497799835`
_STORE_APP_RE = re.compile(r'^(mas|store-app)\s+"([^"]+)"\s*,\s*id:\s*(\d+)(?:\s*,\s*(.+))?$')

_KEYWORD_KINDS: dict[str, EntryKind] = {
    "brew": EntryKind.PACKAGE,
    "package": EntryKind.PACKAGE,
    "cask": EntryKind.CASK,
    "tap": EntryKind.TAP,
}

UNKNOWN_LINE_ERROR = "Unsupported or malformed Brewfile line"


def read_brewfile(path: Path) -> str:
    """Read Brewfile text from disk.

    Args:
        path: Path to the Brewfile.

    Returns:
        File contents, line endings untouched.

    Raises:
        ManifestUnavailableError: If the file is missing or unreadable.
    """
    try:
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestUnavailableError(f"Brewfile not found at {path}: {e}") from e


def parse_brewfile(content: str) -> ParsedBrewfile:
    """Parse Brewfile text into entries.

    Blank lines and comments are skipped. Every other line produces exactly
    one entry; malformed lines become `unknown` entries with a warning.

    Args:
        content: Brewfile text.

    Returns:
        ParsedBrewfile with entries in file order and parse warnings.
    """
    entries: list[Entry] = []
    warnings: list[str] = []

    for index, text in enumerate(content.split("\n")):
        line_number = index + 1
        raw = text.removesuffix("\r")
        line = raw.strip()

        if not line or line.startswith("#"):
            continue

        entry = _parse_line(line, raw, line_number)
        if entry is None:
            entries.append(
                Entry(
                    id=f"{EntryKind.UNKNOWN.id_prefix}:{line_number}",
                    kind=EntryKind.UNKNOWN,
                    name=line,
                    raw=raw,
                    line_number=line_number,
                    status=EntryStatus.ERROR,
                    error=UNKNOWN_LINE_ERROR,
                )
            )
            warnings.append(f"Line {line_number}: Unsupported or malformed line")
            continue

        entries.append(entry)

    if warnings:
        logger.debug("Parsed Brewfile with %d warning(s)", len(warnings))

    return ParsedBrewfile(entries=tuple(entries), warnings=tuple(warnings))


def load_brewfile(path: Path) -> ParsedBrewfile:
    """Read and parse a Brewfile.

    Raises:
        ManifestUnavailableError: If the file is missing or unreadable.
    """
    return parse_brewfile(read_brewfile(path))


def parse_attributes(text: str | None) -> dict[str, AttributeValue]:
    """Parse trailing `key: value` modifiers.

    A key without a value is recorded as a boolean flag. Quoted values are
    unquoted.

    Args:
        text: Modifier text following the entry name, or None.

    Returns:
        Mapping of attribute names to values.
    """
    if not text:
        return {}

    attributes: dict[str, AttributeValue] = {}
    for segment in (part.strip() for part in text.split(",")):
        if not segment:
            continue
        key, _, value = segment.partition(":")
        key = key.strip()
        if not key:
            continue
        value = value.strip()
        attributes[key] = _unquote(value) if value else True
    return attributes


def _parse_line(line: str, raw: str, line_number: int) -> Entry | None:
    """Parse a single stripped line, returning None if it is not understood."""
    match = _DECLARATIVE_RE.match(line)
    if match:
        keyword, name, modifiers = match.groups()
        kind = _KEYWORD_KINDS[keyword]
        return Entry(
            id=f"{kind.id_prefix}:{name}",
            kind=kind,
            name=name,
            raw=raw,
            line_number=line_number,
            attributes=parse_attributes(modifiers),
        )

    match = _STORE_APP_RE.match(line)
    if match:
        _, name, app_id, modifiers = match.groups()
        attributes = {**parse_attributes(modifiers), "id": app_id}
        return Entry(
            id=f"{EntryKind.STORE_APP.id_prefix}:{app_id}",
            kind=EntryKind.STORE_APP,
            name=name,
            raw=raw,
            line_number=line_number,
            attributes=attributes,
        )

    return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value
