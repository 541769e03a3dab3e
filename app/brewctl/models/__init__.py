"""Data models for brewctl.

This module exports the core data structures used throughout the application.
"""

from brewctl.models.command import CommandSpec, Intent
from brewctl.models.entry import Entry, EntryKind, EntryStatus, ParsedBrewfile

__all__ = [
    "CommandSpec",
    "Entry",
    "EntryKind",
    "EntryStatus",
    "Intent",
    "ParsedBrewfile",
]
