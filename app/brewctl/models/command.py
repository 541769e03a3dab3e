"""Command models for external package-manager invocations.

This module defines the intents a user can trigger against an entry and the
concrete program-and-arguments pair an intent resolves to.
"""

import shlex
from dataclasses import dataclass
from enum import Enum


class Intent(Enum):
    """Entry-level operations the session can request.

    Attributes:
        DETAILS: Fetch structured details (JSON where available).
        INFO: Fetch human-readable info text.
        DELETE: Uninstall the entry.
    """

    DETAILS = "fetch-details"
    INFO = "fetch-info-text"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """A program and its ordered arguments.

    Attributes:
        program: Executable name (e.g. "brew").
        args: Arguments passed to the executable.
    """

    program: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate command data after initialization."""
        if not self.program:
            msg = "Program name cannot be empty"
            raise ValueError(msg)

    @property
    def argv(self) -> list[str]:
        """Full argument vector including the program."""
        return [self.program, *self.args]

    def display(self) -> str:
        """Shell-quoted command line for previews and log messages."""
        return shlex.join(self.argv)
