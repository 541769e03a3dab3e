"""Exception hierarchy for brewctl.

Every failure an interactive session can report derives from BrewctlError,
so callers can distinguish expected domain failures from programming errors.
"""

from brewctl.models.command import CommandSpec, Intent
from brewctl.models.entry import EntryKind

_INTENT_LABELS: dict[Intent, str] = {
    Intent.DETAILS: "Details",
    Intent.INFO: "Info",
    Intent.DELETE: "Delete",
}


class BrewctlError(Exception):
    """Base exception for brewctl errors."""


class ManifestUnavailableError(BrewctlError):
    """Raised when the Brewfile is missing or unreadable."""


class OperationError(BrewctlError):
    """Base exception for operations that cannot be mapped to a command."""


class UnsupportedOperationError(OperationError):
    """Raised when an entry kind does not support an intent."""

    def __init__(self, kind: EntryKind, intent: Intent) -> None:
        self.kind = kind
        self.intent = intent
        super().__init__(f"{_INTENT_LABELS[intent]} is not supported for {kind.value}")


class MissingIdentifierError(OperationError):
    """Raised when a store app has no numeric App Store id."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing App Store id for {name}")


class ExternalCommandFailedError(BrewctlError):
    """Raised when an external command exits with a non-zero code.

    Attributes:
        command: The command that failed.
        returncode: Its exit code.
    """

    def __init__(self, command: CommandSpec, message: str, returncode: int = 1) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(message)


class UnexpectedFailureError(BrewctlError):
    """Raised for any other failure on the execution path."""
