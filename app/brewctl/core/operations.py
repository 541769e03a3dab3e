"""Operation mapping from intents to concrete commands.

The mapper is a pure function of (entry kind, intent): it performs no I/O
and never starts a process. It only decides which `brew`/`mas` invocation
an intent corresponds to.
"""

from pathlib import Path

from brewctl.core.errors import MissingIdentifierError, UnsupportedOperationError
from brewctl.models.command import CommandSpec, Intent
from brewctl.models.entry import Entry, EntryKind

# Kinds that can be uninstalled
DELETABLE_KINDS: frozenset[EntryKind] = frozenset(
    {EntryKind.PACKAGE, EntryKind.CASK, EntryKind.STORE_APP}
)


class OperationMapper:
    """Translate intents into program-and-argument pairs.

    Attributes:
        brew: Homebrew executable name.
        mas: Mac App Store CLI executable name.

    Example:
        >>> mapper = OperationMapper()
        >>> mapper.resolve(entry, Intent.DELETE).display()
        'brew uninstall --cask iterm2'
    """

    def __init__(self, brew: str = "brew", mas: str = "mas", describe_dump: bool = False) -> None:
        """Initialize the mapper.

        Args:
            brew: Homebrew executable name.
            mas: Mac App Store CLI executable name.
            describe_dump: If True, pass --describe to `brew bundle dump`.
        """
        self.brew = brew
        self.mas = mas
        self.describe_dump = describe_dump

    def supports(self, kind: EntryKind, intent: Intent) -> bool:
        """Check if a kind supports an intent, without resolving identifiers."""
        if kind == EntryKind.UNKNOWN:
            return False
        if intent == Intent.DELETE:
            return kind in DELETABLE_KINDS
        return True

    def resolve(self, entry: Entry, intent: Intent) -> CommandSpec:
        """Resolve an intent against an entry.

        Args:
            entry: Target entry.
            intent: Requested operation.

        Returns:
            The command to execute.

        Raises:
            UnsupportedOperationError: If the entry kind does not support the intent.
            MissingIdentifierError: If a store app has no numeric id.
        """
        if not self.supports(entry.kind, intent):
            raise UnsupportedOperationError(entry.kind, intent)

        if entry.kind == EntryKind.STORE_APP:
            return self._store_app_command(entry, intent)

        if entry.kind == EntryKind.TAP:
            if intent == Intent.DETAILS:
                return CommandSpec(self.brew, ("tap-info", "--json", entry.name))
            return CommandSpec(self.brew, ("tap-info", entry.name))

        cask_flag = ("--cask",) if entry.kind == EntryKind.CASK else ()
        if intent == Intent.DETAILS:
            return CommandSpec(self.brew, ("info", *cask_flag, "--json=v2", entry.name))
        if intent == Intent.INFO:
            return CommandSpec(self.brew, ("info", *cask_flag, entry.name))
        return CommandSpec(self.brew, ("uninstall", *cask_flag, entry.name))

    def dump(self, brewfile: Path) -> CommandSpec:
        """Command regenerating the Brewfile from installed software."""
        args = ["bundle", "dump", "--force"]
        if self.describe_dump:
            args.append("--describe")
        args.extend(["--file", str(brewfile)])
        return CommandSpec(self.brew, tuple(args))

    def cleanup(self) -> CommandSpec:
        """Command removing stale downloads and old versions."""
        return CommandSpec(self.brew, ("cleanup",))

    def bulk_update_steps(self) -> tuple[CommandSpec, CommandSpec]:
        """Commands refreshing metadata and then upgrading everything.

        The second command must only run after the first succeeded.
        """
        return (
            CommandSpec(self.brew, ("update",)),
            CommandSpec(self.brew, ("upgrade",)),
        )

    def _store_app_command(self, entry: Entry, intent: Intent) -> CommandSpec:
        store_id = entry.store_id
        if store_id is None:
            raise MissingIdentifierError(entry.name)
        verb = "uninstall" if intent == Intent.DELETE else "info"
        return CommandSpec(self.mas, (verb, str(store_id)))
