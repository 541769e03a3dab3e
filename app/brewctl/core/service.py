"""Brewfile service combining the operation mapper and the command gateway.

Each method resolves a command, executes it through the gateway and turns a
non-zero exit into an ExternalCommandFailedError carrying the failing
command. The service holds no session state.
"""

import json
import logging
from pathlib import Path
from typing import Any

from brewctl.core.brewfile import load_brewfile
from brewctl.core.errors import ExternalCommandFailedError
from brewctl.core.gateway import CommandGateway
from brewctl.core.operations import OperationMapper
from brewctl.models.command import CommandSpec, Intent
from brewctl.models.entry import Entry, EntryKind, ParsedBrewfile
from brewctl.utils.shell import CommandResult

logger = logging.getLogger(__name__)

# Kinds whose detail output is JSON
_JSON_DETAIL_KINDS = frozenset({EntryKind.PACKAGE, EntryKind.CASK, EntryKind.TAP})


class BrewService:
    """Domain operations on a Brewfile and the software it lists.

    Attributes:
        brewfile: Path to the Brewfile this service manages.
    """

    def __init__(
        self,
        gateway: CommandGateway,
        brewfile: Path,
        mapper: OperationMapper | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            gateway: Gateway used for every external command.
            brewfile: Path to the Brewfile.
            mapper: Operation mapper. If None, uses default program names.
        """
        self._gateway = gateway
        self._mapper = mapper or OperationMapper()
        self.brewfile = brewfile

    @property
    def mapper(self) -> OperationMapper:
        """Return the operation mapper."""
        return self._mapper

    def missing_programs(self) -> list[str]:
        """Return the configured executables the gateway cannot run."""
        programs = dict.fromkeys([self._mapper.brew, self._mapper.mas])
        return [p for p in programs if not self._gateway.is_available(p)]

    def read_and_parse(self) -> ParsedBrewfile:
        """Read and parse the Brewfile.

        Raises:
            ManifestUnavailableError: If the Brewfile is missing or unreadable.
        """
        return load_brewfile(self.brewfile)

    async def fetch_details(self, entry: Entry) -> Any:
        """Fetch structured details for an entry.

        JSON output is decoded; anything else is wrapped as {"raw": output}.

        Raises:
            UnsupportedOperationError: If the entry kind has no details command.
            MissingIdentifierError: If a store app has no numeric id.
            ExternalCommandFailedError: If the command fails.
        """
        command = self._mapper.resolve(entry, Intent.DETAILS)
        result = await self._run(command, f"Failed to fetch details for {entry.id}")
        return _parse_details(entry, result.stdout)

    async def fetch_info_text(self, entry: Entry) -> str:
        """Fetch human-readable info text for an entry.

        Raises:
            UnsupportedOperationError: If the entry kind has no info command.
            MissingIdentifierError: If a store app has no numeric id.
            ExternalCommandFailedError: If the command fails.
        """
        command = self._mapper.resolve(entry, Intent.INFO)
        result = await self._run(command, f"Failed to fetch source info for {entry.id}")
        return result.stdout

    async def delete_entry(self, entry: Entry) -> str:
        """Uninstall the software an entry refers to.

        Returns:
            Command output, or a short confirmation when there is none.

        Raises:
            UnsupportedOperationError: If the entry kind cannot be deleted.
            MissingIdentifierError: If a store app has no numeric id.
            ExternalCommandFailedError: If the command fails.
        """
        command = self._mapper.resolve(entry, Intent.DELETE)
        result = await self._run(command, f"Delete failed for {entry.id}")
        return result.stdout or f"{entry.name} deleted"

    async def dump_brewfile(self) -> str:
        """Regenerate the Brewfile with `brew bundle dump`.

        Raises:
            ExternalCommandFailedError: If the dump fails.
        """
        result = await self._run(self._mapper.dump(self.brewfile), "brew bundle dump failed")
        return result.stdout or "Brewfile dumped"

    async def cleanup(self) -> str:
        """Run `brew cleanup`.

        Raises:
            ExternalCommandFailedError: If the cleanup fails.
        """
        result = await self._run(self._mapper.cleanup(), "brew cleanup failed")
        return result.stdout or "brew cleanup complete"

    async def update_and_upgrade_all(self) -> str:
        """Run `brew update` and then `brew upgrade`.

        The upgrade only runs after the update succeeded. A failure in either
        step raises an error that names the step and carries its command.

        Returns:
            Combined output of both steps.

        Raises:
            ExternalCommandFailedError: If either step fails.
        """
        update, upgrade = self._mapper.bulk_update_steps()
        update_result = await self._run_step(update)
        upgrade_result = await self._run_step(upgrade)
        return "\n".join(
            [
                "[brew update]",
                update_result.stdout or "(no output)",
                "",
                "[brew upgrade]",
                upgrade_result.stdout or "(no output)",
            ]
        )

    async def _run(self, command: CommandSpec, fallback: str) -> CommandResult:
        """Execute a command and raise on non-zero exit."""
        result = await self._gateway.execute(command.program, list(command.args))
        if not result.success:
            raise ExternalCommandFailedError(command, result.stderr or fallback, result.returncode)
        return result

    async def _run_step(self, command: CommandSpec) -> CommandResult:
        """Execute one step of a multi-step operation, naming the step on failure."""
        result = await self._gateway.execute(command.program, list(command.args))
        if not result.success:
            message = f"{command.display()} failed"
            if result.stderr.strip():
                message = f"{message}: {result.stderr.strip()}"
            raise ExternalCommandFailedError(command, message, result.returncode)
        return result


def _parse_details(entry: Entry, output: str) -> Any:
    """Decode detail output for an entry."""
    if entry.kind in _JSON_DETAIL_KINDS:
        try:
            return json.loads(output)
        except json.JSONDecodeError:
            logger.debug("Details for %s are not JSON, keeping raw output", entry.id)
    return {"raw": output}
