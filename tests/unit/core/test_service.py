"""Unit tests for BrewService."""

import asyncio
import json

import pytest
from brewctl.core.brewfile import parse_brewfile
from brewctl.core.errors import ExternalCommandFailedError, UnsupportedOperationError
from brewctl.core.service import BrewService
from brewctl.models.entry import Entry
from fakes import FakeGateway


@pytest.fixture
def entries(scenario_brewfile_text: str) -> dict[str, Entry]:
    """Scenario entries keyed by id."""
    return {e.id: e for e in parse_brewfile(scenario_brewfile_text).entries}


class TestFetchDetails:
    """Tests for BrewService.fetch_details."""

    def test_decodes_json(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """JSON output of `brew info --json=v2` is decoded."""
        payload = {"formulae": [{"name": "wget"}], "casks": []}
        gateway.script("brew info --json=v2 wget", stdout=json.dumps(payload))

        details = asyncio.run(service.fetch_details(entries["package:wget"]))

        assert details == payload

    def test_non_json_kept_raw(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Output that is not JSON is wrapped instead of failing."""
        gateway.script("brew info --json=v2 wget", stdout="Warning: something odd")

        details = asyncio.run(service.fetch_details(entries["package:wget"]))

        assert details == {"raw": "Warning: something odd"}

    def test_store_app_raw(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """`mas info` output is plain text."""
        gateway.script("mas info 497799835", stdout="Xcode 15.4 [USD 0.00]")

        details = asyncio.run(service.fetch_details(entries["mas:497799835"]))

        assert details == {"raw": "Xcode 15.4 [USD 0.00]"}

    def test_failure_carries_stderr(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """A non-zero exit raises with the command's stderr."""
        gateway.script(
            "brew info --cask --json=v2 iterm2", stderr="Error: No available cask", returncode=1
        )

        with pytest.raises(ExternalCommandFailedError, match="No available cask") as exc_info:
            asyncio.run(service.fetch_details(entries["cask:iterm2"]))

        assert exc_info.value.command.display() == "brew info --cask --json=v2 iterm2"
        assert exc_info.value.returncode == 1

    def test_failure_without_stderr(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Without stderr a fallback message names the entry."""
        gateway.script("brew tap-info --json x/y", returncode=2)

        with pytest.raises(ExternalCommandFailedError, match="Failed to fetch details for tap:x/y"):
            asyncio.run(service.fetch_details(entries["tap:x/y"]))


class TestFetchInfoText:
    """Tests for BrewService.fetch_info_text."""

    def test_returns_output(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Info text is the command's stdout."""
        gateway.script("brew info wget", stdout="==> wget: stable 1.24.5")

        text = asyncio.run(service.fetch_info_text(entries["package:wget"]))

        assert text == "==> wget: stable 1.24.5"

    def test_failure_fallback(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Failures without stderr use a fallback message."""
        gateway.script("brew info wget", returncode=1)

        with pytest.raises(ExternalCommandFailedError, match="Failed to fetch source info"):
            asyncio.run(service.fetch_info_text(entries["package:wget"]))


class TestDeleteEntry:
    """Tests for BrewService.delete_entry."""

    def test_runs_uninstall(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Casks are uninstalled with --cask."""
        gateway.script("brew uninstall --cask iterm2", stdout="Uninstalling iTerm.app")

        output = asyncio.run(service.delete_entry(entries["cask:iterm2"]))

        assert output == "Uninstalling iTerm.app"
        assert gateway.called("brew uninstall --cask iterm2") == 1

    def test_default_output(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Silent uninstalls report a short confirmation."""
        output = asyncio.run(service.delete_entry(entries["package:wget"]))

        assert output == "wget deleted"

    def test_unsupported_never_executes(
        self, service: BrewService, gateway: FakeGateway, entries: dict[str, Entry]
    ) -> None:
        """Unsupported deletes fail before reaching the gateway."""
        with pytest.raises(UnsupportedOperationError):
            asyncio.run(service.delete_entry(entries["tap:x/y"]))

        assert gateway.calls == []


class TestGlobalOperations:
    """Tests for dump, cleanup and bulk update."""

    def test_dump_targets_brewfile(self, service: BrewService, gateway: FakeGateway) -> None:
        """Dump writes to the service's Brewfile."""
        output = asyncio.run(service.dump_brewfile())

        assert output == "Brewfile dumped"
        assert gateway.calls == [
            ("brew", "bundle", "dump", "--force", "--file", str(service.brewfile))
        ]

    def test_cleanup_failure(self, service: BrewService, gateway: FakeGateway) -> None:
        """Cleanup failures raise with a fallback message."""
        gateway.script("brew cleanup", returncode=1)

        with pytest.raises(ExternalCommandFailedError, match="brew cleanup failed"):
            asyncio.run(service.cleanup())

    def test_update_and_upgrade(self, service: BrewService, gateway: FakeGateway) -> None:
        """Both steps run in order and their output is combined."""
        gateway.script("brew update", stdout="Already up-to-date.")
        gateway.script("brew upgrade", stdout="==> Upgrading 2 outdated packages")

        output = asyncio.run(service.update_and_upgrade_all())

        assert gateway.calls == [("brew", "update"), ("brew", "upgrade")]
        assert "[brew update]\nAlready up-to-date." in output
        assert "[brew upgrade]\n==> Upgrading 2 outdated packages" in output

    def test_update_failure_stops(self, service: BrewService, gateway: FakeGateway) -> None:
        """A failed update never runs the upgrade."""
        gateway.script("brew update", stderr="fatal: unable to access", returncode=1)

        with pytest.raises(ExternalCommandFailedError) as exc_info:
            asyncio.run(service.update_and_upgrade_all())

        assert str(exc_info.value) == "brew update failed: fatal: unable to access"
        assert gateway.called("brew upgrade") == 0
        assert exc_info.value.command.display() == "brew update"

    def test_upgrade_failure(self, service: BrewService, gateway: FakeGateway) -> None:
        """A failed upgrade carries the upgrade command."""
        gateway.script("brew upgrade", returncode=1)

        with pytest.raises(ExternalCommandFailedError, match="brew upgrade failed") as exc_info:
            asyncio.run(service.update_and_upgrade_all())

        assert gateway.called("brew update") == 1
        assert exc_info.value.command.display() == "brew upgrade"


class TestReadAndParse:
    """Tests for BrewService.read_and_parse."""

    def test_reads_brewfile(self, service: BrewService) -> None:
        """The configured Brewfile is parsed."""
        parsed = service.read_and_parse()

        assert len(parsed.entries) == 4

    def test_missing_programs(
        self, service: BrewService, gateway: FakeGateway, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Executables the gateway cannot run are reported once each."""
        monkeypatch.setattr(gateway, "is_available", lambda program: program != "mas")

        assert service.missing_programs() == ["mas"]
