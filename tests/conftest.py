"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from brewctl.core.service import BrewService
from brewctl.core.session import Session
from fakes import FakeGateway

SCENARIO_BREWFILE = """\
# Taps
tap "x/y"
package "wget"
cask "iterm2"
store-app "Xcode", id: 497799835
"""


@pytest.fixture
def scenario_brewfile_text() -> str:
    """Brewfile with one entry of every supported kind."""
    return SCENARIO_BREWFILE


@pytest.fixture
def sample_brewfile_text() -> str:
    """Brewfile as written by `brew bundle dump`."""
    return """tap "homebrew/bundle"
tap "homebrew/services"
brew "wget"
brew "postgresql@16", restart_service: :changed
brew "python@3.12", link: false
cask "iterm2"
cask "visual-studio-code", greedy: true
mas "Xcode", id: 497799835
"""


@pytest.fixture
def malformed_brewfile_text() -> str:
    """Brewfile mixing valid entries with lines that cannot be parsed."""
    return """brew "wget"
vscode "ms-python.python"
brew wget-without-quotes

mas "Broken"
cask "iterm2"
"""


@pytest.fixture
def brewfile_path(tmp_path: Path, scenario_brewfile_text: str) -> Path:
    """Scenario Brewfile written to a temporary directory."""
    path = tmp_path / "Brewfile"
    path.write_text(scenario_brewfile_text)
    return path


@pytest.fixture
def gateway() -> FakeGateway:
    """Fresh in-memory command gateway."""
    return FakeGateway()


@pytest.fixture
def service(gateway: FakeGateway, brewfile_path: Path) -> BrewService:
    """Service over the scenario Brewfile and the fake gateway."""
    return BrewService(gateway, brewfile_path)


@pytest.fixture
def session(service: BrewService) -> Session:
    """Session over the scenario Brewfile (not loaded yet)."""
    return Session(service)


@pytest.fixture
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state directories into tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    return tmp_path
