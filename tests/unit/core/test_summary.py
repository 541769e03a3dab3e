"""Unit tests for entry summaries shown in the detail and info panes."""

from brewctl.core.summary import (
    INFO_PLACEHOLDER,
    NO_INFO,
    extract_local_summary,
    format_entry_details,
    format_info_pane,
)
from brewctl.models.entry import Entry, EntryKind, EntryStatus


def _entry(kind: EntryKind, name: str, details: object = None) -> Entry:
    """Create a test Entry with optional cached details."""
    return Entry(
        id=f"{kind.id_prefix}:{name}",
        kind=kind,
        name=name,
        raw=f'{kind.label} "{name}"',
        line_number=3,
        details=details,
    )


class TestExtractLocalSummary:
    """Tests for extract_local_summary function."""

    def test_package_prefix(self) -> None:
        """Packages report the installed prefix and dependencies."""
        details = {
            "formulae": [
                {
                    "installed": [{"prefix": "/opt/homebrew/Cellar/wget/1.24.5"}],
                    "dependencies": ["libidn2", "openssl@3"],
                }
            ]
        }

        summary = extract_local_summary(_entry(EntryKind.PACKAGE, "wget", details))

        assert summary.location == "/opt/homebrew/Cellar/wget/1.24.5"
        assert summary.dependencies == ("libidn2", "openssl@3")

    def test_package_falls_back_to_rack(self) -> None:
        """Without an installed prefix the linked keg or rack is used."""
        details = {"formulae": [{"installed": [], "rack": "/opt/homebrew/Cellar/jq"}]}

        summary = extract_local_summary(_entry(EntryKind.PACKAGE, "jq", details))

        assert summary.location == "/opt/homebrew/Cellar/jq"
        assert summary.dependencies == ("None",)

    def test_cask(self) -> None:
        """Casks report the installed version and formula/cask dependencies."""
        details = {
            "casks": [
                {
                    "installed": ["3.5.0"],
                    "name": ["iTerm2"],
                    "depends_on": {"formula": ["git"], "cask": ["xquartz"]},
                }
            ]
        }

        summary = extract_local_summary(_entry(EntryKind.CASK, "iterm2", details))

        assert summary.location == "3.5.0"
        assert summary.dependencies == ("git", "xquartz")

    def test_store_app(self) -> None:
        """Store apps are managed by the App Store."""
        summary = extract_local_summary(_entry(EntryKind.STORE_APP, "Xcode", {"raw": ""}))

        assert summary.location == "Managed by App Store"

    def test_unexpected_shape(self) -> None:
        """Unexpected details degrade to Unknown."""
        summary = extract_local_summary(_entry(EntryKind.PACKAGE, "wget", {"formulae": "?"}))

        assert summary.location == "Unknown"

    def test_no_details(self) -> None:
        """Entries without details have an unknown location."""
        assert extract_local_summary(_entry(EntryKind.TAP, "x/y")).location == "Unknown"


class TestFormatEntryDetails:
    """Tests for format_entry_details function."""

    def test_header_fields(self) -> None:
        """Provenance fields are listed first."""
        text = format_entry_details(_entry(EntryKind.CASK, "iterm2"))

        assert text.startswith("Type: cask\nName: iterm2\nID: cask:iterm2\nLine: 3\n")
        assert "Status: idle" in text
        assert "Attributes:\n{}" in text

    def test_loading(self) -> None:
        """Entries without details show a loading hint while fetching."""
        entry = _entry(EntryKind.PACKAGE, "wget")
        entry.status = EntryStatus.LOADING

        assert "Loading details..." in format_entry_details(entry)

    def test_error_and_info_error(self) -> None:
        """Detail and info errors are both shown."""
        entry = _entry(EntryKind.PACKAGE, "wget")
        entry.status = EntryStatus.ERROR
        entry.error = "Error: No available formula"
        entry.info_error = "Error: network down"

        text = format_entry_details(entry)

        assert "Error: Error: No available formula" in text
        assert "Last source info error: Error: network down" in text


class TestFormatInfoPane:
    """Tests for format_info_pane function."""

    def test_nothing_selected(self) -> None:
        """No selection shows the no-info text."""
        assert format_info_pane(None) == NO_INFO

    def test_placeholder(self) -> None:
        """Entries without fetched info show the key hint."""
        assert format_info_pane(_entry(EntryKind.PACKAGE, "wget")) == INFO_PLACEHOLDER

    def test_text(self) -> None:
        """Fetched info is shown verbatim, with a marker for empty output."""
        entry = _entry(EntryKind.PACKAGE, "wget")
        entry.info_text = "wget: stable 1.24.5"
        assert format_info_pane(entry) == "wget: stable 1.24.5"

        entry.info_text = ""
        assert format_info_pane(entry) == "(no output)"

    def test_error(self) -> None:
        """Info errors take precedence."""
        entry = _entry(EntryKind.PACKAGE, "wget")
        entry.info_error = "boom"

        assert format_info_pane(entry) == "Error loading source info:\nboom"
