"""Unit tests for shell execution utilities."""

import asyncio
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from brewctl.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Only exit code 0 is a success."""
        assert CommandResult("", "", 0).success
        assert not CommandResult("", "", 1).success


class TestRunCommand:
    """Tests for run_command function."""

    def test_captures_output(self) -> None:
        """stdout, stderr and the exit code are captured and stripped."""
        script = "import sys; print(' out '); print('err', file=sys.stderr); sys.exit(3)"

        result = asyncio.run(run_command([sys.executable, "-c", script]))

        assert result == CommandResult("out", "err", 3)

    def test_stdin_closed(self) -> None:
        """Commands never wait on the terminal."""
        script = "import sys; print(repr(sys.stdin.read()))"

        result = asyncio.run(run_command([sys.executable, "-c", script]))

        assert result.stdout == "''"

    def test_cwd(self, tmp_path: Path) -> None:
        """The working directory is honored."""
        script = "import os; print(os.getcwd())"

        result = asyncio.run(run_command([sys.executable, "-c", script], cwd=str(tmp_path)))

        assert Path(result.stdout).resolve() == tmp_path.resolve()

    def test_missing_executable(self) -> None:
        """A missing executable raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            asyncio.run(run_command(["brewctl-definitely-missing-binary"]))


class TestCommandExists:
    """Tests for command_exists function."""

    @patch("brewctl.utils.shell.shutil.which")
    def test_found(self, mock_which: MagicMock) -> None:
        """A command on PATH exists."""
        mock_which.return_value = "/opt/homebrew/bin/brew"

        assert command_exists("brew") is True

    @patch("brewctl.utils.shell.shutil.which")
    def test_not_found(self, mock_which: MagicMock) -> None:
        """A command not on PATH does not exist."""
        mock_which.return_value = None

        assert command_exists("mas") is False
