"""Unit tests for the command gateway."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from brewctl.core.gateway import ShellCommandGateway
from brewctl.utils.shell import CommandResult


class TestShellCommandGateway:
    """Tests for ShellCommandGateway."""

    @patch("brewctl.core.gateway.run_command", new_callable=AsyncMock)
    def test_executes_program_and_args(self, mock_run: AsyncMock) -> None:
        """The program and arguments are passed as one argv."""
        mock_run.return_value = CommandResult("ok", "", 0)

        result = asyncio.run(ShellCommandGateway().execute("brew", ["info", "wget"]))

        assert result == CommandResult("ok", "", 0)
        mock_run.assert_awaited_once_with(["brew", "info", "wget"], cwd=None)

    @patch("brewctl.core.gateway.run_command", new_callable=AsyncMock)
    def test_passes_cwd(self, mock_run: AsyncMock) -> None:
        """The configured working directory is used."""
        mock_run.return_value = CommandResult("", "", 0)

        asyncio.run(ShellCommandGateway(cwd="/tmp").execute("brew", ["cleanup"]))

        assert mock_run.call_args.kwargs["cwd"] == "/tmp"

    @patch("brewctl.core.gateway.run_command", new_callable=AsyncMock)
    def test_returns_failures(self, mock_run: AsyncMock) -> None:
        """A non-zero exit is returned, not raised."""
        mock_run.return_value = CommandResult("", "Error: No such keg", 1)

        result = asyncio.run(ShellCommandGateway().execute("brew", ["uninstall", "wget"]))

        assert not result.success
        assert result.stderr == "Error: No such keg"

    @patch("brewctl.core.gateway.command_exists")
    def test_is_available(self, mock_exists: MagicMock) -> None:
        """Availability is a PATH lookup."""
        mock_exists.return_value = False

        assert ShellCommandGateway().is_available("mas") is False
        mock_exists.assert_called_once_with("mas")
