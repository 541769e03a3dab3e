"""Command gateway: the single point where external processes are started.

The session and service never spawn processes themselves; they hand a
program name and arguments to a gateway. Tests substitute an in-memory
gateway to script exit codes and output.
"""

import logging
import shlex
from abc import ABC, abstractmethod
from collections.abc import Sequence

from brewctl.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class CommandGateway(ABC):
    """Abstract base class for command gateways.

    Example:
        >>> gateway = ShellCommandGateway()
        >>> result = await gateway.execute("brew", ["info", "wget"])
        >>> result.success
        True
    """

    @abstractmethod
    async def execute(self, program: str, args: Sequence[str]) -> CommandResult:
        """Run a program to completion and capture its output.

        Args:
            program: Executable name.
            args: Ordered arguments.

        Returns:
            CommandResult with exit code, stdout and stderr. A non-zero exit
            code is returned, not raised.

        Raises:
            OSError: If the process cannot be started.
        """

    def is_available(self, program: str) -> bool:
        """Check if a program can be executed through this gateway."""
        return True


class ShellCommandGateway(CommandGateway):
    """Gateway that runs commands as local subprocesses."""

    def __init__(self, cwd: str | None = None) -> None:
        """Initialize the gateway.

        Args:
            cwd: Working directory for spawned commands.
        """
        self._cwd = cwd

    async def execute(self, program: str, args: Sequence[str]) -> CommandResult:
        """Run a program as a subprocess."""
        argv = [program, *args]
        logger.info("Running: %s", shlex.join(argv))
        result = await run_command(argv, cwd=self._cwd)
        if not result.success:
            logger.warning(
                "Command exited with %d: %s", result.returncode, result.stderr or "(no stderr)"
            )
        return result

    def is_available(self, program: str) -> bool:
        """Check if the program is on PATH."""
        return command_exists(program)
