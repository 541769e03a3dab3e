"""In-memory test doubles shared by the unit tests."""

import asyncio
from collections.abc import Callable, Sequence

from brewctl.core.gateway import CommandGateway
from brewctl.utils.shell import CommandResult

Responder = Callable[[str, list[str]], CommandResult | None]


class FakeGateway(CommandGateway):
    """Gateway recording every call and returning scripted results.

    Results are looked up by the full argv (program plus arguments). A
    responder callable, if set, is consulted first. Commands can be held
    until the test releases them to control completion order.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.results: dict[tuple[str, ...], CommandResult] = {}
        self.errors: dict[tuple[str, ...], Exception] = {}
        self.responder: Responder | None = None
        self._holds: dict[tuple[str, ...], asyncio.Event] = {}

    def script(self, argv: str, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        """Script the result for a space-separated command line."""
        self.results[tuple(argv.split())] = CommandResult(stdout, stderr, returncode)

    def fail_with(self, argv: str, error: Exception) -> None:
        """Make a command raise instead of returning a result."""
        self.errors[tuple(argv.split())] = error

    def hold(self, argv: str) -> asyncio.Event:
        """Block a command until the returned event is set."""
        event = asyncio.Event()
        self._holds[tuple(argv.split())] = event
        return event

    def called(self, argv: str) -> int:
        """Count how often a command was executed."""
        return self.calls.count(tuple(argv.split()))

    async def execute(self, program: str, args: Sequence[str]) -> CommandResult:
        key = (program, *args)
        self.calls.append(key)
        hold = self._holds.get(key)
        if hold is not None:
            await hold.wait()
        if key in self.errors:
            raise self.errors[key]
        if self.responder is not None:
            result = self.responder(program, list(args))
            if result is not None:
                return result
        return self.results.get(key, CommandResult("", "", 0))
