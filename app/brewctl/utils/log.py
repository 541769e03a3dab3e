"""Logging configuration.

Command-line subcommands log through Rich on stderr. The interactive UI
owns the terminal, so it logs to a file in the state directory instead.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from brewctl.core.paths import ensure_state_dir, get_log_path

LOGGER_NAME = "brewctl"


def configure_console_logging(verbose: bool = False) -> None:
    """Send brewctl logs to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    _install(handler, logging.DEBUG if verbose else logging.WARNING)


def configure_file_logging(debug: bool = False, path: Path | None = None) -> Path:
    """Send brewctl logs to a file.

    Args:
        debug: Log at DEBUG instead of WARNING.
        path: Log file. If None, uses the state directory log file.

    Returns:
        Path of the log file.
    """
    if path is None:
        ensure_state_dir()
        path = get_log_path()
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    _install(handler, logging.DEBUG if debug else logging.WARNING)
    return path


def _install(handler: logging.Handler, level: int) -> None:
    """Replace the handlers of the brewctl logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
