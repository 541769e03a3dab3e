"""Shared types and helpers for CLI commands.

This module provides the common options and the service wiring used by
several command modules to avoid code duplication.
"""

from pathlib import Path
from typing import Annotated

import typer

from brewctl.core.config import BrewctlConfig, ConfigError, load_config
from brewctl.core.gateway import CommandGateway, ShellCommandGateway
from brewctl.core.operations import OperationMapper
from brewctl.core.service import BrewService
from brewctl.utils.formatting import print_error

BrewfileOption = Annotated[
    Path | None,
    typer.Option(
        "--brewfile",
        "-f",
        help="Path to the Brewfile (default: configured path or ./Brewfile).",
        dir_okay=False,
    ),
]


def require_config() -> BrewctlConfig:
    """Load configuration or exit with a helpful error message.

    Raises:
        typer.Exit: If the configuration file is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def build_service(
    config: BrewctlConfig,
    brewfile: Path | None = None,
    gateway: CommandGateway | None = None,
) -> BrewService:
    """Create a BrewService from configuration.

    Args:
        config: Loaded configuration.
        brewfile: Brewfile given on the command line, if any.
        gateway: Command gateway. If None, runs real subprocesses.

    Returns:
        Configured BrewService.
    """
    mapper = OperationMapper(
        brew=config.brew_command,
        mas=config.mas_command,
        describe_dump=config.dump_describe,
    )
    return BrewService(
        gateway or ShellCommandGateway(),
        config.resolve_brewfile(brewfile),
        mapper,
    )
