"""CLI commands for brewctl.

This package contains all subcommand implementations.
"""

from brewctl.cli.commands import config, dump, listing, ui

__all__ = ["config", "dump", "listing", "ui"]
