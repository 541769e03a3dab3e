"""Textual user interface for brewctl."""

from brewctl.tui.app import BrewctlApp

__all__ = ["BrewctlApp"]
