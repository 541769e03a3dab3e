"""brewctl - interactive console for Homebrew Brewfiles."""

__version__ = "0.1.0"
