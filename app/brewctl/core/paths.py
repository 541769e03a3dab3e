"""Where brewctl keeps its files.

Configuration (config.toml, theme.toml) lives under $XDG_CONFIG_HOME/brewctl
and the UI log under $XDG_STATE_HOME/brewctl, falling back to ~/.config and
~/.local/state when the variables are unset or empty. The Brewfile itself is
looked up in the working directory unless configured otherwise.
"""

import os
from pathlib import Path

APP_NAME = "brewctl"

DEFAULT_BREWFILE_NAME = "Brewfile"

_XDG_FALLBACKS = {
    "XDG_CONFIG_HOME": (".config",),
    "XDG_STATE_HOME": (".local", "state"),
}


def _app_dir(variable: str) -> Path:
    """Return the brewctl directory below an XDG base directory."""
    base = os.environ.get(variable)
    root = Path(base) if base else Path.home().joinpath(*_XDG_FALLBACKS[variable])
    return root / APP_NAME


def get_config_dir() -> Path:
    """Directory holding config.toml and theme.toml."""
    return _app_dir("XDG_CONFIG_HOME")


def get_state_dir() -> Path:
    """Directory holding the UI log."""
    return _app_dir("XDG_STATE_HOME")


def get_config_path() -> Path:
    """Path of the settings file read by `load_config`."""
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Path of the optional color overrides."""
    return get_config_dir() / "theme.toml"


def get_log_path() -> Path:
    """Path of the log written while the interactive console runs."""
    return get_state_dir() / f"{APP_NAME}.log"


def get_default_brewfile_path() -> Path:
    """Brewfile used when neither the command line nor the config names one."""
    return Path.cwd() / DEFAULT_BREWFILE_NAME


def ensure_state_dir() -> Path:
    """Create the state directory if needed.

    Returns:
        Path to the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_state_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create state directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create state directory {path}: {e.strerror or e}"
        raise RuntimeError(msg) from e
    return path
