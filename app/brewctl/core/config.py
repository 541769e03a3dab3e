"""brewctl configuration and settings.

This module provides the configuration model and I/O functions for
brewctl. Configuration is stored in ~/.config/brewctl/config.toml; a missing
file means every setting takes its default.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from brewctl.core.paths import get_config_path, get_default_brewfile_path


class BrewctlConfig(BaseModel):
    """User configuration for brewctl.

    Attributes:
        brewfile: Default Brewfile path. If None, ./Brewfile is used.
        brew_command: Homebrew executable.
        mas_command: Mac App Store CLI executable.
        dump_describe: Pass --describe to `brew bundle dump`.
    """

    model_config = ConfigDict(extra="forbid")

    brewfile: Annotated[
        Path | None,
        Field(description="Default Brewfile path (None = ./Brewfile)"),
    ] = None
    brew_command: Annotated[
        str,
        Field(min_length=1, description="Homebrew executable"),
    ] = "brew"
    mas_command: Annotated[
        str,
        Field(min_length=1, description="Mac App Store CLI executable"),
    ] = "mas"
    dump_describe: Annotated[
        bool,
        Field(description="Add descriptions as comments when dumping the Brewfile"),
    ] = False

    @field_validator("brewfile", mode="after")
    @classmethod
    def expand_brewfile(cls, value: Path | None) -> Path | None:
        """Expand `~` in the configured Brewfile path."""
        if value is None:
            return None
        return value.expanduser()

    def resolve_brewfile(self, override: Path | None = None) -> Path:
        """Resolve the Brewfile to use.

        Priority: explicit override, configured path, ./Brewfile.

        Args:
            override: Path given on the command line.

        Returns:
            Absolute Brewfile path.
        """
        path = override or self.brewfile or get_default_brewfile_path()
        return path.expanduser().resolve()


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> BrewctlConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses default config path.

    Returns:
        Validated BrewctlConfig; defaults when the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return BrewctlConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return BrewctlConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: BrewctlConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The BrewctlConfig object to save.
        path: Path to save the config. If None, uses default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: BrewctlConfig) -> dict[str, object]:
    """Convert BrewctlConfig to a dictionary for TOML serialization.

    TOML has no null, so an unset Brewfile path is omitted.
    """
    result: dict[str, object] = {
        "brew_command": config.brew_command,
        "mas_command": config.mas_command,
        "dump_describe": config.dump_describe,
    }
    if config.brewfile is not None:
        result["brewfile"] = str(config.brewfile)
    return result
