"""Colors for the CLI tables and the interactive console.

Defaults can be overridden per color in ~/.config/brewctl/theme.toml:

    [colors]
    kind_cask = "#00afff"
    selected = "#333333"

Invalid overrides are logged and the defaults are used instead; a broken
theme file never stops brewctl from starting.
"""

import logging
import string
import tomllib
from functools import cache
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, ValidationError
from rich.theme import Theme

from brewctl.core.paths import get_theme_path
from brewctl.models.entry import EntryKind

logger = logging.getLogger(__name__)


def _check_hex(value: str) -> str:
    """Accept `#RGB` and `#RRGGBB` colors."""
    color = value.strip()
    digits = color.removeprefix("#")
    if digits == color:
        msg = f"color {value!r} must start with '#'"
        raise ValueError(msg)
    if len(digits) not in (3, 6):
        msg = f"color {value!r} must be #RGB or #RRGGBB"
        raise ValueError(msg)
    if not all(c in string.hexdigits for c in digits):
        msg = f"color {value!r} is not a hex color"
        raise ValueError(msg)
    return color


HexColor = Annotated[str, AfterValidator(_check_hex)]


class ThemeColors(BaseModel):
    """Color settings, one hex color per role."""

    model_config = ConfigDict(extra="forbid", strict=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    kind_package: HexColor = "#69B9A1"
    kind_cask: HexColor = "#0e8ac8"
    kind_store_app: HexColor = "#d44ebc"
    kind_tap: HexColor = "#faf870"
    kind_unknown: HexColor = "#f53263"

    # Background of the selected row in the console
    selected: HexColor = "#29526d"

    def kind_color(self, kind: EntryKind) -> str:
        """Return the color used for an entry kind."""
        color: str = getattr(self, f"kind_{kind.name.lower()}")
        return color


def read_color_overrides(path: Path) -> dict[str, object]:
    """Read the `[colors]` table of a theme file.

    Returns:
        The raw table; empty when the file is missing or unusable.
    """
    if not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] must be a table", path)
        return {}
    return colors


def load_theme(path: Path | None = None) -> ThemeColors:
    """Load theme colors, applying user overrides on top of the defaults.

    Args:
        path: Theme file. If None, uses ~/.config/brewctl/theme.toml.
    """
    theme_path = path or get_theme_path()
    overrides = read_color_overrides(theme_path)
    if not overrides:
        return ThemeColors()

    try:
        colors = ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid colors in %s, using defaults: %s", theme_path, e)
        return ThemeColors()
    logger.debug("Applied %d color override(s) from %s", len(overrides), theme_path)
    return colors


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme used by the CLI consoles.

    Style names match the ThemeColors fields, plus `bold_header`,
    `selected` and one `kind.<name>` style per entry kind.
    """
    colors = colors or load_theme()
    styles = {
        name: getattr(colors, name)
        for name in ("text", "muted", "header", "border", "success", "warning", "info")
    }
    styles["error"] = f"bold {colors.error}"
    styles["bold_header"] = f"bold {colors.header}"
    styles["selected"] = f"bold {colors.text} on {colors.selected}"
    styles.update({f"kind.{kind.name.lower()}": colors.kind_color(kind) for kind in EntryKind})
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Return the Rich theme for the user's colors, loaded once per process."""
    return get_rich_theme()
