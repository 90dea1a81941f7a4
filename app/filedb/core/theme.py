"""Color theme for the filedb CLI.

The bundled ``data/theme.toml`` defines every color. A user file at
~/.config/filedb/theme.toml may override any subset of them under a
``[colors]`` table. Colors are validated as hex codes; an invalid
override falls back to the defaults.
"""

import logging
import re
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from rich.theme import Theme

from filedb.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")

# Style name -> (color field, extra Rich attributes)
_STYLES: dict[str, tuple[str, str]] = {
    "text": ("text", ""),
    "muted": ("muted", ""),
    "dim": ("muted", ""),
    "header": ("header", ""),
    "bold_header": ("header", "bold"),
    "border": ("border", ""),
    "success": ("success", ""),
    "warning": ("warning", ""),
    "error": ("error", "bold"),
    "info": ("info", ""),
    "added": ("added", ""),
    "removed": ("removed", ""),
    "discarded": ("discarded", "strike"),
    "file": ("file", ""),
    "directory": ("directory", "bold"),
}


class ThemeColors(BaseModel):
    """Hex colors (#RGB or #RRGGBB) the CLI styles are built from."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Scan report markers
    added: str = "#c1ff62"
    removed: str = "#f53263"
    discarded: str = "#d44ebc"

    file: str = "#ffffff"
    directory: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: ValidationInfo) -> str:
        """Accept only strings of the form #RGB or #RRGGBB."""
        if not isinstance(v, str) or not _HEX_COLOR.fullmatch(v.strip()):
            msg = f"{info.field_name}: expected a #RGB or #RRGGBB hex color, got {v!r}"
            raise ValueError(msg)
        return v.strip()


def get_bundled_theme_path() -> Path:
    """Path of the theme shipped inside the package."""
    return Path(str(resources.files("filedb.data").joinpath("theme.toml")))


def _read_colors(path: Path) -> dict[str, object] | None:
    """Return the ``[colors]`` table of a theme file, or None if unusable."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return colors


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Merge the user's overrides into the bundled colors.

    Args:
        user_path: Override file (default: ~/.config/filedb/theme.toml).
    """
    colors = _read_colors(get_bundled_theme_path()) or {}
    if user_path is None:
        user_path = get_theme_path()

    overrides = _read_colors(user_path)
    if overrides:
        logger.debug("Applying %d theme override(s) from %s", len(overrides), user_path)
        colors = {**colors, **overrides}

    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for ``colors`` (loaded from disk if omitted)."""
    if colors is None:
        colors = load_theme()

    styles: dict[str, str] = {}
    for style, (field, attributes) in _STYLES.items():
        color = getattr(colors, field)
        styles[style] = f"{attributes} {color}" if attributes else color
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Rich theme shared by all consoles, loaded on first use."""
    return get_rich_theme()
