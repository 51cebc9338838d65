"""Console color theme.

Colors come from the bundled data/theme.toml, with any keys found in the
user's <config dir>/theme.toml layered on top. A theme that fails
validation is replaced by the built-in defaults rather than aborting
the run.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from rich.theme import Theme

from appsweep.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Hex colors for every style the console output uses.

    Attributes:
        text: Plain text.
        muted: Secondary details (absent nodes, error messages).
        header: Table headers.
        border: Table borders.
        success: Successful stages and the closing success line.
        warning: Optional stage failures and best-effort notices.
        error: Mandatory stage failures.
        info: Informational messages.
        removed: Counts of removed nodes.
        kept: Counts of protected files the user kept.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    removed: str = "#c1ff62"
    kept: str = "#0e8ac8"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object, info: ValidationInfo) -> str:
        """Accept only #RGB or #RRGGBB strings."""
        field = info.field_name or "color"
        if not isinstance(value, str):
            msg = f"{field}: color must be a string"
            raise ValueError(msg)
        color = value.strip()
        if not color.startswith("#"):
            msg = f"{field}: color must start with '#'"
            raise ValueError(msg)
        if len(color) not in (4, 7):
            msg = f"{field}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        if not _HEX_COLOR.fullmatch(color):
            msg = f"{field}: invalid hex color '{color}'"
            raise ValueError(msg)
        return color


def get_bundled_theme_path() -> Path:
    """Return the path of the theme shipped with the package."""
    return resources.files("appsweep.data").joinpath("theme.toml")  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the [colors] table of a theme file.

    Returns:
        String-valued colors keyed by style name, or None if the file is
        missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return None
    return {name: value for name, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Load the bundled theme with the user's overrides applied.

    Returns:
        Validated colors, or the defaults if validation fails.
    """
    colors = _load_toml_colors(Path(get_bundled_theme_path())) or {}
    overrides = _load_toml_colors(get_theme_path())
    if overrides:
        logger.debug("Applying user theme overrides from %s", get_theme_path())
        colors.update(overrides)

    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme, falling back to defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme used by both consoles.

    Args:
        colors: Colors to use. Loaded from disk when omitted.

    Returns:
        Rich Theme defining every named style.
    """
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles["bold_header"] = f"bold {colors.header}"
    return Theme(styles)


_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the process-wide Rich theme, building it on first use."""
    global _theme
    if _theme is None:
        _theme = get_rich_theme()
    return _theme
