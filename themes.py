"""
Poster Themes

Themes are JSON files in the themes directory. A theme that cannot be
loaded is replaced as a whole by DEFAULT_THEME; values are never merged.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import matplotlib.colors as mcolors

import road_categories
from poster_errors import ThemeLoadFailed

logger = logging.getLogger("maptoposter.themes")

BASE_DIR = Path(__file__).resolve().parent
THEMES_DIR = Path(os.environ.get("THEMES_DIR", BASE_DIR / "themes"))

REQUIRED_THEME_KEYS: tuple[str, ...] = (
    "bg",
    "text",
    "gradient_color",
    "water",
    "parks",
    "road_motorway",
    "road_primary",
    "road_secondary",
    "road_tertiary",
    "road_residential",
    "road_default",
)

# --- Module-level caches ---
_themes_cache: dict[Path, list[str]] = {}


@dataclass(frozen=True)
class Theme:
    name: str
    bg: str
    text: str
    gradient_color: str
    water: str
    parks: str
    road_colors: Mapping[str, str]
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any, theme_name: str) -> "Theme":
        """
        Build a Theme from decoded theme JSON.

        Raises:
            ThemeLoadFailed: If a required key is missing or a value is not a color
        """
        if not isinstance(data, dict):
            raise ThemeLoadFailed(theme_name, "theme file must contain a JSON object")
        missing = [k for k in REQUIRED_THEME_KEYS if k not in data]
        if missing:
            raise ThemeLoadFailed(theme_name, f"missing keys: {', '.join(missing)}")
        invalid = [k for k in REQUIRED_THEME_KEYS if not mcolors.is_color_like(data[k])]
        if invalid:
            raise ThemeLoadFailed(theme_name, f"invalid colors for: {', '.join(invalid)}")

        return cls(
            name=str(data.get("name", theme_name)),
            bg=data["bg"],
            text=data["text"],
            gradient_color=data["gradient_color"],
            water=data["water"],
            parks=data["parks"],
            road_colors={
                category: data[f"road_{category}"]
                for category in road_categories.ROAD_CATEGORIES
            },
            description=str(data.get("description", "")),
        )


DEFAULT_THEME = Theme.from_dict(
    {
        "name": "Default",
        "bg": "#FFFFFF",
        "text": "#000000",
        "gradient_color": "#FFFFFF",
        "water": "#C0C0C0",
        "parks": "#F0F0F0",
        "road_motorway": "#0A0A0A",
        "road_primary": "#1A1A1A",
        "road_secondary": "#2A2A2A",
        "road_tertiary": "#3A3A3A",
        "road_residential": "#4A4A4A",
        "road_default": "#3A3A3A",
    },
    "default",
)


def get_available_themes(themes_dir: Union[str, Path] = THEMES_DIR) -> list[str]:
    """
    Scans the themes directory and returns a list of available theme names.
    Results are cached per directory after the first call.
    """
    themes_dir = Path(themes_dir)
    if themes_dir in _themes_cache:
        return _themes_cache[themes_dir]

    logger.debug("Looking for themes in: %s", themes_dir)
    if not themes_dir.is_dir():
        logger.warning("Themes directory not found: %s", themes_dir)
        return []

    themes = sorted(path.stem for path in themes_dir.glob("*.json"))
    logger.debug("Total themes found: %d", len(themes))
    _themes_cache[themes_dir] = themes
    return themes


def load_theme(theme_name: str, themes_dir: Union[str, Path] = THEMES_DIR) -> Theme:
    """
    Load a theme from <themes_dir>/<theme_name>.json.

    Raises:
        ThemeLoadFailed: If the file is missing, unreadable or invalid
    """
    theme_file = Path(themes_dir) / f"{theme_name}.json"
    try:
        with open(theme_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ThemeLoadFailed(theme_name, f"file '{theme_file}' not found") from e
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ThemeLoadFailed(theme_name, str(e)) from e

    theme = Theme.from_dict(data, theme_name)
    logger.info("Loaded theme: %s", theme.name)
    if theme.description:
        logger.info("  %s", theme.description)
    return theme


def load_theme_or_default(
    theme_name: str,
    themes_dir: Union[str, Path] = THEMES_DIR,
) -> tuple[Theme, Optional[ThemeLoadFailed]]:
    """
    Load a theme, falling back to DEFAULT_THEME.

    Returns:
        (theme, error) where error is the ThemeLoadFailed that triggered the
        fallback, or None
    """
    try:
        return load_theme(theme_name, themes_dir), None
    except ThemeLoadFailed as e:
        logger.warning("%s. Using default theme.", e)
        return DEFAULT_THEME, e
