"""
Road Category Classification

Shared tables for OSM highway types: draw priority, theme color category
and stroke width. Used by the geometry classifier and the poster renderer.
"""

from typing import Mapping, NamedTuple


# Draw order, least important first. Later entries are drawn on top.
ROAD_DRAW_ORDER: tuple[str, ...] = (
    "service",
    "living_street",
    "unclassified",
    "residential",
    "tertiary_link",
    "tertiary",
    "secondary_link",
    "secondary",
    "primary_link",
    "primary",
    "trunk_link",
    "trunk",
    "motorway_link",
    "motorway",
)

_DRAW_PRIORITY: dict[str, int] = {name: rank for rank, name in enumerate(ROAD_DRAW_ORDER)}

# Unrecognized highway values sort before every known one.
UNKNOWN_PRIORITY = -1

# OSM highway type -> theme color category
_HIGHWAY_CATEGORIES: dict[str, str] = {
    "motorway": "motorway",
    "motorway_link": "motorway",
    "trunk": "primary",
    "trunk_link": "primary",
    "primary": "primary",
    "primary_link": "primary",
    "secondary": "secondary",
    "secondary_link": "secondary",
    "tertiary": "tertiary",
    "tertiary_link": "tertiary",
    "residential": "residential",
    "living_street": "residential",
    "unclassified": "residential",
    "service": "default",
}

ROAD_CATEGORIES: tuple[str, ...] = (
    "motorway", "primary", "secondary", "tertiary", "residential", "default",
)

# Stroke widths in surface pixels
ROAD_WIDTHS: dict[str, float] = {
    "motorway": 3.5,
    "motorway_link": 3.0,
    "trunk": 3.0,
    "trunk_link": 2.5,
    "primary": 2.5,
    "primary_link": 2.0,
    "secondary": 2.0,
    "secondary_link": 1.5,
    "tertiary": 1.5,
    "tertiary_link": 1.2,
    "residential": 1.0,
    "living_street": 0.8,
    "unclassified": 0.8,
    "service": 0.5,
}

DEFAULT_ROAD_WIDTH = 0.8


class RoadStyle(NamedTuple):
    color: str
    width: float


def draw_priority(highway_type: str) -> int:
    """Rank of a highway type in the draw order; UNKNOWN_PRIORITY if unrecognized."""
    return _DRAW_PRIORITY.get(highway_type, UNKNOWN_PRIORITY)


def classify(highway_type: str) -> str:
    """
    Classify an OSM highway type into a road color category.

    Returns:
        Category string: 'motorway', 'primary', 'secondary', 'tertiary',
        'residential', or 'default'
    """
    return _HIGHWAY_CATEGORIES.get(highway_type, "default")


def get_width(highway_type: str) -> float:
    """Get the poster stroke width for a highway type."""
    return ROAD_WIDTHS.get(highway_type, DEFAULT_ROAD_WIDTH)


def get_color(highway_type: str, road_colors: Mapping[str, str]) -> str:
    """Get the theme color for a highway type."""
    return road_colors.get(classify(highway_type), road_colors["default"])


def road_style(highway_type: str, road_colors: Mapping[str, str]) -> RoadStyle:
    """
    Resolve the stroke style for a highway type.

    Total over all strings: unknown types get the theme's default road color
    and DEFAULT_ROAD_WIDTH.

    Args:
        highway_type: OSM highway tag value
        road_colors: Theme road colors keyed by category (must contain 'default')
    """
    return RoadStyle(get_color(highway_type, road_colors), get_width(highway_type))
