"""
Tests for road_categories module.

Run with: pytest tests/test_road_categories.py -v
"""

import pytest

import road_categories
from road_categories import (
    DEFAULT_ROAD_WIDTH,
    ROAD_DRAW_ORDER,
    UNKNOWN_PRIORITY,
    RoadStyle,
    draw_priority,
    road_style,
)

ROAD_COLORS = {
    "motorway": "#000001",
    "primary": "#000002",
    "secondary": "#000003",
    "tertiary": "#000004",
    "residential": "#000005",
    "default": "#000006",
}


class TestDrawPriority:
    """Tests for the highway draw order table."""

    def test_table_has_fourteen_entries(self):
        assert len(ROAD_DRAW_ORDER) == 14
        assert ROAD_DRAW_ORDER[0] == "service"
        assert ROAD_DRAW_ORDER[-1] == "motorway"

    def test_priorities_increase_along_table(self):
        ranks = [draw_priority(name) for name in ROAD_DRAW_ORDER]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == len(ranks)

    def test_unknown_type_ranks_below_everything(self):
        assert draw_priority("footway") == UNKNOWN_PRIORITY
        assert draw_priority("footway") < draw_priority("service")


class TestRoadStyle:
    """Tests for the subtype -> style function."""

    @pytest.mark.parametrize("highway,category", [
        ("motorway", "motorway"),
        ("motorway_link", "motorway"),
        ("trunk", "primary"),
        ("trunk_link", "primary"),
        ("primary_link", "primary"),
        ("secondary_link", "secondary"),
        ("tertiary", "tertiary"),
        ("living_street", "residential"),
        ("unclassified", "residential"),
        ("service", "default"),
    ])
    def test_color_collapses_related_types(self, highway, category):
        assert road_style(highway, ROAD_COLORS).color == ROAD_COLORS[category]

    def test_widths_follow_hierarchy(self):
        assert road_style("motorway", ROAD_COLORS).width == 3.5
        assert road_style("primary", ROAD_COLORS).width == 2.5
        assert road_style("service", ROAD_COLORS).width == 0.5

    def test_unknown_type_gets_defaults(self):
        style = road_style("cycleway", ROAD_COLORS)
        assert style == RoadStyle(ROAD_COLORS["default"], DEFAULT_ROAD_WIDTH)

    def test_classify_unknown_is_default(self):
        assert road_categories.classify("bridleway") == "default"
