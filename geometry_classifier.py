"""
Geometry Classification

Turns a raw Overpass element graph into typed geometry collections:
roads, water lines, water polygons and parks.
"""

import logging
from typing import Callable, Mapping, Optional

import road_categories
from osm_elements import (
    ClassifiedRegion,
    FeatureCategory,
    GeoPoint,
    Geometry,
    OsmWay,
    RegionGraph,
)

logger = logging.getLogger("maptoposter.classifier")

MIN_LINE_POINTS = 2

# A rule inspects (tags, closed) and returns a category, or None to fall through.
ClassificationRule = Callable[[Mapping[str, str], bool], Optional[FeatureCategory]]


def _road_rule(tags: Mapping[str, str], closed: bool) -> Optional[FeatureCategory]:
    if "highway" in tags:
        return FeatureCategory.ROAD
    return None


def _water_rule(tags: Mapping[str, str], closed: bool) -> Optional[FeatureCategory]:
    if tags.get("natural") == "water" or "waterway" in tags:
        return FeatureCategory.WATER_POLYGON if closed else FeatureCategory.WATER_LINE
    return None


def _park_rule(tags: Mapping[str, str], closed: bool) -> Optional[FeatureCategory]:
    if tags.get("leisure") == "park" or tags.get("landuse") == "grass":
        # Parks are only drawn as filled areas
        return FeatureCategory.PARK if closed else FeatureCategory.DISCARDED
    return None


# Evaluated in order, first match wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    _road_rule,
    _water_rule,
    _park_rule,
)


def categorize(tags: Mapping[str, str], closed: bool) -> FeatureCategory:
    """Apply CLASSIFICATION_RULES to a tag set; DISCARDED when nothing matches."""
    for rule in CLASSIFICATION_RULES:
        category = rule(tags, closed)
        if category is not None:
            return category
    return FeatureCategory.DISCARDED


def _subtype(category: FeatureCategory, tags: Mapping[str, str]) -> str:
    if category is FeatureCategory.ROAD:
        return tags["highway"]
    if category in (FeatureCategory.WATER_LINE, FeatureCategory.WATER_POLYGON):
        return tags.get("waterway") or tags.get("natural", "water")
    return tags.get("leisure") or tags.get("landuse", "park")


def classify_way(way: OsmWay, lookup: Mapping[int, GeoPoint]) -> Optional[Geometry]:
    """
    Classify a single way against a node lookup.

    Returns:
        Geometry, or None if the way is untagged, has fewer than two
        resolvable points, or matches no rule
    """
    if not way.tags:
        return None

    points = tuple(lookup[node_id] for node_id in way.node_ids if node_id in lookup)
    if len(points) < MIN_LINE_POINTS:
        return None

    category = categorize(way.tags, way.is_closed)
    if category is FeatureCategory.DISCARDED:
        return None
    return Geometry(category=category, subtype=_subtype(category, way.tags), points=points)


def sort_roads(roads: list[Geometry]) -> list[Geometry]:
    """Order roads by ascending draw priority; unknown highway types come first."""
    return sorted(roads, key=lambda road: road_categories.draw_priority(road.subtype))


def classify(graph: RegionGraph) -> ClassifiedRegion:
    """
    Classify every tagged way of a region graph.

    Args:
        graph: Parsed Overpass payload

    Returns:
        ClassifiedRegion with roads in draw order and the other collections
        in payload order
    """
    lookup = {node.id: node.point for node in graph.nodes}
    region = ClassifiedRegion()
    buckets = {
        FeatureCategory.ROAD: region.roads,
        FeatureCategory.WATER_LINE: region.water_lines,
        FeatureCategory.WATER_POLYGON: region.water_polygons,
        FeatureCategory.PARK: region.parks,
    }

    dropped = 0
    for way in graph.ways:
        geometry = classify_way(way, lookup)
        if geometry is None:
            dropped += 1
            continue
        buckets[geometry.category].append(geometry)

    region.roads = sort_roads(region.roads)
    logger.debug("Classified %s (%d ways dropped)", region.summary(), dropped)
    return region
