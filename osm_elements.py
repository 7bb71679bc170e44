"""
OSM Element Model

Value types shared by the fetcher, classifier, projector and renderer:
geographic points, raw Overpass elements and classified geometry.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from poster_errors import MalformedRegionPayload


def validate_coordinates(lat: float, lon: float) -> None:
    """Validate that coordinates are within valid ranges."""
    if not -90 <= lat <= 90:
        raise ValueError(f"Latitude {lat} out of range. Must be between -90 and 90.")
    if not -180 <= lon <= 180:
        raise ValueError(f"Longitude {lon} out of range. Must be between -180 and 180.")


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_coordinates(self.latitude, self.longitude)

    def coordinate_label(self) -> str:
        """Coordinate label used on the poster, e.g. '52.5200° N / 13.4050° E'."""
        lat_dir = "N" if self.latitude >= 0 else "S"
        lon_dir = "E" if self.longitude >= 0 else "W"
        return (
            f"{abs(self.latitude):.4f}° {lat_dir} / "
            f"{abs(self.longitude):.4f}° {lon_dir}"
        )


@dataclass(frozen=True)
class OsmNode:
    id: int
    point: GeoPoint


@dataclass(frozen=True)
class OsmWay:
    """A way, or a relation that exposes an ordered node list."""
    id: int
    node_ids: tuple[int, ...]
    tags: Mapping[str, str] = field(default_factory=dict)
    kind: str = "way"

    @property
    def is_closed(self) -> bool:
        """A ring is closed when its first and last member ids match."""
        return len(self.node_ids) > 1 and self.node_ids[0] == self.node_ids[-1]


@dataclass
class RegionGraph:
    """One Overpass payload: nodes plus tagged ways/relations, in payload order."""
    nodes: list[OsmNode] = field(default_factory=list)
    ways: list[OsmWay] = field(default_factory=list)


def _parse_node(element: Mapping[str, Any]) -> OsmNode:
    try:
        return OsmNode(
            id=int(element["id"]),
            point=GeoPoint(float(element["lat"]), float(element["lon"])),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedRegionPayload(f"Invalid node element {element.get('id')!r}: {e}") from e


def _parse_way(element: Mapping[str, Any]) -> OsmWay:
    node_ids = element.get("nodes") or []
    tags = element.get("tags") or {}
    if not isinstance(node_ids, list) or not isinstance(tags, dict):
        raise MalformedRegionPayload(f"Invalid {element.get('type')} element {element.get('id')!r}")
    try:
        return OsmWay(
            id=int(element["id"]),
            node_ids=tuple(int(node_id) for node_id in node_ids),
            tags={str(k): str(v) for k, v in tags.items()},
            kind=element["type"],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedRegionPayload(f"Invalid {element.get('type')} element {element.get('id')!r}: {e}") from e


def parse_region_payload(payload: Any) -> RegionGraph:
    """
    Parse a decoded Overpass JSON response into a RegionGraph.

    Elements of other types are ignored. Relations keep only the node ids
    they list directly, so multipolygon relations end up with none.

    Raises:
        MalformedRegionPayload: If there is no 'elements' list or an element is invalid
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("elements"), list):
        raise MalformedRegionPayload("Response has no 'elements' array")

    graph = RegionGraph()
    for element in payload["elements"]:
        if not isinstance(element, dict):
            raise MalformedRegionPayload(f"Unexpected element: {element!r}")
        kind = element.get("type")
        if kind == "node":
            graph.nodes.append(_parse_node(element))
        elif kind in ("way", "relation"):
            graph.ways.append(_parse_way(element))
    return graph


class FeatureCategory(Enum):
    ROAD = "road"
    WATER_LINE = "water_line"
    WATER_POLYGON = "water_polygon"
    PARK = "park"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class Geometry:
    category: FeatureCategory
    subtype: str
    points: tuple[GeoPoint, ...]


@dataclass
class ClassifiedRegion:
    """Typed geometry ready for rendering. Roads are in draw order."""
    roads: list[Geometry] = field(default_factory=list)
    water_lines: list[Geometry] = field(default_factory=list)
    water_polygons: list[Geometry] = field(default_factory=list)
    parks: list[Geometry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.roads or self.water_lines or self.water_polygons or self.parks)

    def summary(self) -> str:
        return (
            f"{len(self.roads)} roads, {len(self.water_polygons)} water areas, "
            f"{len(self.water_lines)} waterways, {len(self.parks)} parks"
        )
