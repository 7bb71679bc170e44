"""
Coordinate Projection

Maps geographic coordinates onto the poster surface. The region is a box of
`radius` meters around the center computed with a flat-earth approximation;
the vertical axis uses the Mercator transform, the horizontal axis is linear
in longitude. Accurate for city-scale radii only.
"""

import math
from typing import Callable, Iterable, NamedTuple

import numpy as np

from osm_elements import GeoPoint

METERS_PER_DEGREE_LAT = 111320


class PlanarPoint(NamedTuple):
    x: float
    y: float


Projector = Callable[[GeoPoint], PlanarPoint]


def mercator_y(lat: float) -> float:
    """Mercator y for a latitude in degrees: ln(tan(pi/4 + lat/2))."""
    lat_rad = math.radians(lat)
    return math.log(math.tan(math.pi / 4 + lat_rad / 2))


def make_projector(
    center: GeoPoint,
    radius_m: float,
    width: float,
    height: float,
) -> Projector:
    """
    Build a projection from geographic coordinates to surface pixels.

    Args:
        center: Map center
        radius_m: Half-extent of the mapped region in meters
        width: Surface width in pixels
        height: Surface height in pixels

    Returns:
        Function mapping a GeoPoint to a PlanarPoint, with north at the top
        (y grows downward)

    Raises:
        ValueError: If the radius or the surface size is not positive
    """
    if radius_m <= 0:
        raise ValueError(f"Radius must be positive, got {radius_m}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Surface size must be positive, got {width}x{height}")

    meters_per_degree_lon = METERS_PER_DEGREE_LAT * math.cos(math.radians(center.latitude))
    lat_radius = radius_m / METERS_PER_DEGREE_LAT
    lon_radius = radius_m / meters_per_degree_lon

    min_lat = center.latitude - lat_radius
    max_lat = center.latitude + lat_radius
    min_lon = center.longitude - lon_radius
    max_lon = center.longitude + lon_radius

    min_y = mercator_y(min_lat)
    y_span = mercator_y(max_lat) - min_y
    lon_span = max_lon - min_lon

    def project(point: GeoPoint) -> PlanarPoint:
        x = (point.longitude - min_lon) / lon_span * width
        y = height - (mercator_y(point.latitude) - min_y) / y_span * height
        return PlanarPoint(x, y)

    return project


def project_path(projector: Projector, points: Iterable[GeoPoint]) -> np.ndarray:
    """Project a sequence of points into an (N, 2) array of surface coordinates."""
    return np.array([projector(p) for p in points], dtype=float).reshape(-1, 2)
