"""
Tests for projection module.

Run with: pytest tests/test_projection.py -v
"""

import math

import pytest

from osm_elements import GeoPoint
from projection import PlanarPoint, make_projector, mercator_y, project_path


class TestMercatorY:

    def test_equator(self):
        assert mercator_y(0.0) == pytest.approx(0.0)

    def test_symmetric(self):
        assert mercator_y(-45.0) == pytest.approx(-mercator_y(45.0))

    def test_known_value(self):
        assert mercator_y(45.0) == pytest.approx(math.log(math.tan(math.pi * 3 / 8)))


class TestMakeProjector:
    """Tests for the geographic -> surface projection."""

    @pytest.mark.parametrize("lat,lon", [
        (52.52, 13.405),
        (0.0, 0.0),
        (-33.8688, 151.2093),
        (64.1466, -21.9426),
    ])
    def test_center_maps_to_surface_center(self, lat, lon):
        center = GeoPoint(lat, lon)
        project = make_projector(center, 5000, 900, 1200)
        x, y = project(center)
        assert x == pytest.approx(450, abs=1e-6)
        assert y == pytest.approx(600, abs=1.0)

    def test_returns_planar_point(self):
        center = GeoPoint(10.0, 10.0)
        assert isinstance(make_projector(center, 1000, 100, 100)(center), PlanarPoint)

    def test_north_is_up(self):
        center = GeoPoint(48.85, 2.35)
        project = make_projector(center, 2000, 900, 1200)
        north = project(GeoPoint(48.86, 2.35))
        south = project(GeoPoint(48.84, 2.35))
        assert north.y < south.y

    def test_east_is_right(self):
        center = GeoPoint(48.85, 2.35)
        project = make_projector(center, 2000, 900, 1200)
        assert project(GeoPoint(48.85, 2.36)).x > project(GeoPoint(48.85, 2.34)).x

    def test_bounding_box_corners(self):
        center = GeoPoint(0.0, 0.0)
        radius = 11132.0
        project = make_projector(center, radius, 1000, 1000)
        span = radius / 111320
        top_left = project(GeoPoint(span, -span))
        bottom_right = project(GeoPoint(-span, span))
        assert top_left.x == pytest.approx(0.0, abs=1e-6)
        assert top_left.y == pytest.approx(0.0, abs=1e-6)
        assert bottom_right.x == pytest.approx(1000.0, abs=1e-6)
        assert bottom_right.y == pytest.approx(1000.0, abs=1e-6)

    def test_longitude_span_widens_with_latitude(self):
        radius = 5000
        edge_offset = radius / (111320 * math.cos(math.radians(60.0)))
        project = make_projector(GeoPoint(60.0, 10.0), radius, 800, 800)
        assert project(GeoPoint(60.0, 10.0 + edge_offset)).x == pytest.approx(800.0)

    @pytest.mark.parametrize("radius,width,height", [
        (0, 900, 1200),
        (-10, 900, 1200),
        (1000, 0, 1200),
        (1000, 900, -1),
    ])
    def test_invalid_arguments(self, radius, width, height):
        with pytest.raises(ValueError):
            make_projector(GeoPoint(0.0, 0.0), radius, width, height)


class TestProjectPath:

    def test_shape(self):
        center = GeoPoint(52.0, 13.0)
        project = make_projector(center, 1000, 100, 100)
        path = project_path(project, [center, center, center])
        assert path.shape == (3, 2)

    def test_empty(self):
        project = make_projector(GeoPoint(52.0, 13.0), 1000, 100, 100)
        assert project_path(project, []).shape == (0, 2)
