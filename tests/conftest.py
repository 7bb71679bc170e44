"""Shared fixtures for the map poster tests."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from osm_elements import GeoPoint


def node(node_id, lat, lon):
    return {"type": "node", "id": node_id, "lat": lat, "lon": lon}


def way(way_id, nodes, **tags):
    return {"type": "way", "id": way_id, "nodes": nodes, "tags": tags}


def make_response(payload=None, status=200, body=None):
    """Fake requests.Response returning payload from json()."""
    response = MagicMock()
    response.status_code = status
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    if body is not None:
        response.json.side_effect = json.JSONDecodeError("Expecting value", body, 0)
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def berlin():
    return GeoPoint(52.52, 13.405)


@pytest.fixture
def square_payload():
    """A primary road, a closed lake, an open river and a closed park."""
    return {
        "elements": [
            node(1, 52.0, 13.0),
            node(2, 52.01, 13.01),
            node(3, 52.01, 13.0),
            node(4, 52.0, 13.01),
            way(10, [1, 2], highway="primary"),
            way(11, [1, 2, 3, 1], natural="water"),
            way(12, [3, 4], waterway="river"),
            way(13, [1, 3, 2, 4, 1], leisure="park"),
        ]
    }


@pytest.fixture
def theme_dir(tmp_path):
    """Directory with one valid theme and one missing its water color."""
    valid = {
        "name": "Test Theme",
        "description": "For tests",
        "bg": "#101010",
        "text": "#FAFAFA",
        "gradient_color": "#101010",
        "water": "#0000FF",
        "parks": "#00FF00",
        "road_motorway": "#FF0000",
        "road_primary": "#EE0000",
        "road_secondary": "#DD0000",
        "road_tertiary": "#CC0000",
        "road_residential": "#BB0000",
        "road_default": "#AA0000",
    }
    broken = {k: v for k, v in valid.items() if k != "water"}
    (tmp_path / "test_theme.json").write_text(json.dumps(valid), encoding="utf-8")
    (tmp_path / "no_water.json").write_text(json.dumps(broken), encoding="utf-8")
    (tmp_path / "garbled.json").write_text("{not json", encoding="utf-8")
    return tmp_path
