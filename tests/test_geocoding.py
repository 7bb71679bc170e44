"""
Tests for geocoding module, with a mocked geopy geocoder.

Run with: pytest tests/test_geocoding.py -v
"""

from unittest.mock import MagicMock

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut

from geocoding import PlaceResolver
from osm_elements import GeoPoint
from poster_errors import PlaceNotFound, ResolutionRequestFailed


def make_geolocator(result=None, error=None):
    geolocator = MagicMock()
    if error is not None:
        geolocator.geocode.side_effect = error
    else:
        geolocator.geocode.return_value = result
    return geolocator


def location(lat, lon, address):
    return MagicMock(latitude=lat, longitude=lon, address=address)


class TestPlaceResolver:
    """Tests for place resolution."""

    def test_resolves_first_result(self):
        geolocator = make_geolocator(location(52.5170365, 13.3888599, "Berlin, Deutschland"))
        resolver = PlaceResolver(geolocator=geolocator, min_delay_seconds=0)
        place = resolver.resolve("Berlin", "Germany")
        assert place.point == GeoPoint(52.5170365, 13.3888599)
        assert place.label == "Berlin, Deutschland"
        geolocator.geocode.assert_called_once_with("Berlin, Germany", exactly_one=True)

    def test_empty_result_is_not_found(self):
        resolver = PlaceResolver(geolocator=make_geolocator(None), min_delay_seconds=0)
        with pytest.raises(PlaceNotFound, match="Atlantis, Nowhere"):
            resolver.resolve("Atlantis", "Nowhere")

    @pytest.mark.parametrize("error", [
        GeocoderServiceError("Non-successful status code 500"),
        GeocoderTimedOut("Service timed out"),
    ])
    def test_request_failure(self, error):
        geolocator = make_geolocator(error=error)
        resolver = PlaceResolver(geolocator=geolocator, min_delay_seconds=0)
        with pytest.raises(ResolutionRequestFailed) as exc_info:
            resolver.resolve("Paris", "France")
        assert exc_info.value.__cause__ is error
        assert geolocator.geocode.call_count == 1

    def test_missing_address_falls_back_to_query(self):
        geolocator = make_geolocator(location(48.8566, 2.3522, None))
        place = PlaceResolver(geolocator=geolocator, min_delay_seconds=0).resolve("Paris", "France")
        assert place.label == "Paris, France"


class TestResolverCache:
    """Tests for the optional coordinate cache."""

    def test_second_lookup_served_from_cache(self, tmp_path):
        geolocator = make_geolocator(location(35.6762, 139.6503, "Tokyo, Japan"))
        resolver = PlaceResolver(geolocator=geolocator, min_delay_seconds=0, cache_dir=tmp_path)
        first = resolver.resolve("Tokyo", "Japan")
        second = PlaceResolver(
            geolocator=make_geolocator(error=AssertionError("network used")),
            min_delay_seconds=0,
            cache_dir=tmp_path,
        ).resolve("tokyo ", "JAPAN")
        assert second == first
        assert geolocator.geocode.call_count == 1

    def test_not_found_is_not_cached(self, tmp_path):
        resolver = PlaceResolver(geolocator=make_geolocator(None), min_delay_seconds=0, cache_dir=tmp_path)
        with pytest.raises(PlaceNotFound):
            resolver.resolve("Atlantis", "Nowhere")
        assert list(tmp_path.iterdir()) == []

    def test_cache_disabled(self, tmp_path):
        geolocator = make_geolocator(location(1.0, 2.0, "X"))
        resolver = PlaceResolver(geolocator=geolocator, min_delay_seconds=0, cache_dir=None)
        resolver.resolve("X", "Y")
        resolver.resolve("X", "Y")
        assert geolocator.geocode.call_count == 2
