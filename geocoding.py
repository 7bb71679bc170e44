"""
Place Resolution

Resolves a free-text place and region (e.g. "Berlin", "Germany") to
coordinates with a single Nominatim search through geopy.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from geopy.exc import GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from osm_elements import GeoPoint
from poster_cache import cache_get, cache_set
from poster_errors import CacheError, PlaceNotFound, ResolutionRequestFailed

logger = logging.getLogger("maptoposter.geocoding")

USER_AGENT = "MapToPosterWebApp/1.0"
GEOCODE_TIMEOUT = 10
# Nominatim usage policy: at most one request per second
MIN_DELAY_SECONDS = 1.0


@dataclass(frozen=True)
class ResolvedPlace:
    point: GeoPoint
    label: str


class PlaceResolver:
    """
    Looks up places with Nominatim, taking the first match only.

    Args:
        geolocator: geopy geocoder; a Nominatim instance is created when omitted
        min_delay_seconds: Minimum delay between consecutive searches
        cache_dir: Directory for cached results, or None to disable caching
    """

    def __init__(
        self,
        geolocator: Any = None,
        min_delay_seconds: float = MIN_DELAY_SECONDS,
        cache_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.geolocator = geolocator or Nominatim(user_agent=USER_AGENT, timeout=GEOCODE_TIMEOUT)
        self.cache_dir = cache_dir
        # max_retries=0: a failed search is reported, never repeated
        self._geocode = RateLimiter(
            self.geolocator.geocode,
            min_delay_seconds=min_delay_seconds,
            max_retries=0,
            swallow_exceptions=False,
        )

    @staticmethod
    def _cache_key(name: str, region: str) -> str:
        return f"coords_{name.strip().lower()}_{region.strip().lower()}"

    def _cached(self, name: str, region: str) -> Optional[ResolvedPlace]:
        if self.cache_dir is None:
            return None
        try:
            cached = cache_get(self._cache_key(name, region), self.cache_dir)
        except CacheError as e:
            logger.warning("Could not read cached coordinates: %s", e)
            return None
        if not cached:
            return None
        try:
            lat, lon, label = cached
            return ResolvedPlace(GeoPoint(float(lat), float(lon)), str(label))
        except (TypeError, ValueError):
            logger.debug("Ignoring unusable cache entry for %s, %s", name, region)
            return None

    def _remember(self, name: str, region: str, place: ResolvedPlace) -> None:
        if self.cache_dir is None:
            return
        value = [place.point.latitude, place.point.longitude, place.label]
        try:
            cache_set(self._cache_key(name, region), value, self.cache_dir)
        except CacheError as e:
            logger.warning("Could not cache coordinates: %s", e)

    def resolve(self, name: str, region: str) -> ResolvedPlace:
        """
        Resolve a place to coordinates and a canonical label.

        Args:
            name: Place name, e.g. a city
            region: Enclosing region, e.g. a country

        Returns:
            ResolvedPlace with the first search result

        Raises:
            PlaceNotFound: If the search has no result
            ResolutionRequestFailed: If the request fails or returns an error status
        """
        cached = self._cached(name, region)
        if cached is not None:
            logger.info("Using cached coordinates for %s, %s", name, region)
            return cached

        query = f"{name}, {region}"
        logger.info("Looking up coordinates...")
        try:
            location = self._geocode(query, exactly_one=True)
        except GeopyError as e:
            raise ResolutionRequestFailed(f"Geocoding request failed for {query}: {e}") from e

        if not location:
            raise PlaceNotFound(query)

        try:
            point = GeoPoint(float(location.latitude), float(location.longitude))
        except (TypeError, ValueError) as e:
            raise ResolutionRequestFailed(f"Geocoding returned invalid coordinates for {query}: {e}") from e

        label = getattr(location, "address", None) or query
        logger.info("Found: %s", label)
        logger.info("Coordinates: %s, %s", point.latitude, point.longitude)

        place = ResolvedPlace(point, label)
        self._remember(name, region, place)
        return place
