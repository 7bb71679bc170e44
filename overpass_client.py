"""
Overpass Region Fetcher

Downloads the raw roads/water/parks element graph around a point. Mirrors
are tried one after another, never in parallel, so a degraded main server
does not cause every mirror to be hit at once.
"""

import logging
import os
from typing import Any, Optional, Sequence

import requests

import road_categories
from osm_elements import GeoPoint, RegionGraph, parse_region_payload
from poster_errors import AllEndpointsUnavailable, MalformedRegionPayload

logger = logging.getLogger("maptoposter.overpass")

DEFAULT_OVERPASS_URLS: tuple[str, ...] = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
)

USER_AGENT = "MapToPosterWebApp/1.0"
REQUEST_TIMEOUT = 90

WATERWAY_TYPES: tuple[str, ...] = ("river", "riverbank", "stream", "canal")

_QUERY_TEMPLATE = """
[out:json][timeout:{timeout}];
(
    way["highway"~"^({highways})$"]({around});
    way["natural"="water"]({around});
    relation["natural"="water"]({around});
    way["waterway"~"^({waterways})$"]({around});
    way["leisure"="park"]({around});
    way["landuse"="grass"]({around});
    relation["leisure"="park"]({around});
);
out body;
>;
out skel qt;
"""


def default_endpoints() -> list[str]:
    """Built-in mirrors, preceded by $OVERPASS_URL when it is set."""
    endpoints = list(DEFAULT_OVERPASS_URLS)
    override = os.environ.get("OVERPASS_URL")
    if override:
        endpoints = [override] + [url for url in endpoints if url != override]
    return endpoints


def build_query(center: GeoPoint, radius_m: float, timeout: int = REQUEST_TIMEOUT) -> str:
    """Overpass QL for every road, water and park feature within radius_m of center."""
    radius = int(radius_m) if float(radius_m).is_integer() else radius_m
    around = f"around:{radius},{center.latitude},{center.longitude}"
    return _QUERY_TEMPLATE.format(
        timeout=timeout,
        highways="|".join(road_categories.ROAD_DRAW_ORDER),
        waterways="|".join(WATERWAY_TYPES),
        around=around,
    )


class RegionDataFetcher:
    """
    Fetches region data from an ordered list of Overpass endpoints.

    Args:
        endpoints: Endpoint URLs in the order they are tried
        session: requests session (or compatible object with a post method)
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        endpoints: Optional[Sequence[str]] = None,
        session: Any = None,
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        self.endpoints = tuple(endpoints) if endpoints is not None else tuple(default_endpoints())
        if not self.endpoints:
            raise ValueError("At least one Overpass endpoint is required")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, url: str, query: str) -> RegionGraph:
        response = self.session.post(
            url,
            data={"data": query},
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedRegionPayload(f"Response from {url} is not JSON: {e}") from e
        return parse_region_payload(payload)

    def fetch(self, center: GeoPoint, radius_m: float) -> RegionGraph:
        """
        Fetch the raw element graph within radius_m of center.

        Each endpoint gets exactly one attempt; the first parseable response
        is returned and later endpoints are not contacted.

        Raises:
            AllEndpointsUnavailable: If every endpoint failed; carries the last error
        """
        query = build_query(center, radius_m, self.timeout)
        logger.debug("Overpass query:%s", query)

        attempts: list[tuple[str, BaseException]] = []
        for index, url in enumerate(self.endpoints, start=1):
            logger.info("Fetching map data from %s (%d/%d)", url, index, len(self.endpoints))
            try:
                graph = self._request(url, query)
            except (requests.RequestException, MalformedRegionPayload) as e:
                logger.warning("Overpass server %s failed: %s", url, e)
                attempts.append((url, e))
                continue
            logger.info("Received %d nodes and %d ways", len(graph.nodes), len(graph.ways))
            return graph

        raise AllEndpointsUnavailable(attempts[-1][1], attempts)
