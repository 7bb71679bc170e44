"""
Poster Generation Errors

Exceptions raised by the map poster pipeline. Every stage failure derives
from PosterError so callers can report it with a single handler.
"""

from typing import Optional


class PosterError(Exception):
    """Base class for map poster failures."""
    pass


class PlaceNotFound(PosterError):
    """Raised when the place search returns no result."""

    def __init__(self, query: str) -> None:
        super().__init__(f"Could not find location: {query}")
        self.query = query


class ResolutionRequestFailed(PosterError):
    """Raised when the place search endpoint fails or returns an error status."""
    pass


class MalformedRegionPayload(PosterError):
    """Raised when an Overpass response cannot be parsed into map elements."""
    pass


class AllEndpointsUnavailable(PosterError):
    """
    Raised when every Overpass endpoint failed.

    Attributes:
        last_error: Error recorded for the last endpoint tried
        attempts: (endpoint, error) pairs in the order they were tried
    """

    def __init__(
        self,
        last_error: Optional[BaseException],
        attempts: Optional[list[tuple[str, BaseException]]] = None,
    ) -> None:
        detail = str(last_error) if last_error is not None else "All servers unavailable"
        super().__init__(
            f"Failed to fetch map data. Please try again in a moment. ({detail})"
        )
        self.last_error = last_error
        self.attempts = attempts or []


class ThemeLoadFailed(PosterError):
    """Raised when a theme file is missing or invalid. Callers fall back to the default theme."""

    def __init__(self, theme_name: str, reason: str) -> None:
        super().__init__(f"Theme '{theme_name}' could not be loaded: {reason}")
        self.theme_name = theme_name
        self.reason = reason


class PipelineSuperseded(PosterError):
    """Raised inside a poster run once a newer run has been started."""
    pass


class CacheError(PosterError):
    """Raised when a cache operation fails."""
    pass
