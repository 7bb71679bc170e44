#!/usr/bin/env python3
"""
City Map Poster Generator

This module generates minimalist map posters for any place in the world.
It resolves the place with Nominatim, downloads roads, water and parks from
the Overpass API, and draws them with a theme onto a matplotlib surface
that can be exported as PNG.
"""

import argparse
import io
import logging
import os
import re
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

from tqdm import tqdm

from geocoding import PlaceResolver, ResolvedPlace
from geometry_classifier import classify
from osm_elements import ClassifiedRegion
from overpass_client import RegionDataFetcher
from poster_cache import CACHE_DIR
from poster_errors import PipelineSuperseded, PosterError, ThemeLoadFailed
from poster_renderer import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    SURFACE_DPI,
    PosterLabels,
    PosterSurface,
    create_surface,
    render,
)
from projection import make_projector
from themes import THEMES_DIR, Theme, get_available_themes, load_theme, load_theme_or_default

# --- Logging setup ---
logger = logging.getLogger("maptoposter")
_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
logger.addHandler(_handler)
logger.setLevel(logging.INFO)

BASE_DIR = Path(__file__).resolve().parent
POSTERS_DIR = Path(os.environ.get("POSTERS_DIR", BASE_DIR / "posters"))

DEFAULT_THEME_NAME = "feature_based"
DEFAULT_DISTANCE = 10000
MAX_DIMENSION = 4000

# Status messages, one per pipeline stage, in order
PIPELINE_STAGES: tuple[str, ...] = (
    "Loading theme...",
    "Finding location...",
    "Fetching map data...",
    "Classifying map features...",
    "Rendering map...",
)

StatusCallback = Callable[[str], None]


@dataclass(frozen=True)
class PosterRequest:
    place: str
    region: str
    theme_name: str = DEFAULT_THEME_NAME
    radius_m: float = DEFAULT_DISTANCE
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT


@dataclass(frozen=True)
class PreparedRegion:
    """Resolved place plus its classified map data, reusable across themes."""
    place: ResolvedPlace
    region: ClassifiedRegion


@dataclass
class PosterResult:
    surface: PosterSurface
    place: ResolvedPlace
    region: ClassifiedRegion
    theme: Theme
    theme_error: Optional[ThemeLoadFailed] = None

    @property
    def prepared(self) -> PreparedRegion:
        return PreparedRegion(place=self.place, region=self.region)


def validate_request(request: PosterRequest) -> None:
    """
    Raises:
        ValueError: If the radius or the canvas size is not positive
    """
    if request.radius_m <= 0:
        raise ValueError(f"Radius must be positive, got {request.radius_m}")
    if request.width <= 0 or request.height <= 0:
        raise ValueError(f"Canvas size must be positive, got {request.width}x{request.height}")


class PosterPipeline:
    """
    Runs theme loading, place resolution, data download, classification,
    projection and rendering in sequence.

    Starting a run supersedes any run still in progress on the same
    pipeline: the older run raises PipelineSuperseded at its next stage
    boundary and produces nothing.

    Args:
        resolver: Place resolver (Nominatim by default)
        fetcher: Region data fetcher (default Overpass mirrors)
        themes_dir: Directory containing theme JSON files
    """

    def __init__(
        self,
        resolver: Optional[PlaceResolver] = None,
        fetcher: Optional[RegionDataFetcher] = None,
        themes_dir: Union[str, Path] = THEMES_DIR,
    ) -> None:
        self.resolver = resolver or PlaceResolver()
        self.fetcher = fetcher or RegionDataFetcher()
        self.themes_dir = themes_dir
        self._generation = 0
        self._lock = threading.Lock()

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _checkpoint(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                raise PipelineSuperseded("Poster generation was superseded by a newer request")

    def run(
        self,
        request: PosterRequest,
        on_status: Optional[StatusCallback] = None,
        prepared: Optional[PreparedRegion] = None,
    ) -> PosterResult:
        """
        Generate a poster.

        Args:
            request: What to draw and how large
            on_status: Receives each entry of PIPELINE_STAGES as the stage starts
            prepared: Place and map data from an earlier run with the same
                place, region and radius; resolution, download and
                classification are skipped when given

        Returns:
            PosterResult with the rendered surface

        Raises:
            ValueError: If the request has a non-positive radius or size
            PosterError: From the first stage that fails; ThemeLoadFailed is
                not raised but recorded on the result
        """
        validate_request(request)
        generation = self._begin()

        def stage(index: int) -> None:
            self._checkpoint(generation)
            if on_status is not None:
                on_status(PIPELINE_STAGES[index])

        logger.info("Generating map for %s, %s...", request.place, request.region)

        stage(0)
        theme, theme_error = load_theme_or_default(request.theme_name, self.themes_dir)

        if prepared is None:
            stage(1)
            place = self.resolver.resolve(request.place, request.region)

            stage(2)
            graph = self.fetcher.fetch(place.point, request.radius_m)

            stage(3)
            region = classify(graph)
            logger.info("Found %s", region.summary())
        else:
            for index in (1, 2, 3):
                stage(index)
            place, region = prepared.place, prepared.region

        stage(4)
        projector = make_projector(place.point, request.radius_m, request.width, request.height)
        surface = create_surface(request.width, request.height)
        labels = PosterLabels(
            place_name=request.place,
            region_label=request.region,
            point=place.point,
        )
        render(surface, region, theme, projector, labels)

        self._checkpoint(generation)
        return PosterResult(
            surface=surface,
            place=place,
            region=region,
            theme=theme,
            theme_error=theme_error,
        )


def poster_filename(place: str, theme_name: str, now: Optional[datetime] = None) -> str:
    """
    File name for an exported poster: <place_slug>_<theme>_<timestamp>.png

    The slug is the lower-cased place with whitespace runs replaced by '_';
    the timestamp is the UTC ISO-8601 time with ':' and '.' replaced by '-',
    cut to 19 characters.
    """
    now = now or datetime.now(timezone.utc)
    timestamp = re.sub(r"[:.]", "-", now.isoformat())[:19]
    place_slug = re.sub(r"\s+", "_", place.strip().lower())
    return f"{place_slug}_{theme_name}_{timestamp}.png"


def generate_output_filename(
    place: str,
    theme_name: str,
    output_dir: Union[str, Path] = POSTERS_DIR,
) -> Path:
    """Generate a unique output path in output_dir, creating the directory."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / poster_filename(place, theme_name)


def save_poster(surface: PosterSurface, output_file: Union[str, Path], scale: float = 1.0) -> None:
    """Write the surface as PNG; scale multiplies the pixel size."""
    logger.info("Saving to %s...", output_file)
    surface.figure.savefig(
        output_file,
        format="png",
        dpi=SURFACE_DPI * scale,
        facecolor=surface.figure.get_facecolor(),
    )
    logger.info("Done! Poster saved as %s", output_file)


def poster_png_bytes(surface: PosterSurface, scale: float = 1.0) -> bytes:
    """Encode the surface as PNG in memory."""
    buffer = io.BytesIO()
    surface.figure.savefig(
        buffer,
        format="png",
        dpi=SURFACE_DPI * scale,
        facecolor=surface.figure.get_facecolor(),
    )
    return buffer.getvalue()


def print_examples() -> None:
    """Print usage examples."""
    print("""
City Map Poster Generator
=========================

Usage:
  python create_map_poster.py --city <city> --country <country> [options]

Examples:
  # Iconic grid patterns
  python create_map_poster.py -c "New York" -C "USA" -t noir -d 12000
  python create_map_poster.py -c "Barcelona" -C "Spain" -t terracotta -d 8000

  # Waterfront & canals
  python create_map_poster.py -c "Venice" -C "Italy" -t blueprint -d 4000
  python create_map_poster.py -c "Amsterdam" -C "Netherlands" -d 6000

  # Print resolution (3x the canvas size)
  python create_map_poster.py -c "Paris" -C "France" --scale 3

  # List themes
  python create_map_poster.py --list-themes

Distance guide:
  4000-6000m   Small/dense cities (Venice, Amsterdam old center)
  8000-12000m  Medium cities, focused downtown (Paris, Barcelona)
  15000-20000m Large metros, full city view (Tokyo, Mumbai)
""")


def list_themes() -> None:
    """List all available themes with descriptions."""
    available_themes = get_available_themes()
    if not available_themes:
        print("No themes found in 'themes/' directory.")
        return

    print("\nAvailable Themes:")
    print("-" * 60)
    for theme_name in available_themes:
        try:
            theme = load_theme(theme_name)
        except ThemeLoadFailed as e:
            print(f"  {theme_name}")
            print(f"    [invalid] {e.reason}")
            print()
            continue
        print(f"  {theme_name}")
        print(f"    {theme.name}")
        if theme.description:
            print(f"    {theme.description}")
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate map posters for any city",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python create_map_poster.py --city "New York" --country "USA"
  python create_map_poster.py --city Tokyo --country Japan --theme blueprint
  python create_map_poster.py --city Paris --country France --theme noir --distance 15000
  python create_map_poster.py --list-themes
        """,
    )

    parser.add_argument("--city", "-c", type=str, help="City name")
    parser.add_argument("--country", "-C", type=str, help="Country name")
    parser.add_argument(
        "--theme", "-t", type=str, default=DEFAULT_THEME_NAME,
        help=f"Theme name (default: {DEFAULT_THEME_NAME})",
    )
    parser.add_argument(
        "--all-themes", dest="all_themes", action="store_true",
        help="Generate posters for all themes",
    )
    parser.add_argument(
        "--distance", "-d", type=int, default=DEFAULT_DISTANCE,
        help=f"Map radius in meters (default: {DEFAULT_DISTANCE})",
    )
    parser.add_argument(
        "--width", "-W", type=int, default=CANVAS_WIDTH,
        help=f"Canvas width in pixels (default: {CANVAS_WIDTH}, max: {MAX_DIMENSION})",
    )
    parser.add_argument(
        "--height", "-H", type=int, default=CANVAS_HEIGHT,
        help=f"Canvas height in pixels (default: {CANVAS_HEIGHT}, max: {MAX_DIMENSION})",
    )
    parser.add_argument(
        "--scale", type=float, default=1.0,
        help="Export size multiplier (default: 1.0)",
    )
    parser.add_argument(
        "--output-dir", "-o", type=str, default=str(POSTERS_DIR),
        help="Directory for generated posters",
    )
    parser.add_argument("--no-cache", action="store_true", help="Do not cache geocoding results")
    parser.add_argument("--list-themes", action="store_true", help="List all available themes")
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv

    # If no arguments provided, show examples
    if not argv:
        print_examples()
        return 0

    args = parser.parse_args(argv)

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    if args.list_themes:
        list_themes()
        return 0

    if not args.city or not args.country:
        print("Error: --city and --country are required.\n")
        print_examples()
        return 1

    # Enforce maximum dimensions
    if args.width > MAX_DIMENSION:
        logger.warning("Width %s exceeds maximum %s. Clamping.", args.width, MAX_DIMENSION)
        args.width = MAX_DIMENSION
    if args.height > MAX_DIMENSION:
        logger.warning("Height %s exceeds maximum %s. Clamping.", args.height, MAX_DIMENSION)
        args.height = MAX_DIMENSION

    if args.all_themes:
        themes_to_generate = get_available_themes()
        if not themes_to_generate:
            print("No themes found in 'themes/' directory.")
            return 1
    else:
        themes_to_generate = [args.theme]

    print("=" * 50)
    print("City Map Poster Generator")
    print("=" * 50)

    pipeline = PosterPipeline(
        resolver=PlaceResolver(cache_dir=None if args.no_cache else CACHE_DIR),
    )

    try:
        # Place and map data are fetched once and reused for every theme
        prepared = None
        for theme_name in themes_to_generate:
            request = PosterRequest(
                place=args.city,
                region=args.country,
                theme_name=theme_name,
                radius_m=args.distance,
                width=args.width,
                height=args.height,
            )
            with tqdm(
                total=len(PIPELINE_STAGES),
                desc="Generating poster",
                unit="step",
                bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt}",
            ) as pbar:
                def on_status(message: str) -> None:
                    pbar.set_description(message)
                    pbar.update(1)

                result = pipeline.run(request, on_status=on_status, prepared=prepared)
            prepared = result.prepared

            output_file = generate_output_filename(args.city, theme_name, args.output_dir)
            save_poster(result.surface, output_file, args.scale)

        print("\n" + "=" * 50)
        print("[OK] Poster generation complete!")
        print("=" * 50)

    except (PosterError, ValueError) as e:
        logger.error("Error: %s", e)
        if args.verbose:
            logger.debug("Traceback:", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
