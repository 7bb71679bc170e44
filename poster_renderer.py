"""
Layered Poster Renderer

Draws classified map geometry onto a matplotlib figure in a fixed z-order:
water areas, waterways, parks, roads, edge fades and typography. The figure
is laid out in pixel coordinates with the origin at the top-left corner.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import matplotlib.colors as mcolors
import numpy as np
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.figure import Figure

import road_categories
from osm_elements import ClassifiedRegion, GeoPoint, Geometry
from projection import Projector, project_path
from themes import Theme

logger = logging.getLogger("maptoposter.renderer")

CANVAS_WIDTH = 900
CANVAS_HEIGHT = 1200
# At 72 dpi one point is one pixel, so line widths and font sizes are in pixels
SURFACE_DPI = 72

# Drawing order; each layer's zorder is its position in this tuple plus one.
LAYER_ORDER: tuple[str, ...] = (
    "water_polygons",
    "water_lines",
    "parks",
    "roads",
    "gradient",
    "typography",
)
LAYER_ZORDER: dict[str, int] = {name: i + 1 for i, name in enumerate(LAYER_ORDER)}

MIN_POLYGON_POINTS = 3
WATERWAY_WIDTH = 2.0
GRADIENT_FRACTION = 0.25
ATTRIBUTION = "© OpenStreetMap contributors"


@dataclass
class PosterSurface:
    """A figure plus its single full-bleed axes, sized in pixels."""
    figure: Figure
    ax: Axes
    width: int
    height: int


@dataclass(frozen=True)
class PosterLabels:
    place_name: str
    region_label: str
    point: GeoPoint


def create_surface(
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    dpi: int = SURFACE_DPI,
) -> PosterSurface:
    """Create an empty drawing surface of width x height pixels."""
    figure = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    FigureCanvasAgg(figure)
    ax = figure.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_axis_off()
    ax.set_autoscale_on(False)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    return PosterSurface(figure=figure, ax=ax, width=width, height=height)


def is_latin_script(text: str) -> bool:
    """
    Check if text is primarily Latin script.
    Used to determine if letter-spacing should be applied to place names.
    """
    if not text:
        return True

    latin_count = 0
    total_alpha = 0

    for char in text:
        if char.isalpha():
            total_alpha += 1
            if ord(char) < 0x250:
                latin_count += 1

    if total_alpha == 0:
        return True

    return (latin_count / total_alpha) > 0.8


def letter_space(name: str) -> str:
    """Upper-case a place name and spread its letters for the poster title."""
    if is_latin_script(name):
        return "  ".join(name.upper())
    return name


def _draw_polygons(
    ax: Axes,
    polygons: Sequence[Geometry],
    color: str,
    projector: Projector,
    layer: str,
) -> Optional[PolyCollection]:
    """Fill polygons; rings with fewer than three points are skipped."""
    rings = [
        project_path(projector, polygon.points)
        for polygon in polygons
        if len(polygon.points) >= MIN_POLYGON_POINTS
    ]
    if not rings:
        return None
    collection = PolyCollection(
        rings,
        closed=True,
        facecolors=color,
        edgecolors="none",
        linewidths=0,
        zorder=LAYER_ZORDER[layer],
    )
    collection.set_gid(layer)
    ax.add_collection(collection, autolim=False)
    return collection


def _draw_lines(
    ax: Axes,
    lines: Sequence[Geometry],
    colors: Sequence[str],
    widths: Sequence[float],
    projector: Projector,
    layer: str,
) -> Optional[LineCollection]:
    """Stroke polylines in the given order, one color and width per line."""
    if not lines:
        return None
    collection = LineCollection(
        [project_path(projector, line.points) for line in lines],
        colors=list(colors),
        linewidths=list(widths),
        capstyle="round",
        joinstyle="round",
        zorder=LAYER_ZORDER[layer],
    )
    collection.set_gid(layer)
    ax.add_collection(collection, autolim=False)
    return collection


def _render_water(ax: Axes, region: ClassifiedRegion, theme: Theme, projector: Projector) -> None:
    _draw_polygons(ax, region.water_polygons, theme.water, projector, "water_polygons")
    _draw_lines(
        ax,
        region.water_lines,
        [theme.water] * len(region.water_lines),
        [WATERWAY_WIDTH] * len(region.water_lines),
        projector,
        "water_lines",
    )


def _render_parks(ax: Axes, region: ClassifiedRegion, theme: Theme, projector: Projector) -> None:
    _draw_polygons(ax, region.parks, theme.parks, projector, "parks")


def _render_roads(ax: Axes, region: ClassifiedRegion, theme: Theme, projector: Projector) -> None:
    """Stroke roads in region order, which is ascending draw priority."""
    styles = [road_categories.road_style(road.subtype, theme.road_colors) for road in region.roads]
    _draw_lines(
        ax,
        region.roads,
        [style.color for style in styles],
        [style.width for style in styles],
        projector,
        "roads",
    )


def create_gradient_fade(
    ax: Axes,
    color: str,
    width: int,
    height: int,
    location: str = "bottom",
) -> None:
    """Creates a fade from `color` at the top or bottom edge to transparent."""
    rgb = mcolors.to_rgb(color)
    fade = np.zeros((256, 1, 4))
    fade[:, 0, 0] = rgb[0]
    fade[:, 0, 1] = rgb[1]
    fade[:, 0, 2] = rgb[2]
    # Row 0 sits on the poster edge
    fade[:, 0, 3] = np.linspace(1, 0, 256)

    band = height * GRADIENT_FRACTION
    if location == "bottom":
        extent = (0, width, height - band, height)
    else:
        extent = (0, width, band, 0)

    image = ax.imshow(
        fade,
        extent=extent,
        origin="upper",
        aspect="auto",
        interpolation="bilinear",
        zorder=LAYER_ZORDER["gradient"],
    )
    image.set_gid("gradient")


def _render_text(
    ax: Axes,
    labels: PosterLabels,
    theme: Theme,
    width: int,
    height: int,
    font_family: str,
) -> None:
    """Render place name, divider, region, coordinates and attribution."""
    zorder = LAYER_ZORDER["typography"]
    common = dict(
        color=theme.text,
        ha="center",
        va="center",
        family=font_family,
        zorder=zorder,
        gid="typography",
    )

    # Shrink long names so they stay on the poster
    title_size = 48.0
    if len(labels.place_name) > 10:
        title_size = max(title_size * 10 / len(labels.place_name), 16.0)

    ax.text(
        width / 2, height * 0.86, letter_space(labels.place_name),
        fontsize=title_size, fontweight="bold", **common,
    )

    ax.plot(
        [width * 0.4, width * 0.6], [height * 0.875, height * 0.875],
        color=theme.text, linewidth=1, zorder=zorder, gid="typography",
    )

    ax.text(
        width / 2, height * 0.90, labels.region_label.upper(),
        fontsize=20, fontweight="normal", **common,
    )

    ax.text(
        width / 2, height * 0.93, labels.point.coordinate_label(),
        fontsize=12, alpha=0.7, **common,
    )

    common["ha"] = "right"
    ax.text(
        width - 20, height - 20, ATTRIBUTION,
        fontsize=10, alpha=0.5, **common,
    )


def render(
    surface: PosterSurface,
    region: ClassifiedRegion,
    theme: Theme,
    projector: Projector,
    labels: PosterLabels,
    font_family: str = "sans-serif",
) -> None:
    """
    Draw a classified region onto a surface.

    Layers are drawn in LAYER_ORDER, each one complete before the next:
    water polygons, waterways, parks, roads, edge fades, typography.

    Args:
        surface: Surface from create_surface
        region: Classified geometry; roads must already be in draw order
        theme: Colors for every layer
        projector: Geographic to surface projection for this surface
        labels: Text shown at the bottom of the poster
        font_family: Font family for all text
    """
    ax = surface.ax
    surface.figure.set_facecolor(theme.bg)
    ax.set_facecolor(theme.bg)

    logger.info("Rendering map...")
    _render_water(ax, region, theme, projector)
    _render_parks(ax, region, theme, projector)

    logger.info("Applying road hierarchy colors...")
    _render_roads(ax, region, theme, projector)

    create_gradient_fade(ax, theme.gradient_color, surface.width, surface.height, location="top")
    create_gradient_fade(ax, theme.gradient_color, surface.width, surface.height, location="bottom")

    _render_text(ax, labels, theme, surface.width, surface.height, font_family)

    ax.set_xlim(0, surface.width)
    ax.set_ylim(surface.height, 0)
