"""Basemap tiles for the station map.

The station figure plots Web Mercator metres, which is the coordinate system
of the standard XYZ raster tile pyramid. Each visible tile becomes a plotly
layout image placed in data coordinates beneath the traces.
"""

import math
from typing import Dict, List, Tuple

import config
from components.overlay import Viewport

# Half the circumference of the Web Mercator world square, in metres
WORLD_HALF_EXTENT = 20037508.342789244


def tile_span(zoom: int) -> float:
    """Edge length of one tile at a zoom level, in metres."""
    return 2 * WORLD_HALF_EXTENT / 2 ** zoom


def tile_zoom(viewport: Viewport, tile_px: int = config.BASEMAP_TILE_PX) -> int:
    """Zoom level whose tiles are closest to their native pixel size."""
    metres_per_px = (viewport.x_range[1] - viewport.x_range[0]) / viewport.plot_width
    if metres_per_px <= 0:
        return 0
    zoom = round(math.log2(2 * WORLD_HALF_EXTENT / (tile_px * metres_per_px)))
    return int(min(max(zoom, 0), config.BASEMAP_MAX_ZOOM))


def visible_tiles(viewport: Viewport, zoom: int) -> List[Tuple[int, int]]:
    """(x, y) indices of the tiles covering the viewport at a zoom level.

    Tile rows count down from the northern edge of the world square.
    """
    n = 2 ** zoom
    span = tile_span(zoom)
    x0, x1 = sorted(viewport.x_range)
    y0, y1 = sorted(viewport.y_range)

    def _clamp(index: float) -> int:
        return min(max(int(math.floor(index)), 0), n - 1)

    col_min = _clamp((x0 + WORLD_HALF_EXTENT) / span)
    col_max = _clamp((x1 + WORLD_HALF_EXTENT) / span)
    row_min = _clamp((WORLD_HALF_EXTENT - y1) / span)
    row_max = _clamp((WORLD_HALF_EXTENT - y0) / span)

    return [
        (col, row)
        for row in range(row_min, row_max + 1)
        for col in range(col_min, col_max + 1)
    ]


def tile_images(
    viewport: Viewport,
    url_template: str = config.BASEMAP_TILE_URL,
    max_tiles: int = config.BASEMAP_MAX_TILES,
) -> List[Dict]:
    """Plotly layout images for the basemap tiles under a viewport.

    Args:
        viewport: Visible map window
        url_template: Tile URL with {z}, {x} and {y} placeholders
        max_tiles: Upper bound on images; the zoom is lowered until it fits

    Returns:
        List of layout.images dicts
    """
    zoom = tile_zoom(viewport)
    tiles = visible_tiles(viewport, zoom)
    while len(tiles) > max_tiles and zoom > 0:
        zoom -= 1
        tiles = visible_tiles(viewport, zoom)

    span = tile_span(zoom)
    return [
        dict(
            source=url_template.format(z=zoom, x=col, y=row),
            xref="x",
            yref="y",
            x=-WORLD_HALF_EXTENT + col * span,
            y=WORLD_HALF_EXTENT - row * span,
            sizex=span,
            sizey=span,
            xanchor="left",
            yanchor="top",
            sizing="stretch",
            layer="below",
        )
        for col, row in tiles
    ]
