"""Estimating the web-mercator zoom levels a raster is suited for."""

from __future__ import annotations

import logging
import math

log = logging.getLogger(__name__)

# Metres per pixel at zoom 0 on the equator for 256 pixel tiles.
PIXEL_SIZE_Z0 = 156543.04
# Smallest size a raster is shrunk to when zooming out.
MINIMAL_RASTER_SIZE = 128


def _round_half_away(value: float) -> int:
    if value >= 0:
        return math.floor(value + 0.5)
    return math.ceil(value - 0.5)


def guess_max_zoom_level(resolution: float) -> int:
    """Zoom level whose pixel size best matches ``resolution`` in metres."""
    return _round_half_away(math.log2(PIXEL_SIZE_Z0 / resolution))


def guess_min_zoom_level(max_zoom_level: int, width: int, height: int) -> int:
    """Lowest zoom at which a raster of this size is still worth tiling (never below 0)."""
    quotient = MINIMAL_RASTER_SIZE * 2.0**max_zoom_level
    zoom_x = math.floor(math.log2(quotient / width))
    zoom_y = math.floor(math.log2(quotient / height))
    return max(0, min(zoom_x, zoom_y))


def zoom_range(
    cell_size: float, width: int, height: int, min_zoom: int, max_zoom: int
) -> tuple[int, int]:
    """Clamp the requested zoom range to what the raster supports.

    A negative ``max_zoom`` means "as deep as the data allows".
    """
    estimated_max = guess_max_zoom_level(abs(cell_size))
    estimated_min = guess_min_zoom_level(estimated_max, width, height)

    min_zoom = max(min_zoom, estimated_min)
    if max_zoom < 0 or max_zoom > estimated_max:
        max_zoom = estimated_max
    if max_zoom < min_zoom:
        min_zoom, max_zoom = max_zoom, min_zoom

    log.info("tiles will be generated in a range between %d and %d", min_zoom, max_zoom)
    return min_zoom, max_zoom