"""Spherical Web Mercator math shared by every tile-system conversion.

The map is a square of ``map_size(level)`` pixels per side, origin at the
top-left corner, Y increasing southward. Tiles are 256x256 pixel blocks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from tile_system.errors import InvalidLevelOfDetailError

EARTH_RADIUS: Final[float] = 6378137.0
MIN_LATITUDE: Final[float] = -85.05112878
MAX_LATITUDE: Final[float] = 85.05112878
MIN_LONGITUDE: Final[float] = -180.0
MAX_LONGITUDE: Final[float] = 180.0

TILE_SIZE: Final[int] = 256
METERS_PER_INCH: Final[float] = 0.0254

MIN_LEVEL_OF_DETAIL: Final[int] = 1
MAX_LEVEL_OF_DETAIL: Final[int] = 23


def clip(n: float, min_value: float, max_value: float) -> float:
    """Clip ``n`` to ``[min_value, max_value]``."""
    return min(max(n, min_value), max_value)


def require_level_of_detail(level_of_detail: int) -> int:
    if isinstance(level_of_detail, bool) or not isinstance(level_of_detail, int):
        raise InvalidLevelOfDetailError(
            f"level_of_detail must be an int, got {level_of_detail!r}"
        )
    if not MIN_LEVEL_OF_DETAIL <= level_of_detail <= MAX_LEVEL_OF_DETAIL:
        raise InvalidLevelOfDetailError(
            f"level_of_detail={level_of_detail} outside "
            f"[{MIN_LEVEL_OF_DETAIL}, {MAX_LEVEL_OF_DETAIL}]"
        )
    return level_of_detail


def map_size(level_of_detail: int) -> int:
    """Map width and height in pixels at ``level_of_detail``."""
    return TILE_SIZE << require_level_of_detail(level_of_detail)


def ground_resolution(latitude: float, level_of_detail: int) -> float:
    """Meters per pixel at ``latitude`` and ``level_of_detail``."""
    latitude = clip(latitude, MIN_LATITUDE, MAX_LATITUDE)
    return (
        math.cos(latitude * math.pi / 180)
        * 2
        * math.pi
        * EARTH_RADIUS
        / map_size(level_of_detail)
    )


def map_scale(latitude: float, level_of_detail: int, screen_dpi: float) -> float:
    """Denominator N of the 1:N map scale on a screen of ``screen_dpi``."""
    return ground_resolution(latitude, level_of_detail) * screen_dpi / METERS_PER_INCH


def lat_long_to_pixel_xy(
    latitude: float, longitude: float, level_of_detail: int
) -> tuple[int, int]:
    latitude = clip(latitude, MIN_LATITUDE, MAX_LATITUDE)
    longitude = clip(longitude, MIN_LONGITUDE, MAX_LONGITUDE)

    x = (longitude + 180) / 360
    sin_latitude = math.sin(latitude * math.pi / 180)
    y = 0.5 - math.log((1 + sin_latitude) / (1 - sin_latitude)) / (4 * math.pi)

    size = map_size(level_of_detail)
    pixel_x = int(clip(x * size + 0.5, 0, size - 1))
    pixel_y = int(clip(y * size + 0.5, 0, size - 1))
    return pixel_x, pixel_y


def _pixel_to_degrees(pixel_x: float, pixel_y: float, size: int) -> tuple[float, float]:
    x = (pixel_x / size) - 0.5
    y = 0.5 - (pixel_y / size)

    latitude = 90 - 360 * math.atan(math.exp(-y * 2 * math.pi)) / math.pi
    longitude = 360 * x
    return latitude, longitude


def pixel_xy_to_lat_long(
    pixel_x: float, pixel_y: float, level_of_detail: int
) -> tuple[float, float]:
    """Latitude/longitude of the upper-left corner of a pixel."""
    size = map_size(level_of_detail)
    return _pixel_to_degrees(
        clip(pixel_x, 0, size - 1), clip(pixel_y, 0, size - 1), size
    )


def pixel_xy_to_tile_xy(pixel_x: float, pixel_y: float) -> tuple[int, int]:
    return int(pixel_x // TILE_SIZE), int(pixel_y // TILE_SIZE)


def tile_xy_to_pixel_xy(tile_x: int, tile_y: int) -> tuple[int, int]:
    return tile_x * TILE_SIZE, tile_y * TILE_SIZE


@dataclass(frozen=True)
class TileBounds:
    west: float
    south: float
    east: float
    north: float


def tile_bounds(tile_x: int, tile_y: int, level_of_detail: int) -> TileBounds:
    size = map_size(level_of_detail)
    left, top = tile_xy_to_pixel_xy(tile_x, tile_y)
    right, bottom = tile_xy_to_pixel_xy(tile_x + 1, tile_y + 1)

    # Edges may sit on the far map border, one pixel past the last valid pixel.
    north, west = _pixel_to_degrees(clip(left, 0, size), clip(top, 0, size), size)
    south, east = _pixel_to_degrees(
        clip(right, 0, size), clip(bottom, 0, size), size
    )
    return TileBounds(west=west, south=south, east=east, north=north)
