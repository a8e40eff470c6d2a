from __future__ import annotations

from typing import Final

from tile_system.errors import InvalidQuadKeyError
from tile_system.web_mercator import (
    lat_long_to_pixel_xy,
    pixel_xy_to_lat_long,
    pixel_xy_to_tile_xy,
    require_level_of_detail,
    tile_xy_to_pixel_xy,
)

QUAD_KEY_DIGITS: Final[str] = "0123"


def tile_xy_to_quad_key(tile_x: int, tile_y: int, level_of_detail: int) -> str:
    """Encode a tile as a QuadKey of ``level_of_detail`` digits.

    Bits of ``tile_x`` and ``tile_y`` above ``level_of_detail`` are ignored.
    """
    require_level_of_detail(level_of_detail)

    digits: list[str] = []
    for i in range(level_of_detail, 0, -1):
        digit = 0
        mask = 1 << (i - 1)
        if (tile_x & mask) != 0:
            digit += 1
        if (tile_y & mask) != 0:
            digit += 2
        digits.append(QUAD_KEY_DIGITS[digit])
    return "".join(digits)


def quad_key_to_tile_xy(quad_key: str) -> tuple[int, int, int]:
    """Decode a QuadKey into ``(tile_x, tile_y, level_of_detail)``.

    Raises ``InvalidQuadKeyError`` on any character outside ``0123``.
    """
    tile_x = tile_y = 0
    level_of_detail = len(quad_key)
    for index, char in enumerate(quad_key):
        mask = 1 << (level_of_detail - 1 - index)
        if char == "0":
            continue
        if char == "1":
            tile_x |= mask
        elif char == "2":
            tile_y |= mask
        elif char == "3":
            tile_x |= mask
            tile_y |= mask
        else:
            raise InvalidQuadKeyError(
                f"Invalid QuadKey digit {char!r} at position {index} in {quad_key!r}"
            )
    return tile_x, tile_y, level_of_detail


def lat_long_to_tile_xy(
    latitude: float, longitude: float, level_of_detail: int
) -> tuple[int, int]:
    pixel_x, pixel_y = lat_long_to_pixel_xy(latitude, longitude, level_of_detail)
    return pixel_xy_to_tile_xy(pixel_x, pixel_y)


def lat_long_to_quad_key(latitude: float, longitude: float, level_of_detail: int) -> str:
    tile_x, tile_y = lat_long_to_tile_xy(latitude, longitude, level_of_detail)
    return tile_xy_to_quad_key(tile_x, tile_y, level_of_detail)


def quad_key_to_lat_long(quad_key: str) -> tuple[float, float]:
    """Latitude/longitude of the upper-left corner of the QuadKey's tile."""
    tile_x, tile_y, level_of_detail = quad_key_to_tile_xy(quad_key)
    pixel_x, pixel_y = tile_xy_to_pixel_xy(tile_x, tile_y)
    return pixel_xy_to_lat_long(pixel_x, pixel_y, level_of_detail)
