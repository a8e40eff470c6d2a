from __future__ import annotations

from tile_system.errors import (
    InvalidLevelOfDetailError,
    InvalidQuadKeyError,
    TileSystemError,
)
from tile_system.quadkey import (
    lat_long_to_quad_key,
    lat_long_to_tile_xy,
    quad_key_to_lat_long,
    quad_key_to_tile_xy,
    tile_xy_to_quad_key,
)
from tile_system.web_mercator import (
    EARTH_RADIUS,
    MAX_LATITUDE,
    MAX_LEVEL_OF_DETAIL,
    MAX_LONGITUDE,
    METERS_PER_INCH,
    MIN_LATITUDE,
    MIN_LEVEL_OF_DETAIL,
    MIN_LONGITUDE,
    TILE_SIZE,
    TileBounds,
    clip,
    ground_resolution,
    lat_long_to_pixel_xy,
    map_scale,
    map_size,
    pixel_xy_to_lat_long,
    pixel_xy_to_tile_xy,
    tile_bounds,
    tile_xy_to_pixel_xy,
)

__all__ = [
    "EARTH_RADIUS",
    "InvalidLevelOfDetailError",
    "InvalidQuadKeyError",
    "MAX_LATITUDE",
    "MAX_LEVEL_OF_DETAIL",
    "MAX_LONGITUDE",
    "METERS_PER_INCH",
    "MIN_LATITUDE",
    "MIN_LEVEL_OF_DETAIL",
    "MIN_LONGITUDE",
    "TILE_SIZE",
    "TileBounds",
    "TileSystemError",
    "clip",
    "ground_resolution",
    "lat_long_to_pixel_xy",
    "lat_long_to_quad_key",
    "lat_long_to_tile_xy",
    "map_scale",
    "map_size",
    "pixel_xy_to_lat_long",
    "pixel_xy_to_tile_xy",
    "quad_key_to_lat_long",
    "quad_key_to_tile_xy",
    "tile_bounds",
    "tile_xy_to_pixel_xy",
    "tile_xy_to_quad_key",
]
