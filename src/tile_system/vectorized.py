from __future__ import annotations

from typing import Any

import numpy as np

from tile_system.web_mercator import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    map_size,
)


def _level_of_detail(level_of_detail: Any) -> Any:
    # numpy integer scalars are accepted; floats and bools still fail in map_size.
    if isinstance(level_of_detail, np.integer):
        return int(level_of_detail)
    return level_of_detail


def lat_long_to_pixel_xy(
    latitude: Any, longitude: Any, level_of_detail: int
) -> tuple[np.ndarray, np.ndarray]:
    """Array form of ``web_mercator.lat_long_to_pixel_xy``.

    Inputs broadcast against each other; outputs are int64 arrays. NaN inputs
    have no pixel and yield unspecified values.
    """
    lat = np.clip(np.asarray(latitude, dtype=np.float64), MIN_LATITUDE, MAX_LATITUDE)
    lon = np.clip(
        np.asarray(longitude, dtype=np.float64), MIN_LONGITUDE, MAX_LONGITUDE
    )
    lat, lon = np.broadcast_arrays(lat, lon)

    x = (lon + 180) / 360
    sin_latitude = np.sin(lat * np.pi / 180)
    y = 0.5 - np.log((1 + sin_latitude) / (1 - sin_latitude)) / (4 * np.pi)

    size = map_size(_level_of_detail(level_of_detail))
    pixel_x = np.clip(x * size + 0.5, 0, size - 1).astype(np.int64)
    pixel_y = np.clip(y * size + 0.5, 0, size - 1).astype(np.int64)
    return pixel_x, pixel_y


def pixel_xy_to_lat_long(
    pixel_x: Any, pixel_y: Any, level_of_detail: int
) -> tuple[np.ndarray, np.ndarray]:
    """Array form of ``web_mercator.pixel_xy_to_lat_long``."""
    size = map_size(_level_of_detail(level_of_detail))
    px = np.clip(np.asarray(pixel_x, dtype=np.float64), 0, size - 1)
    py = np.clip(np.asarray(pixel_y, dtype=np.float64), 0, size - 1)
    px, py = np.broadcast_arrays(px, py)

    x = (px / size) - 0.5
    y = 0.5 - (py / size)

    latitude = 90 - 360 * np.arctan(np.exp(-y * 2 * np.pi)) / np.pi
    longitude = 360 * x
    return latitude, longitude
