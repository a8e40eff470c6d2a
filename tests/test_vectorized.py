from __future__ import annotations

import numpy as np
import pytest

LATITUDES = [0.0, 47.6097, -33.8688, 51.5074, 84.9, -84.9, 90.0, -1000.0]
LONGITUDES = [0.0, -122.3331, 151.2093, -0.1278, 179.9, -179.9, 180.0, 1000.0]


@pytest.mark.parametrize("level", [1, 7, 15, 23])
def test_lat_long_to_pixel_xy_matches_scalar(level: int) -> None:
    from tile_system import vectorized, web_mercator

    pixel_x, pixel_y = vectorized.lat_long_to_pixel_xy(LATITUDES, LONGITUDES, level)
    assert pixel_x.dtype == np.int64
    assert pixel_y.dtype == np.int64

    expected = [
        web_mercator.lat_long_to_pixel_xy(lat, lon, level)
        for lat, lon in zip(LATITUDES, LONGITUDES)
    ]
    assert list(zip(pixel_x.tolist(), pixel_y.tolist())) == expected


@pytest.mark.parametrize("level", [1, 7, 23])
def test_pixel_xy_to_lat_long_matches_scalar(level: int) -> None:
    from tile_system import vectorized, web_mercator

    size = web_mercator.map_size(level)
    pixels_x = np.array([0, 1, size // 2, size // 3, size - 1, size + 50, -5])
    pixels_y = np.array([0, size - 2, size // 2, size // 7, size - 1, -1, size * 2])

    latitude, longitude = vectorized.pixel_xy_to_lat_long(pixels_x, pixels_y, level)
    assert latitude.dtype == np.float64

    for i, (px, py) in enumerate(zip(pixels_x.tolist(), pixels_y.tolist())):
        lat, lon = web_mercator.pixel_xy_to_lat_long(px, py, level)
        assert latitude[i] == pytest.approx(lat, abs=1e-9)
        assert longitude[i] == pytest.approx(lon, abs=1e-9)


def test_inputs_broadcast() -> None:
    from tile_system import vectorized

    pixel_x, pixel_y = vectorized.lat_long_to_pixel_xy(0.0, [-90.0, 0.0, 90.0], 1)
    assert pixel_x.shape == (3,)
    assert pixel_y.tolist() == [256, 256, 256]
    assert pixel_x.tolist() == [128, 256, 384]


def test_vectorized_rejects_invalid_level() -> None:
    from tile_system import vectorized
    from tile_system.errors import InvalidLevelOfDetailError

    with pytest.raises(InvalidLevelOfDetailError):
        vectorized.lat_long_to_pixel_xy([0.0], [0.0], 0)
    with pytest.raises(InvalidLevelOfDetailError):
        vectorized.pixel_xy_to_lat_long([0], [0], 24)
    with pytest.raises(InvalidLevelOfDetailError):
        vectorized.lat_long_to_pixel_xy([0.0], [0.0], 12.7)
    with pytest.raises(InvalidLevelOfDetailError):
        vectorized.pixel_xy_to_lat_long([0], [0], 12.7)
    with pytest.raises(InvalidLevelOfDetailError):
        vectorized.lat_long_to_pixel_xy([0.0], [0.0], True)
    with pytest.raises(InvalidLevelOfDetailError):
        vectorized.pixel_xy_to_lat_long([0], [0], True)


def test_vectorized_accepts_numpy_integer_level() -> None:
    from tile_system import vectorized

    pixel_x, pixel_y = vectorized.lat_long_to_pixel_xy([0.0], [0.0], np.int64(1))
    assert pixel_x.tolist() == [256]
    assert pixel_y.tolist() == [256]

    latitude, longitude = vectorized.pixel_xy_to_lat_long([256], [256], np.int32(1))
    assert latitude.tolist() == pytest.approx([0.0])
    assert longitude.tolist() == pytest.approx([0.0])
