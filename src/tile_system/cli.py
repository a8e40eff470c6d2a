from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from dataclasses import asdict
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from tile_system.config import LoggingSettings, TileSystemSettings, get_settings
from tile_system.errors import TileSystemError
from tile_system.observability import configure_logging
from tile_system.quadkey import (
    lat_long_to_tile_xy,
    quad_key_to_tile_xy,
    tile_xy_to_quad_key,
)
from tile_system.web_mercator import (
    ground_resolution,
    lat_long_to_pixel_xy,
    map_scale,
    pixel_xy_to_lat_long,
    require_level_of_detail,
    tile_bounds,
)

logger = logging.getLogger(__name__)

CommandHandler = Callable[[argparse.Namespace, TileSystemSettings], dict[str, Any]]


def _level(args: argparse.Namespace, settings: TileSystemSettings) -> int:
    if args.level is None:
        return settings.default_level_of_detail
    return require_level_of_detail(args.level)


def _finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise TileSystemError(f"{name} must be a finite number, got {value!r}")
    return value


def _latlong_to_pixel(
    args: argparse.Namespace, settings: TileSystemSettings
) -> dict[str, Any]:
    level = _level(args, settings)
    pixel_x, pixel_y = lat_long_to_pixel_xy(
        _finite("latitude", args.latitude), _finite("longitude", args.longitude), level
    )
    return {"pixel_x": pixel_x, "pixel_y": pixel_y, "level_of_detail": level}


def _pixel_to_latlong(
    args: argparse.Namespace, settings: TileSystemSettings
) -> dict[str, Any]:
    level = _level(args, settings)
    latitude, longitude = pixel_xy_to_lat_long(args.pixel_x, args.pixel_y, level)
    return {"latitude": latitude, "longitude": longitude, "level_of_detail": level}


def _tile_payload(tile_x: int, tile_y: int, level: int) -> dict[str, Any]:
    return {
        "quad_key": tile_xy_to_quad_key(tile_x, tile_y, level),
        "tile_x": tile_x,
        "tile_y": tile_y,
        "level_of_detail": level,
        "bounds": asdict(tile_bounds(tile_x, tile_y, level)),
    }


def _latlong_to_quadkey(
    args: argparse.Namespace, settings: TileSystemSettings
) -> dict[str, Any]:
    level = _level(args, settings)
    tile_x, tile_y = lat_long_to_tile_xy(
        _finite("latitude", args.latitude), _finite("longitude", args.longitude), level
    )
    return _tile_payload(tile_x, tile_y, level)


def _tile_to_quadkey(
    args: argparse.Namespace, settings: TileSystemSettings
) -> dict[str, Any]:
    level = _level(args, settings)
    max_tile = (1 << level) - 1
    for name, value in (("tile_x", args.tile_x), ("tile_y", args.tile_y)):
        if not 0 <= value <= max_tile:
            raise TileSystemError(
                f"{name}={value} outside [0, {max_tile}] at level {level}"
            )
    return _tile_payload(args.tile_x, args.tile_y, level)


def _quadkey_to_tile(
    args: argparse.Namespace, settings: TileSystemSettings
) -> dict[str, Any]:
    tile_x, tile_y, level = quad_key_to_tile_xy(args.quad_key)
    require_level_of_detail(level)
    return _tile_payload(tile_x, tile_y, level)


def _ground_resolution(
    args: argparse.Namespace, settings: TileSystemSettings
) -> dict[str, Any]:
    level = _level(args, settings)
    _finite("latitude", args.latitude)
    return {
        "latitude": args.latitude,
        "level_of_detail": level,
        "meters_per_pixel": ground_resolution(args.latitude, level),
    }


def _map_scale(args: argparse.Namespace, settings: TileSystemSettings) -> dict[str, Any]:
    level = _level(args, settings)
    _finite("latitude", args.latitude)
    dpi = settings.screen_dpi if args.dpi is None else _finite("--dpi", args.dpi)
    if dpi <= 0:
        raise TileSystemError(f"--dpi must be > 0, got {dpi}")
    return {
        "latitude": args.latitude,
        "level_of_detail": level,
        "screen_dpi": dpi,
        "scale": map_scale(args.latitude, level, dpi),
    }


_COMMANDS: dict[str, CommandHandler] = {
    "latlong-to-pixel": _latlong_to_pixel,
    "pixel-to-latlong": _pixel_to_latlong,
    "latlong-to-quadkey": _latlong_to_quadkey,
    "tile-to-quadkey": _tile_to_quadkey,
    "quadkey-to-tile": _quadkey_to_tile,
    "ground-resolution": _ground_resolution,
    "map-scale": _map_scale,
}


def _add_level(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Level of detail, 1-23 (default: from config)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tile-system",
        description=(
            "Convert between latitude/longitude, pixel XY, tile XY and QuadKeys "
            "on the Web Mercator tile grid."
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a tile_system.yaml settings file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (e.g. DEBUG, INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    cmd = subparsers.add_parser(
        "latlong-to-pixel", help="Latitude/longitude to pixel XY"
    )
    cmd.add_argument("latitude", type=float)
    cmd.add_argument("longitude", type=float)
    _add_level(cmd)

    cmd = subparsers.add_parser(
        "pixel-to-latlong", help="Pixel XY to latitude/longitude"
    )
    cmd.add_argument("pixel_x", type=int)
    cmd.add_argument("pixel_y", type=int)
    _add_level(cmd)

    cmd = subparsers.add_parser(
        "latlong-to-quadkey", help="Latitude/longitude to tile XY and QuadKey"
    )
    cmd.add_argument("latitude", type=float)
    cmd.add_argument("longitude", type=float)
    _add_level(cmd)

    cmd = subparsers.add_parser("tile-to-quadkey", help="Tile XY to QuadKey")
    cmd.add_argument("tile_x", type=int)
    cmd.add_argument("tile_y", type=int)
    _add_level(cmd)

    cmd = subparsers.add_parser(
        "quadkey-to-tile", help="QuadKey to tile XY, level and bounds"
    )
    cmd.add_argument("quad_key")

    cmd = subparsers.add_parser(
        "ground-resolution", help="Meters per pixel at a latitude"
    )
    cmd.add_argument("latitude", type=float)
    _add_level(cmd)

    cmd = subparsers.add_parser("map-scale", help="Map scale denominator 1:N")
    cmd.add_argument("latitude", type=float)
    _add_level(cmd)
    cmd.add_argument(
        "--dpi",
        type=float,
        default=None,
        help="Screen resolution in dots per inch (default: from config)",
    )
    return parser


def _log_level(args: argparse.Namespace, settings: TileSystemSettings) -> str:
    if args.log_level is None:
        return settings.logging.level
    try:
        return LoggingSettings(level=args.log_level).level
    except ValidationError as exc:
        raise TileSystemError(f"Invalid --log-level {args.log_level!r}") from exc


def _reject(command: str, exc: TileSystemError) -> int:
    logger.warning(
        "tile_system_input_rejected",
        extra={"command": command, "error": str(exc)},
    )
    print(
        json.dumps(
            {"error": type(exc).__name__, "detail": str(exc)}, ensure_ascii=False
        ),
        file=sys.stderr,
    )
    return 2


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = get_settings(args.config)
    try:
        log_level = _log_level(args, settings)
    except TileSystemError as exc:
        return _reject(args.command, exc)
    configure_logging(log_level=log_level, log_format=settings.logging.format)

    handler = _COMMANDS[args.command]
    try:
        result = handler(args, settings)
    except TileSystemError as exc:
        return _reject(args.command, exc)

    logger.debug("tile_system_command_completed", extra={"command": args.command})
    print(json.dumps(result, ensure_ascii=False))
    return 0
