from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Final, Literal, Mapping, Optional, Type, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource

from tile_system.web_mercator import MAX_LEVEL_OF_DETAIL, MIN_LEVEL_OF_DETAIL

DEFAULT_CONFIG_NAME: Final[str] = "tile_system.yaml"
DEFAULT_CONFIG_ENV: Final[str] = "TILE_SYSTEM_CONFIG"
DEFAULT_CONFIG_DIR_ENV: Final[str] = "TILE_SYSTEM_CONFIG_DIR"
CONFIG_SECTION: Final[str] = "tile_system"
ENV_PREFIX: Final[str] = "TILE_SYSTEM_"

_LOG_LEVELS: Final[frozenset[str]] = frozenset(
    {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: str = "INFO"
    format: Literal["json", "text"] = "json"

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {value!r}; expected one of: {sorted(_LOG_LEVELS)}"
            )
        return normalized


class TileSystemSettings(BaseSettings):
    """Defaults used by the command line front end.

    Precedence, highest first: ``TILE_SYSTEM_*`` environment variables
    (nested keys joined with ``__``), then values from the YAML file.
    """

    default_level_of_detail: int = Field(
        default=12, ge=MIN_LEVEL_OF_DETAIL, le=MAX_LEVEL_OF_DETAIL
    )
    screen_dpi: float = Field(default=96.0, gt=0)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="forbid",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (env_settings, init_settings)


def _absolute(path: Union[str, Path]) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = (Path.cwd() / candidate).resolve()
    return candidate


def _resolve_config_path(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> tuple[Optional[Path], bool]:
    """Return ``(path, required)``; ``path`` is None when nothing was found."""
    if path is not None:
        return _absolute(path), True

    environ = os.environ if environ is None else environ
    explicit = environ.get(DEFAULT_CONFIG_ENV)
    if explicit:
        return _absolute(explicit), True

    explicit_dir = environ.get(DEFAULT_CONFIG_DIR_ENV)
    if explicit_dir:
        return _absolute(explicit_dir) / DEFAULT_CONFIG_NAME, True

    cwd = Path.cwd()
    for candidate_root in (cwd, *cwd.parents):
        candidate = candidate_root / "config" / DEFAULT_CONFIG_NAME
        if candidate.is_file():
            return candidate, False

    return None, False


def _parse_yaml(text: str, *, source: Path) -> Mapping[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to load tile-system YAML: {source}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f"tile-system config must be a mapping: {source}")

    unknown = sorted(str(key) for key in data if key != CONFIG_SECTION)
    if unknown:
        raise ValueError(
            f"Unknown top-level keys in {source}: {', '.join(unknown)}; "
            f"expected only {CONFIG_SECTION!r}"
        )

    section = data.get(CONFIG_SECTION) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"{CONFIG_SECTION!r} section must be a mapping: {source}")
    return section


def load_settings(path: Optional[Union[str, Path]] = None) -> TileSystemSettings:
    config_path, required = _resolve_config_path(path)

    data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.is_file():
            if required:
                raise FileNotFoundError(
                    f"tile-system config file not found: {config_path}"
                )
        else:
            raw = config_path.read_text(encoding="utf-8")
            data = dict(_parse_yaml(raw, source=config_path))

    source = config_path if config_path is not None else "<defaults>"
    try:
        return TileSystemSettings(**data)
    except ValidationError as exc:
        raise ValueError(f"Invalid tile-system config ({source}): {exc}") from exc


@lru_cache(maxsize=8)
def _get_settings_cached(
    config_path: Optional[str],
    mtime_ns: int,
    size: int,
    env: tuple[tuple[str, str], ...],
) -> TileSystemSettings:
    _ = (mtime_ns, size, env)
    return load_settings(config_path)


def _env_key(environ: Mapping[str, str]) -> tuple[tuple[str, str], ...]:
    return tuple(
        sorted(
            (key.upper(), value)
            for key, value in environ.items()
            if key.upper().startswith(ENV_PREFIX)
        )
    )


def get_settings(path: Optional[Union[str, Path]] = None) -> TileSystemSettings:
    """Cached ``load_settings``.

    The cache is keyed on the file's path, mtime and size and on the current
    ``TILE_SYSTEM_*`` environment, so edits to either are picked up.
    """
    env = _env_key(os.environ)
    resolved, required = _resolve_config_path(path)
    if resolved is None:
        return _get_settings_cached(None, 0, 0, env)

    try:
        stat = resolved.stat()
    except FileNotFoundError as exc:
        if required:
            raise FileNotFoundError(
                f"tile-system config file not found: {resolved}"
            ) from exc
        return _get_settings_cached(None, 0, 0, env)

    return _get_settings_cached(str(resolved), stat.st_mtime_ns, stat.st_size, env)


get_settings.cache_clear = _get_settings_cached.cache_clear  # type: ignore[attr-defined]
