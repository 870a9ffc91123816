"""Configuration model used by the subset service.

ServiceConfig

`data_dir` (`Path`)
: Root of the service data. Font descriptors live under `<data_dir>/fonts`
  and generated subsets under `<data_dir>/static` unless overridden.

`static_dir` (`Path`)
: Directory holding cached artifacts, laid out as `<static_dir>/<font_id>/`.

`fonts_dir` (`Path`)
: Directory scanned for font descriptors, one subdirectory per font.

`cache_cleanup_days` (`int`)
: Retention window of multi-character subsets. Files under
  `<static_dir>/<font_id>/cache` older than this are removed by the janitor.

`cleanup_interval_hours` (`float`)
: Delay between two janitor sweeps.

`host` / `port`
: Bind address of the HTTP server.

`single_flight` (`bool`)
: Share one generation between concurrent identical cache misses.

Values are resolved from explicit arguments first, then from a YAML or JSON
file passed with ``--config``, then from ``FONTSLICE_*`` environment
variables, then from the defaults above.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
import yaml

from fontslice.core.exceptions import FontSliceError


ENV_PREFIX = "FONTSLICE_"
_ENV_FIELDS: dict[str, str] = {
    "DATA_DIR": "data_dir",
    "STATIC_DIR": "static_dir",
    "FONTS_DIR": "fonts_dir",
    "CACHE_DAYS": "cache_cleanup_days",
    "CLEANUP_INTERVAL_HOURS": "cleanup_interval_hours",
    "HOST": "host",
    "PORT": "port",
}


class ConfigError(FontSliceError):
    """Raised when the service configuration cannot be loaded."""


class ServiceConfig(BaseModel):
    """Runtime settings of the subset service."""

    model_config = ConfigDict(extra="forbid")

    data_dir: Path = Path("data")
    static_dir: Path = Path("data") / "static"
    fonts_dir: Path = Path("data") / "fonts"
    cache_cleanup_days: int = Field(default=7, ge=0)
    cleanup_interval_hours: float = Field(default=24.0, gt=0)
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)
    single_flight: bool = True

    @model_validator(mode="before")
    @classmethod
    def _derive_directories(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        values = dict(data)
        raw_dir = values.get("data_dir") or "data"
        if not isinstance(raw_dir, (str, os.PathLike)):
            return values
        data_dir = Path(raw_dir)
        if values.get("static_dir") is None:
            values["static_dir"] = data_dir / "static"
        if values.get("fonts_dir") is None:
            values["fonts_dir"] = data_dir / "fonts"
        return values

    @property
    def static_root(self) -> Path:
        return self.static_dir

    @property
    def fonts_root(self) -> Path:
        return self.fonts_dir

    def ensure_directories(self) -> ServiceConfig:
        """Create the data, static and fonts directories."""
        for directory in (self.data_dir, self.static_root, self.fonts_root):
            directory.mkdir(parents=True, exist_ok=True)
        return self


def _environment_values(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    source = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        raw = source.get(f"{ENV_PREFIX}{suffix}")
        if raw:
            values[field_name] = raw
    return values


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{path}'.") from exc
    try:
        if path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid configuration file '{path}'.") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Configuration file '{path}' must contain a mapping.")
    return dict(payload)


def load_config(
    config_file: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ServiceConfig:
    """Resolve a :class:`ServiceConfig` from overrides, file, and environment."""
    values = _environment_values(environ)
    if config_file is not None:
        values.update(_read_config_file(config_file))
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ServiceConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid service configuration: {exc}") from exc


__all__ = ["ENV_PREFIX", "ConfigError", "ServiceConfig", "load_config"]
