# matrix_rain/config.py
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import ConfigError

ENV_PREFIX = "MATRIX_RAIN_"
DEFAULT_CONFIG_PATH = Path("~/.config/matrix/rain.toml")
DEFAULT_FEED_URL = "https://github-matrix.herokuapp.com/fetch"


@dataclass(frozen=True)
class RainConfig:
    """
    Startup options for the rain effect.

    Times ending in ``_time``, ``_duration``, ``_interval`` (intro) and
    ``_debounce`` are milliseconds, matching the browser timers they replace.
    ``poll_interval`` and ``feed_timeout`` are seconds.
    """

    font_size: int = 14
    alpha_fading: float = 0.04
    random_factor: float = 0.995
    interval_time: int = 120

    feed_url: str = DEFAULT_FEED_URL
    feed_timeout: float = 10.0
    poll_interval: float = 5.0
    initial_pool_size: int = 200

    intro_duration: int = 2000
    intro_interval: int = 150
    resize_debounce: int = 300

    def validate(self) -> "RainConfig":
        if self.font_size <= 0:
            raise ConfigError(f"font_size must be positive, got {self.font_size}")
        if not 0.0 <= self.alpha_fading <= 1.0:
            raise ConfigError(f"alpha_fading must be within [0, 1], got {self.alpha_fading}")
        if not 0.0 <= self.random_factor <= 1.0:
            raise ConfigError(f"random_factor must be within [0, 1], got {self.random_factor}")
        for name in ("interval_time", "intro_duration", "intro_interval"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.resize_debounce < 0:
            raise ConfigError(f"resize_debounce must not be negative, got {self.resize_debounce}")
        if self.poll_interval <= 0 or self.feed_timeout <= 0:
            raise ConfigError("poll_interval and feed_timeout must be positive")
        if self.initial_pool_size <= 0:
            raise ConfigError("initial_pool_size must be positive")
        if not self.feed_url:
            raise ConfigError("feed_url is required")
        return self

    def with_overrides(self, **overrides: Any) -> "RainConfig":
        """Return a copy with every non-None override applied and validated."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        return replace(self, **_coerce(values, source="override")).validate()


def _coerce(raw: Mapping[str, Any], *, source: str) -> dict[str, Any]:
    types = {f.name: f.type for f in fields(RainConfig)}
    out: dict[str, Any] = {}
    for key, value in raw.items():
        name = key.lower()
        if name not in types:
            raise ConfigError(f"Unknown option '{key}' in {source}")
        kind = {"int": int, "float": float, "str": str}[types[name]]
        # bool is an int subclass and floats would truncate silently
        if isinstance(value, bool) or (kind is int and isinstance(value, float) and not value.is_integer()):
            raise ConfigError(f"Option '{key}' in {source} must be {types[name]}, got {value!r}")
        try:
            out[name] = kind(value)
        except (TypeError, ValueError):
            raise ConfigError(f"Option '{key}' in {source} must be {types[name]}, got {value!r}") from None
    return out


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path} is not valid TOML: {exc}") from exc
    # Accept either a [rain] table or top-level keys
    section = data.get("rain", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: [rain] must be a table")
    return section


def _read_env(environ: Mapping[str, str]) -> dict[str, str]:
    names = {f.name for f in fields(RainConfig)}
    out = {}
    for name in names:
        value = environ.get(ENV_PREFIX + name.upper())
        if value not in (None, ""):
            out[name] = value
    return out


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> RainConfig:
    """
    Build the effective configuration: defaults, then the TOML file, then
    MATRIX_RAIN_* environment variables.
    """
    environ = os.environ if environ is None else environ
    if path is None:
        path = Path(environ.get(ENV_PREFIX + "CONFIG") or DEFAULT_CONFIG_PATH)
    path = path.expanduser()

    values: dict[str, Any] = {}
    values.update(_coerce(_read_toml(path), source=str(path)))
    values.update(_coerce(_read_env(environ), source="environment"))
    return RainConfig(**values).validate()
