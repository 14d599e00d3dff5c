# matrix_rain/errors.py
from __future__ import annotations


class MatrixRainError(Exception):
    """Base class for every error raised by matrix-rain."""


class FeedError(MatrixRainError):
    """The commit feed could not be fetched or returned garbage."""


class SurfaceError(MatrixRainError):
    """No usable drawing surface was supplied."""


class ConfigError(MatrixRainError):
    """A configuration value is missing or out of range."""
