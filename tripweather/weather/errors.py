"""
Error taxonomy for the weather lookup.

None of these escape ``WeatherLookupService.get_weather_for_city``; each one
is scoped to the smallest unit it concerns (process, partition, object,
candidate) and the lookup carries on or degrades to ``None``.
"""

from __future__ import annotations


class WeatherError(Exception):
    """Base class for weather lookup failures."""


class ConfigurationError(WeatherError):
    """Store bucket or credentials are missing; the feature stays disabled."""


class TransientIOError(WeatherError):
    """A listing or read against the object store failed."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class DataFormatError(WeatherError):
    """An object is not JSON, has an unknown schema, or carries no city."""


class WeatherValidationError(WeatherError, ValueError):
    """A candidate payload has a missing or out-of-range field."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason
