"""
Field validation for candidate weather payloads.

A payload that fails here is treated as "not a match" and the scan moves on;
nothing is raised past ``WeatherDataValidator.validate``.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from tripweather.weather.errors import WeatherValidationError
from tripweather.weather.types import CandidateWeatherPayload
from tripweather.weather.units import UnitConverter

MIN_HUMIDITY = 0
MAX_HUMIDITY = 100
MIN_TIMESTAMP_YEAR = 2000
MAX_TIMESTAMP_YEAR = 2100


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def is_valid_city(city: Any) -> bool:
    return isinstance(city, str) and bool(city.strip())


def is_valid_humidity(humidity: Any) -> bool:
    return _is_number(humidity) and MIN_HUMIDITY <= humidity <= MAX_HUMIDITY


def is_valid_unix_timestamp(timestamp: Any) -> bool:
    """Unix seconds that land between the years 2000 and 2100."""
    if not _is_number(timestamp):
        return False
    try:
        year = datetime.fromtimestamp(timestamp, UTC).year
    except (OverflowError, OSError, ValueError):
        return False
    return MIN_TIMESTAMP_YEAR <= year <= MAX_TIMESTAMP_YEAR


class WeatherDataValidator:
    """Checks presence, types and ranges of candidate fields."""

    def __init__(self, converter: UnitConverter | None = None):
        self.converter = converter or UnitConverter()

    def check(self, candidate: CandidateWeatherPayload) -> CandidateWeatherPayload:
        """
        Raises:
            WeatherValidationError: First failing field, with the reason
        """
        if not is_valid_city(candidate.city):
            raise WeatherValidationError("city", "missing or empty")

        if not _is_number(candidate.temperature):
            raise WeatherValidationError("temperature", "not a number")
        if not self.converter.is_plausible_raw_temperature(candidate.temperature):
            raise WeatherValidationError(
                "temperature", f"{candidate.temperature} is outside every known unit range"
            )

        if not _is_number(candidate.humidity):
            raise WeatherValidationError("humidity", "not a number")
        if not is_valid_humidity(candidate.humidity):
            raise WeatherValidationError("humidity", f"{candidate.humidity} is outside 0-100")

        if not isinstance(candidate.weather, str) or not candidate.weather.strip():
            raise WeatherValidationError("weather", "missing condition")

        return candidate

    def validate(self, candidate: CandidateWeatherPayload) -> CandidateWeatherPayload | None:
        """The candidate if every field is valid, otherwise None."""
        try:
            return self.check(candidate)
        except WeatherValidationError:
            return None
