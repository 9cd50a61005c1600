"""
Module: types
Purpose: Shared value types for the weather lookup pipeline.

Leaf module: scanner, events, validation, cache and service all import from
here, so it must not import any of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class AirportRecord:
    """One airport from the registry document."""

    code: str
    city: str
    country: str = ""


@dataclass(frozen=True)
class StoreObjectRef:
    """Listing entry for a stored event; bytes are fetched separately."""

    key: str
    last_modified: datetime | None = None


@dataclass(frozen=True)
class CandidateWeatherPayload:
    """Weather fields pulled out of an event, not yet validated.

    Values keep whatever JSON type the producer sent; the unit of
    ``temperature`` is unknown until the converter classifies it.
    """

    city: Any
    temperature: Any
    humidity: Any
    weather: Any
    sunrise: Any = None
    sunset: Any = None
    timestamp: Any = None
    source_key: str | None = None


class WeatherResult(BaseModel):
    """Formatted weather handed to the email renderer.

    Serialize with ``model_dump(by_alias=True)`` to get the camelCase keys the
    templates use (``temperatureCelsius``, ``temperatureFahrenheit``).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    city: str
    temperature_celsius: float
    temperature_fahrenheit: float
    humidity: int
    weather: str
    icon: str
    sunrise: str | None = None
    sunset: str | None = None
    timestamp: str
