"""Response models for the weather API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tripweather.weather.types import WeatherResult


class WeatherLookupResponse(BaseModel):
    """Lookup outcome; ``weather`` is null when no observation was usable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    city: str
    weather_included: bool
    weather: WeatherResult | None = None


class CacheStatsResponse(BaseModel):
    ttl_ms: int
    total_entries: int
    active_entries: int
    expired_entries: int
    age_ms: dict[str, int] = Field(default_factory=dict)


class CacheClearedResponse(BaseModel):
    cleared: int


class StoreHealthResponse(BaseModel):
    status: str
    store: dict[str, Any]
