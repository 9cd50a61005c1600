"""Weather lookup endpoints.

- GET /api/weather/cache/stats - Cache occupancy and entry ages
- DELETE /api/weather/cache - Drop every cached result
- GET /api/weather/{city} - Weather for a destination city or airport code
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException

from tripweather.api.models import CacheClearedResponse, CacheStatsResponse, WeatherLookupResponse
from tripweather.observability.telemetry import log_event

if TYPE_CHECKING:
    from tripweather.weather.service import WeatherLookupService

router = APIRouter(prefix="/api/weather", tags=["weather"])

# Module-level storage for the service injected at startup
_weather_service: WeatherLookupService | None = None


def set_weather_service(service: WeatherLookupService) -> None:
    """Inject the weather service dependency.

    Side Effects:
        - Sets module-level _weather_service variable
    """
    global _weather_service
    _weather_service = service


def get_weather_service() -> WeatherLookupService:
    if _weather_service is None:
        raise HTTPException(status_code=503, detail="Weather service not initialized")
    return _weather_service


# Declared before /{city} so "cache" is not taken for a city name
@router.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats() -> CacheStatsResponse:
    return CacheStatsResponse(**get_weather_service().cache.stats())


@router.delete("/cache", response_model=CacheClearedResponse)
def clear_cache() -> CacheClearedResponse:
    """Clear cached weather (useful for debugging stale results).

    Side Effects:
        - Clears the in-memory weather cache
        - Logs telemetry event with the cleared count
    """
    cleared = get_weather_service().cache.clear()
    log_event("weather.cache.cleared", count=cleared)
    return CacheClearedResponse(cleared=cleared)


@router.get("/{city}", response_model=WeatherLookupResponse)
def get_weather(city: str) -> WeatherLookupResponse:
    """Weather for a city; ``weather`` is null when nothing usable was found.

    A miss is not an error for the email flow, so this never returns 404.

    Side Effects:
        - May list and read objects from the event store
        - Writes to the weather cache on success
    """
    weather = get_weather_service().get_weather_for_city(city)
    return WeatherLookupResponse(city=city, weather_included=weather is not None, weather=weather)
