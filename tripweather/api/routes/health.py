"""Health check endpoints for the weather API.

- /health - Service status and weather store configuration (no I/O)
- /health/store - Lists one key from the store to confirm access
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from tripweather.api.models import StoreHealthResponse
from tripweather.api.routes.weather import get_weather_service
from tripweather.config import APP_VERSION
from tripweather.observability.telemetry import get_counters

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint.

    Reports whether the weather store is configured and where the city alias
    table came from, plus the in-process weather counters. Does not call the
    store.
    """
    service = get_weather_service()
    return {
        "status": "healthy",
        "service": "tripweather",
        "version": APP_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "weather": service.describe(),
        "counters": get_counters("weather."),
    }


@router.get("/health/store", response_model=StoreHealthResponse)
def store_health() -> StoreHealthResponse:
    """Store connectivity check; "degraded" when the store is unreachable or disabled."""
    service = get_weather_service()
    reachable = service.check_connection()
    return StoreHealthResponse(
        status="healthy" if reachable else "degraded",
        store={"reachable": reachable, **service.describe()},
    )
