"""
Tests for the weather and health HTTP endpoints

Routers are mounted on a fresh FastAPI app with an injected service so the
tests never touch a real bucket.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.conftest import TODAY_PREFIX, at
from tests.fixtures.event_store import payload_event
from tripweather.api.routes import weather as weather_routes
from tripweather.api.routes.health import router as health_router
from tripweather.api.routes.weather import router as weather_router
from tripweather.api.routes.weather import set_weather_service
from tripweather.weather.service import WeatherLookupService


@pytest.fixture
def client(service):
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(weather_router)
    set_weather_service(service)
    yield TestClient(app)
    weather_routes._weather_service = None


def test_lookup_found(client, store):
    store.put_event(TODAY_PREFIX + "a.json", payload_event("Mumbai", 303, 64, "Clear"), at(9))

    response = client.get("/api/weather/Mumbai")

    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "Mumbai"
    assert body["weatherIncluded"] is True
    assert body["weather"]["temperatureCelsius"] == 29.9
    assert body["weather"]["temperatureFahrenheit"] == 85.7
    assert body["weather"]["icon"] == "☀️"


def test_lookup_miss_is_not_an_error(client):
    response = client.get("/api/weather/Atlantis")

    assert response.status_code == 200
    assert response.json() == {"city": "Atlantis", "weatherIncluded": False, "weather": None}


def test_cache_stats_and_clear(client, store):
    store.put_event(TODAY_PREFIX + "a.json", payload_event("Dubai", 308, 20, "Clear"), at(9))
    client.get("/api/weather/Dubai")

    stats = client.get("/api/weather/cache/stats").json()
    assert stats["total_entries"] == 1
    assert stats["active_entries"] == 1
    assert "dubai" in stats["age_ms"]

    assert client.delete("/api/weather/cache").json() == {"cleared": 1}
    assert client.get("/api/weather/cache/stats").json()["total_entries"] == 0


def test_health_reports_configuration(client):
    client.get("/api/weather/Atlantis")
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["weather"]["enabled"] is True
    assert body["weather"]["bucket"] == "test-bucket"
    assert body["weather"]["events_path"] == "events/"
    assert body["counters"]["weather.lookup.not_found"] == 1


def test_store_health(client, store):
    assert client.get("/health/store").json()["status"] == "healthy"

    store.failing_prefixes.add("events/")
    body = client.get("/health/store").json()
    assert body["status"] == "degraded"
    assert body["store"]["reachable"] is False


def test_disabled_service_reports_degraded(resolver):
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(weather_router)
    set_weather_service(WeatherLookupService(resolver, None, disabled_reason="No bucket configured"))
    try:
        client = TestClient(app)
        assert client.get("/api/weather/Dubai").json()["weatherIncluded"] is False
        assert client.get("/health/store").json()["status"] == "degraded"
        assert client.get("/health").json()["weather"]["disabled_reason"] == "No bucket configured"
    finally:
        weather_routes._weather_service = None


def test_uninitialized_service_returns_503():
    weather_routes._weather_service = None
    app = FastAPI()
    app.include_router(weather_router)

    response = TestClient(app).get("/api/weather/Dubai")
    assert response.status_code == 503
