"""Tests for the TTL weather cache."""

from __future__ import annotations

import pytest

from tests.fixtures.event_store import FakeClock
from tripweather.observability.telemetry import get_counter
from tripweather.weather.cache import WeatherCache, sanitize_city_key
from tripweather.weather.types import WeatherResult


def make_result(city: str = "Dubai") -> WeatherResult:
    return WeatherResult(
        city=city,
        temperature_celsius=34.9,
        temperature_fahrenheit=94.7,
        humidity=40,
        weather="Clear",
        icon="☀️",
        timestamp="2025-03-07T12:00:00+00:00",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return WeatherCache(ttl_ms=1000, clock=clock)


@pytest.mark.parametrize(
    "city,key",
    [
        ("Dubai", "dubai"),
        (" New York ", "new-york"),
        ("St. Louis", "st--louis"),
        ("São Paulo", "s-o-paulo"),
        (None, ""),
    ],
)
def test_sanitize_city_key(city, key):
    assert sanitize_city_key(city) == key


def test_hit_within_ttl(cache, clock):
    result = make_result()
    cache.put("Dubai", result)
    clock.advance(999)
    assert cache.get("dubai") is result
    assert get_counter("weather.cache.hit") == 1


def test_entry_expires_at_ttl(cache, clock):
    cache.put("Dubai", make_result())
    clock.advance(1000)
    assert cache.get("Dubai") is None
    assert get_counter("weather.cache.expired") == 1
    assert cache.stats()["total_entries"] == 0


def test_miss_counted(cache):
    assert cache.get("Atlantis") is None
    assert get_counter("weather.cache.miss") == 1


def test_put_overwrites_and_restarts_ttl(cache, clock):
    cache.put("Dubai", make_result())
    clock.advance(800)
    newer = make_result()
    cache.put("DUBAI", newer)
    clock.advance(800)
    assert cache.get("Dubai") is newer


def test_invalidate_and_clear(cache):
    cache.put("Dubai", make_result())
    cache.put("Mumbai", make_result("Mumbai"))
    cache.invalidate(" dubai ")
    assert cache.get("Dubai") is None
    assert cache.clear() == 1
    assert cache.clear() == 0


def test_stats_reports_active_and_expired(cache, clock):
    cache.put("Dubai", make_result())
    clock.advance(600)
    cache.put("Mumbai", make_result("Mumbai"))
    clock.advance(500)

    stats = cache.stats()
    assert stats["ttl_ms"] == 1000
    assert stats["total_entries"] == 2
    assert stats["active_entries"] == 1
    assert stats["expired_entries"] == 1
    assert stats["age_ms"] == {"dubai": 1100, "mumbai": 500}
