"""
Pytest configuration for tripweather tests

Provides fixtures for the alias table, a fake event store with today's and
yesterday's partitions, and a fully wired lookup service.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tests.fixtures.event_store import FakeClock, FakeObjectStore, fixed_utc
from tripweather.observability import telemetry
from tripweather.weather.cache import WeatherCache
from tripweather.weather.cities import AliasSource, CityNameResolver, build_alias_table
from tripweather.weather.scanner import EventStoreScanner
from tripweather.weather.service import WeatherLookupService
from tripweather.weather.types import AirportRecord

TODAY_PREFIX = "events/2025/03/07/"
YESTERDAY_PREFIX = "events/2025/03/06/"

SAMPLE_AIRPORTS = [
    AirportRecord(code="DXB", city="Dubai", country="United Arab Emirates"),
    AirportRecord(code="BOM", city="Mumbai", country="India"),
    AirportRecord(code="BLR", city="Bengaluru", country="India"),
    AirportRecord(code="DEL", city="Delhi", country="India"),
    AirportRecord(code="JFK", city="New York", country="United States"),
    AirportRecord(code="LGA", city="New York", country="United States"),
]


@pytest.fixture(autouse=True)
def reset_telemetry():
    """Counters are process-global; start every test from zero"""
    telemetry.reset()
    yield
    telemetry.reset()


@pytest.fixture
def alias_table():
    return build_alias_table(SAMPLE_AIRPORTS, source=AliasSource.LOADED)


@pytest.fixture
def resolver(alias_table):
    return CityNameResolver(alias_table)


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def now():
    return fixed_utc()


@pytest.fixture
def cache_clock():
    return FakeClock()


@pytest.fixture
def scanner(store, now):
    return EventStoreScanner(store, events_path="events/", clock=lambda: now)


@pytest.fixture
def service(resolver, scanner, cache_clock, now):
    return WeatherLookupService(
        resolver,
        scanner,
        cache=WeatherCache(ttl_ms=300_000, clock=cache_clock),
        clock=lambda: now,
    )


def at(hour: int, minute: int = 0, day: int = 7) -> datetime:
    """Last-modified timestamp on the fixed test date"""
    return datetime(2025, 3, day, hour, minute, tzinfo=UTC)
