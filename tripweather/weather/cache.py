"""
TTL cache of formatted weather results, keyed by sanitized city.

Entries are only removed when a read finds them stale; there is no sweeper.
A lock makes the map safe to share across request threads, but concurrent
misses for the same city are not coalesced: each runs its own scan and the
last ``put`` wins.
"""

from __future__ import annotations

import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tripweather.config import DEFAULT_CACHE_TTL_MS
from tripweather.observability.telemetry import counter
from tripweather.weather.types import WeatherResult

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def sanitize_city_key(city: Any) -> str:
    """``" New York "`` -> ``"new-york"``; empty string for non-strings."""
    if not isinstance(city, str):
        return ""
    return _NON_ALNUM.sub("-", city.strip().lower())


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(frozen=True)
class CacheEntry:
    data: WeatherResult
    stored_at: float


class WeatherCache:
    """In-memory weather results with a fixed time-to-live."""

    def __init__(
        self,
        ttl_ms: int = DEFAULT_CACHE_TTL_MS,
        clock: Callable[[], float] = _monotonic_ms,
    ):
        """
        Args:
            ttl_ms: Entry lifetime in milliseconds
            clock: Millisecond clock; tests inject a fake one
        """
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, city: str) -> WeatherResult | None:
        """
        Cached result if younger than the TTL.

        Side Effects:
            - Deletes the entry when it is stale
            - Increments weather.cache.hit / .miss / .expired counters
        """
        key = sanitize_city_key(city)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                counter("weather.cache.miss")
                return None
            if now - entry.stored_at >= self.ttl_ms:
                del self._entries[key]
                counter("weather.cache.expired")
                counter("weather.cache.miss")
                return None
        counter("weather.cache.hit")
        return entry.data

    def put(self, city: str, result: WeatherResult) -> None:
        key = sanitize_city_key(city)
        entry = CacheEntry(data=result, stored_at=self._clock())
        with self._lock:
            self._entries[key] = entry
        counter("weather.cache.write")

    def invalidate(self, city: str) -> None:
        with self._lock:
            self._entries.pop(sanitize_city_key(city), None)

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def stats(self) -> dict[str, Any]:
        """Entry counts and per-city age, for the debug endpoint."""
        now = self._clock()
        with self._lock:
            entries = dict(self._entries)

        ages = {key: now - entry.stored_at for key, entry in entries.items()}
        active = sum(1 for age in ages.values() if age < self.ttl_ms)
        return {
            "ttl_ms": self.ttl_ms,
            "total_entries": len(entries),
            "active_entries": active,
            "expired_entries": len(entries) - active,
            "age_ms": {key: int(age) for key, age in ages.items()},
        }
