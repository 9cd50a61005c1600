"""
Weather Service - destination weather for booking emails

Resolves a destination city to the most recent matching weather observation
written to the event store by the ingestion pipeline, formats it for the
email templates and caches it for a few minutes.

Contract with the email flow: ``get_weather_for_city`` returns a
``WeatherResult`` or ``None`` and never raises. ``None`` means "render the
email without a weather section".

Lookup steps:
    cache -> list recent partitions -> per object, newest first:
    extract -> city match -> validate -> (first success) convert -> format -> cache
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tripweather.config import WeatherSettings
from tripweather.infrastructure.object_store import ObjectStore, create_object_store
from tripweather.observability.logging import get_logger
from tripweather.observability.telemetry import counter, log_event, time_block
from tripweather.weather.cache import WeatherCache
from tripweather.weather.cities import CityNameResolver, load_alias_table
from tripweather.weather.errors import ConfigurationError
from tripweather.weather.events import WeatherPayloadExtractor
from tripweather.weather.formatting import format_unix_time, weather_icon
from tripweather.weather.scanner import EventStoreScanner
from tripweather.weather.types import CandidateWeatherPayload, WeatherResult
from tripweather.weather.units import UnitConverter, round_half_up
from tripweather.weather.validation import WeatherDataValidator, is_valid_city

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class WeatherLookupService:
    """Cache-fronted weather lookup over the event store."""

    def __init__(
        self,
        resolver: CityNameResolver,
        scanner: EventStoreScanner | None,
        cache: WeatherCache | None = None,
        converter: UnitConverter | None = None,
        display_tz: tzinfo = UTC,
        clock: Callable[[], datetime] = _utc_now,
        disabled_reason: str | None = None,
    ):
        """
        Args:
            resolver: City normalization shared by extractor and matcher
            scanner: Event store access; None disables lookups
            cache: Result cache (a default 5-minute cache if omitted)
            converter: Temperature unit converter
            display_tz: Timezone for sunrise/sunset strings
            clock: Source of "now" for result timestamps
            disabled_reason: Why the scanner is missing, for health output
        """
        self.resolver = resolver
        self.scanner = scanner
        self.cache = cache or WeatherCache()
        self.converter = converter or UnitConverter()
        self.extractor = WeatherPayloadExtractor(resolver)
        self.validator = WeatherDataValidator(self.converter)
        self.display_tz = display_tz
        self._clock = clock
        self.disabled_reason = disabled_reason if scanner is None else None

    @property
    def enabled(self) -> bool:
        return self.scanner is not None

    def get_weather_for_city(self, city: Any) -> WeatherResult | None:
        """
        Get current weather for a destination city.

        Args:
            city: City name, alias or airport code (e.g. "Dubai", "Bombay", "DXB")

        Returns:
            Formatted WeatherResult, or None if no usable observation exists

        Side Effects:
            - Reads from and writes to the in-memory result cache
            - Lists and reads objects from the event store on a cache miss
            - Logs lookup outcome and increments weather.lookup.* counters
        """
        if not is_valid_city(city):
            counter("weather.lookup.invalid_input")
            return None

        cached = self.cache.get(city)
        if cached is not None:
            logger.debug("Weather cache HIT: %s", city)
            return cached
        logger.debug("Weather cache MISS: %s", city)

        if self.scanner is None:
            counter("weather.lookup.disabled")
            return None

        try:
            with time_block("weather.lookup.latency"):
                candidate = self.find_observation(city)
                result = self.build_result(candidate) if candidate else None
        except Exception as e:
            counter("weather.lookup.error")
            logger.exception("Weather lookup failed for %s: %s", city, e)
            return None

        if result is None:
            counter("weather.lookup.not_found")
            logger.info("Weather fetch FAILED: %s", city)
            return None

        self.cache.put(city, result)
        counter("weather.lookup.success")
        log_event(
            "weather.lookup.success",
            city=city,
            temperature_celsius=result.temperature_celsius,
            condition=result.weather,
            humidity=result.humidity,
        )
        return result

    def find_observation(self, city: str) -> CandidateWeatherPayload | None:
        """
        Newest validated payload whose city matches ``city``.

        Objects that cannot be read, parsed, matched or validated are skipped;
        the first one to pass every check ends the scan.
        """
        if self.scanner is None:
            return None
        target = self.resolver.normalize(city)
        refs = self.scanner.list_recent()
        logger.debug("Scanning %d objects for %s", len(refs), target)

        for ref in refs:
            raw = self.scanner.fetch(ref)
            if raw is None:
                continue
            try:
                validated = self._inspect(raw, ref.key, target)
            except Exception as e:
                counter("weather.scan.object_error")
                logger.warning("Skipping %s after unexpected error: %s", ref.key, e)
                continue
            if validated is not None:
                logger.debug("Matched %s in %s", target, ref.key)
                return validated
        return None

    def _inspect(self, raw: bytes, key: str, target: str) -> CandidateWeatherPayload | None:
        """Extract, match and validate one object; None when it is not a usable match."""
        candidate = self.extractor.extract(raw, source_key=key)
        if candidate is None or not self.extractor.matches_target(candidate, target):
            return None
        validated = self.validator.validate(candidate)
        if validated is None:
            counter("weather.scan.rejected")
        return validated

    def build_result(self, candidate: CandidateWeatherPayload) -> WeatherResult | None:
        celsius = self.converter.to_celsius(candidate.temperature)
        fahrenheit = self.converter.to_fahrenheit(candidate.temperature)
        if celsius is None or fahrenheit is None:
            return None

        timestamp = candidate.timestamp
        if not isinstance(timestamp, str) or not timestamp:
            timestamp = self._clock().isoformat()

        return WeatherResult(
            city=candidate.city,
            temperature_celsius=celsius,
            temperature_fahrenheit=fahrenheit,
            humidity=int(round_half_up(candidate.humidity, 0)),
            weather=candidate.weather,
            icon=weather_icon(candidate.weather),
            sunrise=format_unix_time(candidate.sunrise, self.display_tz) if candidate.sunrise else None,
            sunset=format_unix_time(candidate.sunset, self.display_tz) if candidate.sunset else None,
            timestamp=timestamp,
        )

    def weather_context(self, city: Any, airport_code: str | None = None) -> dict[str, Any]:
        """
        Weather block for an email template.

        Tries the city first, then the airport code.

        Returns:
            {"weatherIncluded": bool, "weather": camelCase WeatherResult or None}
        """
        result = self.get_weather_for_city(city)
        if result is None and airport_code:
            result = self.get_weather_for_city(airport_code)
        return {
            "weatherIncluded": result is not None,
            "weather": result.model_dump(by_alias=True) if result else None,
        }

    def check_connection(self) -> bool:
        if self.scanner is None:
            return False
        return self.scanner.check_connection()

    def describe(self) -> dict[str, Any]:
        """Configuration summary for health checks (no credentials)."""
        table = self.resolver.table
        return {
            "enabled": self.enabled,
            "disabled_reason": self.disabled_reason,
            "bucket": self.scanner.store.bucket_name if self.scanner else None,
            "events_path": self.scanner.events_path if self.scanner else None,
            "scan_budget": self.scanner.scan_budget if self.scanner else None,
            "cache_ttl_ms": self.cache.ttl_ms,
            "alias_source": table.source.value,
            "airport_codes": len(table),
        }


def _resolve_tz(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown display timezone %r, using UTC", name)
        return UTC


def create_weather_service(
    settings: WeatherSettings | None = None,
    store: ObjectStore | None = None,
) -> WeatherLookupService:
    """
    Build the weather service from settings.

    Missing store configuration disables the feature (lookups return None)
    instead of failing the caller.

    Args:
        settings: Settings snapshot (read from the environment if omitted)
        store: Pre-built store; skips backend construction when given
    """
    settings = settings or WeatherSettings.from_env()
    resolver = CityNameResolver(load_alias_table(settings.airport_paths))
    cache = WeatherCache(ttl_ms=settings.cache_ttl_ms)

    scanner: EventStoreScanner | None = None
    disabled_reason: str | None = None
    try:
        store = store or create_object_store(settings)
        scanner = EventStoreScanner(
            store,
            events_path=settings.events_path,
            max_keys_per_partition=settings.max_keys_per_partition,
            scan_budget=settings.scan_budget,
        )
    except ConfigurationError as e:
        disabled_reason = str(e)
        logger.warning("Weather service disabled: %s", e)

    return WeatherLookupService(
        resolver,
        scanner,
        cache=cache,
        display_tz=_resolve_tz(settings.display_tz),
        disabled_reason=disabled_reason,
    )
