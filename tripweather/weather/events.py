"""
Weather payload extraction from tracking events.

Two event shapes reach the store and neither is canonical:

    PayloadEvent   {"data": {"payload": {"city": ..., "temperature": ..., ...}}}
    XdmEvent       {"data": {"xdm": {"customFields": {"weather": {...}},
                                     "weather": {...},
                                     "placeContext": {"geoCity": ...}}}}

``parse_event`` decides the variant once; each variant has its own extractor.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from tripweather.observability.logging import get_logger
from tripweather.weather.cities import CityNameResolver
from tripweather.weather.errors import DataFormatError
from tripweather.weather.types import CandidateWeatherPayload

logger = get_logger(__name__)


@dataclass(frozen=True)
class PayloadEvent:
    payload: dict[str, Any]


@dataclass(frozen=True)
class XdmEvent:
    xdm: dict[str, Any]


RawWeatherEvent = PayloadEvent | XdmEvent


def _dig(source: Any, *path: str) -> Any:
    for part in path:
        if not isinstance(source, dict):
            return None
        source = source.get(part)
    return source


def _present(value: Any) -> bool:
    return value is not None and value != ""


def parse_event(raw: bytes | str) -> RawWeatherEvent:
    """
    Decode an object body and classify its schema variant.

    Raises:
        DataFormatError: Body is not JSON or matches neither variant
    """
    try:
        document = json.loads(raw)
    except ValueError as e:
        # JSONDecodeError, UnicodeDecodeError, and oversized integer literals
        raise DataFormatError(f"invalid JSON: {e}") from e

    data = _dig(document, "data")
    if not isinstance(data, dict):
        raise DataFormatError("event has no 'data' object")

    payload = data.get("payload")
    if isinstance(payload, dict) and _present(payload.get("city")):
        return PayloadEvent(payload=payload)

    xdm = data.get("xdm")
    if isinstance(xdm, dict):
        return XdmEvent(xdm=xdm)

    raise DataFormatError("event matches no known weather schema")


def _candidate(
    city: Any, measurement: dict[str, Any], source_key: str | None
) -> CandidateWeatherPayload:
    return CandidateWeatherPayload(
        city=city,
        temperature=measurement.get("temperature"),
        humidity=measurement.get("humidity"),
        weather=measurement.get("weather"),
        sunrise=measurement.get("sunrise"),
        sunset=measurement.get("sunset"),
        timestamp=measurement.get("timestamp"),
        source_key=source_key,
    )


def extract_from_payload(
    event: PayloadEvent, source_key: str | None = None
) -> CandidateWeatherPayload:
    return _candidate(event.payload["city"], event.payload, source_key)


def extract_from_xdm(event: XdmEvent, source_key: str | None = None) -> CandidateWeatherPayload:
    """
    City is looked up at customFields.weather.city, weather.city, then
    placeContext.geoCity; measurements at customFields.weather, then weather.

    Raises:
        DataFormatError: No city or no measurement object
    """
    xdm = event.xdm
    city = next(
        (
            value
            for value in (
                _dig(xdm, "customFields", "weather", "city"),
                _dig(xdm, "weather", "city"),
                _dig(xdm, "placeContext", "geoCity"),
            )
            if _present(value)
        ),
        None,
    )
    if city is None:
        raise DataFormatError("xdm event carries no city")

    measurement = _dig(xdm, "customFields", "weather")
    if not isinstance(measurement, dict):
        measurement = _dig(xdm, "weather")
    if not isinstance(measurement, dict):
        raise DataFormatError("xdm event carries no weather object")

    return _candidate(measurement.get("city") or city, measurement, source_key)


class WeatherPayloadExtractor:
    """Turns raw object bytes into candidate weather payloads."""

    def __init__(self, resolver: CityNameResolver):
        self.resolver = resolver

    def extract(
        self, raw: bytes | str, source_key: str | None = None
    ) -> CandidateWeatherPayload | None:
        """Candidate payload, or None for malformed or non-weather objects."""
        try:
            event = parse_event(raw)
            if isinstance(event, PayloadEvent):
                return extract_from_payload(event, source_key)
            return extract_from_xdm(event, source_key)
        except DataFormatError as e:
            logger.debug("Skipping %s: %s", source_key or "object", e)
            return None

    def matches_target(self, candidate: CandidateWeatherPayload, target_city: str) -> bool:
        return self.resolver.match(candidate.city, target_city)
