"""
City name resolution for weather lookups.

Booking flows hand us airport codes ("DXB"), historical names ("Bangalore")
or free text ("new york"); tracking events carry whatever the producer wrote.
Both sides are normalized to a canonical city before comparing.

The alias table is built once from the airport registry document. If no
registry can be read the resolver still works from a small hardcoded table
covering the busiest routes, and the table records that it is a fallback.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from tripweather.observability.logging import get_logger
from tripweather.weather.types import AirportRecord

logger = get_logger(__name__)

AIRPORT_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")

# Historical renames and common short forms, not airport codes
HISTORICAL_CITY_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "Bengaluru": ("Bangalore",),
        "Mumbai": ("Bombay",),
        "Kolkata": ("Calcutta",),
        "Chennai": ("Madras",),
        "Thiruvananthapuram": ("Trivandrum",),
        "New York": ("NYC",),
        "Los Angeles": ("LA",),
    }
)

# Used only when no registry document can be loaded
FALLBACK_AIRPORT_TO_CITY: Mapping[str, str] = MappingProxyType(
    {
        "DEL": "Delhi",
        "BOM": "Mumbai",
        "BLR": "Bengaluru",
        "CCU": "Kolkata",
        "MAA": "Chennai",
        "HYD": "Hyderabad",
        "DXB": "Dubai",
        "BKK": "Bangkok",
    }
)


class AliasSource(str, Enum):
    LOADED = "loaded"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class AliasTable:
    """Immutable airport-code and alias lookups.

    ``source`` tells diagnostics whether the registry was read; lookups behave
    the same either way.
    """

    code_to_city: Mapping[str, str]
    aliases: Mapping[str, frozenset[str]]
    source: AliasSource
    registry_path: Path | None = None
    _historical_index: Mapping[str, str] = field(default_factory=dict, repr=False)
    _registry_index: Mapping[str, str] = field(default_factory=dict, repr=False)

    def city_for_code(self, code: str) -> str | None:
        return self.code_to_city.get(code)

    def canonical_for(self, name: str) -> str | None:
        """Canonical city for an alias or canonical name, case-insensitive."""
        key = name.lower()
        return self._historical_index.get(key) or self._registry_index.get(key)

    def __len__(self) -> int:
        return len(self.code_to_city)


def _index(aliases: Mapping[str, Iterable[str]]) -> dict[str, str]:
    index: dict[str, str] = {}
    for canonical, variants in aliases.items():
        for variant in variants:
            index.setdefault(variant.lower(), canonical)
        index.setdefault(canonical.lower(), canonical)
    return index


def build_alias_table(
    records: Iterable[AirportRecord],
    source: AliasSource = AliasSource.LOADED,
    registry_path: Path | None = None,
) -> AliasTable:
    """Fold airport records and the historical names into one table."""
    code_to_city: dict[str, str] = {}
    registry_aliases: dict[str, set[str]] = {}
    for record in records:
        code_to_city[record.code] = record.city
        registry_aliases.setdefault(record.city, set()).add(record.code)

    aliases: dict[str, set[str]] = {city: set(codes) for city, codes in registry_aliases.items()}
    for canonical, variants in HISTORICAL_CITY_ALIASES.items():
        aliases.setdefault(canonical, set()).update(variants)

    return AliasTable(
        code_to_city=MappingProxyType(code_to_city),
        aliases=MappingProxyType({city: frozenset(v) for city, v in aliases.items()}),
        source=source,
        registry_path=registry_path,
        _historical_index=MappingProxyType(_index(HISTORICAL_CITY_ALIASES)),
        _registry_index=MappingProxyType(_index(registry_aliases)),
    )


def fallback_alias_table() -> AliasTable:
    records = [AirportRecord(code=code, city=city) for code, city in FALLBACK_AIRPORT_TO_CITY.items()]
    return build_alias_table(records, source=AliasSource.FALLBACK)


def parse_airport_registry(document: Mapping[str, Any]) -> list[AirportRecord]:
    """
    Flatten ``{airports: [{city, country, airports: [{code, ...}]}]}``.

    Entries without a city or a 3-letter code are skipped.

    Raises:
        ValueError: If the document has no ``airports`` list.
    """
    cities = document.get("airports")
    if not isinstance(cities, list):
        raise ValueError("airport registry has no 'airports' list")

    records: list[AirportRecord] = []
    for city_entry in cities:
        if not isinstance(city_entry, dict):
            continue
        city = city_entry.get("city")
        if not isinstance(city, str) or not city.strip():
            continue
        country = city_entry.get("country") or ""
        for airport in city_entry.get("airports") or []:
            code = airport.get("code") if isinstance(airport, dict) else None
            if isinstance(code, str) and AIRPORT_CODE_PATTERN.match(code.strip().upper()):
                records.append(
                    AirportRecord(code=code.strip().upper(), city=city.strip(), country=str(country))
                )
    return records


def load_airport_records(
    paths: Iterable[Path],
) -> tuple[list[AirportRecord], Path | None]:
    """Read the first registry document that exists and parses."""
    for path in paths:
        if not path.is_file():
            continue
        try:
            with path.open(encoding="utf-8") as f:
                document = json.load(f)
            records = parse_airport_registry(document)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read airport registry %s: %s", path, exc)
            continue
        return records, path
    return [], None


def load_alias_table(paths: Iterable[Path]) -> AliasTable:
    """Build the alias table from the registry, or the fallback table."""
    records, path = load_airport_records(paths)
    if not records:
        logger.warning("Airport registry not found, using fallback city mappings")
        return fallback_alias_table()

    table = build_alias_table(records, source=AliasSource.LOADED, registry_path=path)
    logger.info("Loaded %d airport codes from %s", len(table), path)
    return table


class CityNameResolver:
    """Normalize city names and compare them."""

    def __init__(self, table: AliasTable):
        self.table = table

    def normalize(self, value: Any) -> str:
        """
        Canonical city name for an airport code, alias or free text.

        Examples:
        - "DXB" -> "Dubai" (registry code)
        - "bangalore" -> "Bengaluru" (historical alias)
        - "  san   josé " -> "San José" (title-cased)
        """
        if not isinstance(value, str):
            return ""
        trimmed = value.strip()
        if not trimmed:
            return ""

        is_code = AIRPORT_CODE_PATTERN.match(trimmed) is not None
        if is_code:
            city = self.table.city_for_code(trimmed)
            if city:
                return city

        # "NYC" looks like a code but is a historical alias
        canonical = self.table.canonical_for(trimmed)
        if canonical:
            return canonical
        if is_code:
            return trimmed

        return " ".join(word[:1].upper() + word[1:].lower() for word in trimmed.split())

    def match(self, a: Any, b: Any) -> bool:
        """
        True when both names resolve to the same city.

        Containment also counts ("New York" vs "New York City"). That is
        deliberately loose for noisy producer strings and can false-positive
        on short names.
        """
        left = self.normalize(a).lower()
        right = self.normalize(b).lower()
        if not left or not right:
            return False
        return left == right or left in right or right in left
