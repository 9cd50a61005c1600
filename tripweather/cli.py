"""
tripweather-check - smoke test the weather lookup against the live store

Usage:
    tripweather-check Dubai Mumbai DXB
    tripweather-check --connection-only

Looks each city up twice by default so the second call shows a cache hit.
Exit code is 1 when the store is unreachable or no city resolved.
"""

from __future__ import annotations

import argparse
import sys
import time

from dotenv import load_dotenv

from tripweather.observability.logging import configure_logging
from tripweather.weather.service import WeatherLookupService, create_weather_service

DEFAULT_CITIES = ["Dubai", "Mumbai", "Delhi", "New York"]


def _print_lookup(service: WeatherLookupService, city: str) -> bool:
    start = time.perf_counter()
    weather = service.get_weather_for_city(city)
    elapsed_ms = (time.perf_counter() - start) * 1000

    if weather is None:
        print(f"  ❌ {city}: no weather data ({elapsed_ms:.0f} ms)")
        return False

    print(f"  ✅ {city} -> {weather.city} ({elapsed_ms:.0f} ms)")
    print(
        f"     {weather.icon} {weather.weather}, "
        f"{weather.temperature_celsius}°C ({weather.temperature_fahrenheit}°F), "
        f"humidity {weather.humidity}%"
    )
    if weather.sunrise or weather.sunset:
        print(f"     sunrise {weather.sunrise or '-'}, sunset {weather.sunset or '-'}")
    return True


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Check weather store access and look up destination cities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "cities",
        nargs="*",
        help=f"Cities or airport codes to look up (default: {', '.join(DEFAULT_CITIES)})",
    )
    parser.add_argument(
        "--connection-only", action="store_true", help="Only test store connectivity"
    )
    parser.add_argument(
        "--no-repeat", action="store_true", help="Skip the second (cached) lookup"
    )
    parser.add_argument("--log-level", default=None, help="Override TRIPWEATHER_LOG_LEVEL")

    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(args.log_level)
    service = create_weather_service()

    if not service.enabled:
        print(f"⚠️  Weather service disabled: {service.disabled_reason}", file=sys.stderr)
        return 1

    print("1. Testing store connection...")
    if not service.check_connection():
        print("   ❌ Store connection failed", file=sys.stderr)
        return 1
    print("   ✅ Store connection successful")
    if args.connection_only:
        return 0

    cities = args.cities or DEFAULT_CITIES
    print("2. Looking up cities:")
    found = [city for city in cities if _print_lookup(service, city)]

    if found and not args.no_repeat:
        print("3. Repeating lookups (should be served from cache):")
        for city in found:
            _print_lookup(service, city)

    return 0 if found else 1


if __name__ == "__main__":
    sys.exit(main())
