"""tripweather - destination weather for booking confirmation emails"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports so importing the package does not pull in boto3 / GCS clients
def __getattr__(name: str):
    if name in ("WeatherLookupService", "create_weather_service"):
        from tripweather.weather import service

        return getattr(service, name)

    if name == "WeatherResult":
        from tripweather.weather.types import WeatherResult

        return WeatherResult

    if name == "WeatherSettings":
        from tripweather.config import WeatherSettings

        return WeatherSettings

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "WeatherLookupService",
    "WeatherResult",
    "WeatherSettings",
    "create_weather_service",
]
