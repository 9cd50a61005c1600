"""Presentation helpers for weather results: condition icons and local times."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from typing import Any

from tripweather.weather.validation import is_valid_unix_timestamp

DEFAULT_ICON = "🌤️"


def weather_icon(condition: Any) -> str:
    """
    Emoji for a free-text condition.

    Examples:
    - "Clear" / "Sunny" -> ☀️
    - "Scattered clouds" -> ⛅, "Overcast clouds" -> ☁️
    - "Thunderstorm with rain" -> ⛈️, "Light drizzle" -> 🌧️
    - "Snow" -> ❄️, "Fog" -> 🌫️, "Windy" -> 💨
    """
    if not isinstance(condition, str) or not condition:
        return DEFAULT_ICON

    text = condition.lower()
    if "clear" in text or "sunny" in text:
        return "☀️"
    if "cloud" in text:
        return "⛅" if "few" in text or "scattered" in text else "☁️"
    if "rain" in text or "drizzle" in text:
        return "⛈️" if "thunder" in text or "storm" in text else "🌧️"
    if "snow" in text:
        return "❄️"
    if "mist" in text or "fog" in text:
        return "🌫️"
    if "wind" in text:
        return "💨"
    return DEFAULT_ICON


def format_unix_time(timestamp: Any, tz: tzinfo = UTC) -> str | None:
    """``H:MM AM/PM`` for a plausible Unix timestamp, else None."""
    if not is_valid_unix_timestamp(timestamp):
        return None
    moment = datetime.fromtimestamp(timestamp, tz)
    hour = moment.hour % 12 or 12
    meridiem = "PM" if moment.hour >= 12 else "AM"
    return f"{hour}:{moment.minute:02d} {meridiem}"
