"""
Heuristic temperature unit detection.

Event producers do not tag the unit of ``temperature``. Earth-surface readings
fall in disjoint magnitude ranges per unit, so the unit is inferred from the
raw number:

    raw > 200          Kelvin
    50 <= raw <= 150   Fahrenheit
    -50 <= raw <= 60   Celsius (outside the Fahrenheit band)
    anything else      rejected, including the (150, 200] gap

A reading is only accepted when its Celsius value lands in [-50, 60].
These thresholds have not been confirmed against the producer; leave them
alone until upstream unit tagging is known.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

MIN_CELSIUS = -50.0
MAX_CELSIUS = 60.0
KELVIN_THRESHOLD = 200.0
FAHRENHEIT_MIN = 50.0
FAHRENHEIT_MAX = 150.0
KELVIN_OFFSET = 273.15


class TemperatureUnit(str, Enum):
    KELVIN = "K"
    FAHRENHEIT = "F"
    CELSIUS = "C"


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves away from the floor, e.g. 20.25 -> 20.3 (not banker's)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _as_number(raw: Any) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    try:
        value = float(raw)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


class UnitConverter:
    """Classify and convert untagged temperature readings."""

    def classify(self, raw: Any) -> TemperatureUnit | None:
        value = _as_number(raw)
        if value is None:
            return None
        if value > KELVIN_THRESHOLD:
            return TemperatureUnit.KELVIN
        if FAHRENHEIT_MIN <= value <= FAHRENHEIT_MAX:
            return TemperatureUnit.FAHRENHEIT
        if MIN_CELSIUS <= value <= MAX_CELSIUS:
            return TemperatureUnit.CELSIUS
        return None

    def to_celsius(self, raw: Any) -> float | None:
        """Celsius value rounded to one decimal, or None if implausible."""
        value = _as_number(raw)
        unit = self.classify(value)
        if value is None or unit is None:
            return None

        if unit is TemperatureUnit.KELVIN:
            celsius = value - KELVIN_OFFSET
        elif unit is TemperatureUnit.FAHRENHEIT:
            celsius = (value - 32) * 5 / 9
        else:
            celsius = value

        if not MIN_CELSIUS <= celsius <= MAX_CELSIUS:
            return None
        return round_half_up(celsius)

    def is_plausible_raw_temperature(self, raw: Any) -> bool:
        return self.to_celsius(raw) is not None

    def to_fahrenheit(self, raw: Any, hint: str = "auto") -> float | None:
        """
        Fahrenheit value rounded to one decimal.

        Args:
            raw: Reading in an unknown (``hint="auto"``) or known unit.
            hint: ``"auto"`` to classify by magnitude, or ``"K"``/``"F"``/``"C"``.

        Returns:
            The converted value, or None for non-numeric input, an unknown
            hint, or a reading that cannot be classified.
        """
        value = _as_number(raw)
        if value is None:
            return None

        if hint == "auto":
            unit = self.classify(value)
            if unit is None:
                return None
        else:
            try:
                unit = TemperatureUnit(hint.upper())
            except ValueError:
                return None

        if unit is TemperatureUnit.FAHRENHEIT:
            return round_half_up(value)
        celsius = value - KELVIN_OFFSET if unit is TemperatureUnit.KELVIN else value
        return round_half_up(celsius * 9 / 5 + 32)
