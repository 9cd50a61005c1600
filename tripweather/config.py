"""Centralized configuration for the destination weather lookup.

Re-exports the process settings from ``tripweather.infrastructure.settings``
and adds the typed defaults and the ``WeatherSettings`` snapshot the service
factory is built from.  Every value has a safe default so the API starts with
the feature disabled rather than crashing when the store is not configured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from tripweather.infrastructure.settings import *  # noqa: F401, F403 (re-export)
from tripweather.infrastructure.settings import DATA_DIR

# --- App ---
APP_VERSION: str = "1.0.0"

# --- Object store ---
STORE_BACKEND_S3: str = "s3"
STORE_BACKEND_GCS: str = "gcs"
DEFAULT_EVENTS_PATH: str = "events/"
DEFAULT_AWS_REGION: str = "us-east-1"

# --- Scan budget ---
DEFAULT_SCAN_BUDGET: int = 50
DEFAULT_MAX_KEYS_PER_PARTITION: int = 200

# --- Cache ---
DEFAULT_CACHE_TTL_MS: int = 5 * 60 * 1000

# --- Formatting ---
DEFAULT_DISPLAY_TZ: str = "UTC"

BUNDLED_AIRPORTS_PATH: Path = DATA_DIR / "airports.json"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    # 0 and negatives mean "unset"
    return value if value > 0 else default


def default_airport_paths() -> tuple[Path, ...]:
    """Registry locations in the order they are tried."""
    paths: list[Path] = []
    override = os.getenv("TRIPWEATHER_AIRPORTS_PATH")
    if override:
        paths.append(Path(override))
    cwd = Path.cwd()
    paths.append(cwd / "data" / "airports.json")
    paths.append(cwd.parent / "data" / "airports.json")
    paths.append(BUNDLED_AIRPORTS_PATH)
    return tuple(paths)


@dataclass(frozen=True)
class WeatherSettings:
    """Snapshot of everything the weather service factory needs."""

    backend: str = STORE_BACKEND_S3
    bucket: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_region: str = DEFAULT_AWS_REGION
    endpoint_url: str | None = None
    gcp_project: str | None = None
    events_path: str = DEFAULT_EVENTS_PATH
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS
    scan_budget: int = DEFAULT_SCAN_BUDGET
    max_keys_per_partition: int = DEFAULT_MAX_KEYS_PER_PARTITION
    display_tz: str = DEFAULT_DISPLAY_TZ
    airport_paths: tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls) -> WeatherSettings:
        backend = os.getenv("TRIPWEATHER_STORE_BACKEND", STORE_BACKEND_S3).strip().lower()
        if backend == STORE_BACKEND_GCS:
            bucket = os.getenv("TRIPWEATHER_GCS_BUCKET")
        else:
            bucket = os.getenv("AWS_S3_BUCKET")

        events_path = os.getenv("AWS_S3_EVENTS_PATH", DEFAULT_EVENTS_PATH)
        if events_path and not events_path.endswith("/"):
            events_path = f"{events_path}/"

        return cls(
            backend=backend,
            bucket=bucket or None,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
            aws_region=os.getenv("AWS_REGION", DEFAULT_AWS_REGION),
            endpoint_url=os.getenv("AWS_S3_ENDPOINT_URL") or None,
            gcp_project=os.getenv("GCP_PROJECT") or None,
            events_path=events_path,
            cache_ttl_ms=_int_env("WEATHER_CACHE_DURATION", DEFAULT_CACHE_TTL_MS),
            scan_budget=_int_env("TRIPWEATHER_SCAN_BUDGET", DEFAULT_SCAN_BUDGET),
            max_keys_per_partition=_int_env(
                "TRIPWEATHER_MAX_KEYS_PER_PARTITION", DEFAULT_MAX_KEYS_PER_PARTITION
            ),
            display_tz=os.getenv("TRIPWEATHER_DISPLAY_TZ", DEFAULT_DISPLAY_TZ),
            airport_paths=default_airport_paths(),
        )
