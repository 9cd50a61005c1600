"""
Process-wide environment settings.

Weather lookup settings live in ``tripweather.config``; this module only holds
what the API process and CLI need before any service is built.
"""

from __future__ import annotations

import os
from pathlib import Path

PACKAGE_ROOT = Path(__file__).parent.parent
DATA_DIR = PACKAGE_ROOT / "data"

ENV = os.getenv("TRIPWEATHER_ENV", "development")

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))


def is_development() -> bool:
    """Check if running in development"""
    return ENV == "development"
