"""FastAPI server for destination weather lookups"""

from __future__ import annotations

import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tripweather.api.routes.health import router as health_router
from tripweather.api.routes.weather import router as weather_router
from tripweather.api.routes.weather import set_weather_service
from tripweather.config import API_HOST, API_PORT, APP_VERSION, is_development
from tripweather.observability.logging import get_logger
from tripweather.observability.telemetry import log_event
from tripweather.weather.service import create_weather_service

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

app = FastAPI(title="tripweather API", version=APP_VERSION)

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("TRIPWEATHER_CORS_ORIGINS", "").split(",")
    if origin.strip()
]

# Allow the local booking frontend in development only
if is_development():
    ALLOWED_ORIGINS.extend(["http://localhost:3000", "http://localhost:3001"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)

# Built once per process; missing store config leaves it disabled, not broken
weather_service = create_weather_service()
if weather_service.enabled:
    logger.info("Weather service enabled (%s)", weather_service.describe()["bucket"])
else:
    logger.warning("Weather service disabled: %s", weather_service.disabled_reason)

set_weather_service(weather_service)

app.include_router(health_router)
app.include_router(weather_router)

log_event("api.startup", service="tripweather", version=APP_VERSION)


def main() -> None:
    uvicorn.run("tripweather.api.app:app", host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
