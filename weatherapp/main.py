from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weatherapp.api.v1.router import api_v1_router
from weatherapp.core.config import Settings, get_settings
from weatherapp.core.http import create_http_client
from weatherapp.core.logging import configure_logging
from weatherapp.schemas.weather import Coordinate
from weatherapp.services.location import LocationResolver, ReportedLocationProvider
from weatherapp.services.weather import WeatherCoordinator, build_source

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        coordinator = getattr(app.state, "weather", None)
        if coordinator is not None:
            coordinator.detach()
        client = getattr(app.state, "http_client", None)
        if client is not None:
            await client.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="weather app api",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Only network-backed sources need an HTTP client.
    client = create_http_client(settings) if settings.weather_source != "mock" else None
    source = build_source(settings, client=client)

    provider = ReportedLocationProvider()
    resolver = LocationResolver(
        provider,
        fallback=Coordinate(latitude=settings.fallback_latitude, longitude=settings.fallback_longitude),
    )
    coordinator = WeatherCoordinator.for_source(source, resolver)
    coordinator.attach()

    app.state.settings = settings
    app.state.http_client = client
    app.state.location_provider = provider
    app.state.weather = coordinator
    logger.info("Weather app ready (source=%s)", source.source_name)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(api_v1_router, prefix="/api/v1")
    return app


app = create_app()
