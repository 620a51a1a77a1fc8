from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Callable

from weatherapp.schemas.weather import (
    FORECAST_DAYS,
    Coordinate,
    ForecastDay,
    WeatherCondition,
    WeatherReading,
)
from weatherapp.services.weather.base import WeatherSource, ensure_valid_coordinate
from weatherapp.services.weather.registry import register_source

logger = logging.getLogger(__name__)


# (condition, high, low, description) for each day offset from today
_WEEK_PATTERN = [
    (WeatherCondition.SUNNY, 28.0, 18.0, "Clear skies"),
    (WeatherCondition.CLOUDY, 26.0, 16.0, "Cloudy"),
    (WeatherCondition.RAINY, 22.0, 12.0, "Light rain"),
    (WeatherCondition.SUNNY, 30.0, 20.0, "Sunny"),
    (WeatherCondition.CLOUDY, 25.0, 15.0, "Partly cloudy"),
    (WeatherCondition.SUNNY, 27.0, 17.0, "Clear skies"),
    (WeatherCondition.RAINY, 24.0, 14.0, "Showers"),
]


@register_source("mock")
class MockWeatherSource(WeatherSource):
    """Offline source returning canned data after a short simulated delay."""

    def __init__(
        self,
        *,
        latency_seconds: float = 0.1,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._latency_seconds = latency_seconds
        self._today = today

    @classmethod
    def from_settings(cls, settings, *, client=None) -> "MockWeatherSource":
        return cls(latency_seconds=settings.mock_latency_seconds)

    async def _simulate_latency(self) -> None:
        if self._latency_seconds > 0:
            await asyncio.sleep(self._latency_seconds)

    async def fetch_current(self, coordinate: Coordinate) -> WeatherReading:
        ensure_valid_coordinate(coordinate)
        await self._simulate_latency()
        logger.debug("Mock reading for %s,%s", coordinate.latitude, coordinate.longitude)
        return WeatherReading.create(
            temperature=22.5,
            condition=WeatherCondition.SUNNY.value,
            humidity=0.6,
            wind_speed=12.0,
            description="Clear and sunny",
        )

    async def fetch_forecast(self, coordinate: Coordinate) -> list[ForecastDay]:
        ensure_valid_coordinate(coordinate)
        await self._simulate_latency()
        start = self._today()
        return [
            ForecastDay(
                date=start + timedelta(days=offset),
                condition=condition.value,
                high_temperature=high,
                low_temperature=low,
                description=description,
            )
            for offset, (condition, high, low, description) in enumerate(_WEEK_PATTERN[:FORECAST_DAYS])
        ]
