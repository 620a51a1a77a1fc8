from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from weatherapp.core.config import OPEN_METEO_URL
from weatherapp.core.errors import ApiError, InvalidData, InvalidReading, NetworkError, SourceUnavailable
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


WEATHER_CODE_TEXT = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def condition_for_code(code: int | None) -> WeatherCondition:
    if code is None:
        return WeatherCondition.OTHER
    if code in (0, 1):
        return WeatherCondition.SUNNY
    if code in (2, 3, 45, 48):
        return WeatherCondition.CLOUDY
    if 51 <= code <= 67 or 80 <= code <= 82:
        return WeatherCondition.RAINY
    if 71 <= code <= 77 or code in (85, 86):
        return WeatherCondition.SNOWY
    if code >= 95:
        return WeatherCondition.STORMY
    return WeatherCondition.OTHER


def _code(value: Any) -> int | None:
    return int(value) if value is not None else None


@register_source("open_meteo")
class OpenMeteoWeatherSource(WeatherSource):
    """Source backed by the public Open-Meteo forecast API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str = OPEN_METEO_URL,
    ) -> None:
        self._client = client
        self._base_url = base_url

    @classmethod
    def from_settings(cls, settings, *, client=None) -> "OpenMeteoWeatherSource":
        if client is None:
            raise SourceUnavailable("Weather service unavailable: no HTTP client configured")
        return cls(client, base_url=settings.open_meteo_url)

    async def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.get(self._base_url, params=params)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            logger.warning("Open-Meteo request failed: %s", type(exc).__name__)
            raise NetworkError() from exc

        if resp.status_code != 200:
            raise ApiError(f"upstream status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise InvalidData() from exc
        if not isinstance(data, dict):
            raise InvalidData()
        return data

    async def fetch_current(self, coordinate: Coordinate) -> WeatherReading:
        ensure_valid_coordinate(coordinate)
        data = await self._get(
            {
                "latitude": coordinate.latitude,
                "longitude": coordinate.longitude,
                "wind_speed_unit": "kmh",
                "current": ",".join(
                    [
                        "temperature_2m",
                        "relative_humidity_2m",
                        "weather_code",
                        "wind_speed_10m",
                    ]
                ),
            }
        )

        cur = data.get("current") or {}
        if not isinstance(cur, dict):
            raise InvalidData()
        try:
            code = _code(cur.get("weather_code"))
            return WeatherReading.create(
                temperature=float(cur["temperature_2m"]),
                condition=condition_for_code(code).value,
                humidity=float(cur["relative_humidity_2m"]) / 100,
                wind_speed=float(cur["wind_speed_10m"]),
                description=WEATHER_CODE_TEXT.get(code, "Unknown"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidData() from exc
        except InvalidReading as exc:
            logger.warning("Open-Meteo returned an invalid reading: %s", exc.reasons)
            raise InvalidData() from exc

    async def fetch_forecast(self, coordinate: Coordinate) -> list[ForecastDay]:
        ensure_valid_coordinate(coordinate)
        data = await self._get(
            {
                "latitude": coordinate.latitude,
                "longitude": coordinate.longitude,
                "timezone": "auto",
                "forecast_days": FORECAST_DAYS,
                "daily": "weather_code,temperature_2m_max,temperature_2m_min",
            }
        )

        daily = data.get("daily") or {}
        if not isinstance(daily, dict):
            raise InvalidData()
        try:
            dates = daily["time"]
            codes = daily["weather_code"]
            highs = daily["temperature_2m_max"]
            lows = daily["temperature_2m_min"]
            days: list[ForecastDay] = []
            for day, raw_code, high, low in zip(dates, codes, highs, lows):
                code = _code(raw_code)
                days.append(
                    ForecastDay(
                        date=date.fromisoformat(day),
                        condition=condition_for_code(code).value,
                        high_temperature=float(high),
                        low_temperature=float(low),
                        description=WEATHER_CODE_TEXT.get(code, "Unknown"),
                    )
                )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidData() from exc
        return days
