from __future__ import annotations

# Import to register sources
from weatherapp.services.weather import mock, open_meteo  # noqa: F401
from weatherapp.services.weather.base import WeatherSource
from weatherapp.services.weather.coordinator import WeatherCoordinator
from weatherapp.services.weather.registry import build_source, list_available_sources, register_source
from weatherapp.services.weather.state import CurrentWeatherState, ForecastState

__all__ = [
    "WeatherSource",
    "WeatherCoordinator",
    "CurrentWeatherState",
    "ForecastState",
    "build_source",
    "list_available_sources",
    "register_source",
]
