from __future__ import annotations

from weatherapp.schemas.weather import Coordinate, ForecastDay, WeatherReading

__all__ = ["Coordinate", "ForecastDay", "WeatherReading"]
