from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from weatherapp.core.errors import InvalidLocation
from weatherapp.schemas.weather import Coordinate, ForecastDay, WeatherReading

if TYPE_CHECKING:
    import httpx

    from weatherapp.core.config import Settings


class WeatherSource(ABC):
    """Abstract base class for weather data sources.

    Each call is a single attempt; retrying belongs to the caller.
    """

    source_name: str

    @abstractmethod
    async def fetch_current(self, coordinate: Coordinate) -> WeatherReading:
        """Fetch the current reading for a coordinate."""
        pass

    @abstractmethod
    async def fetch_forecast(self, coordinate: Coordinate) -> list[ForecastDay]:
        """Fetch seven days of forecast, today first."""
        pass

    @classmethod
    def from_settings(
        cls, settings: "Settings", *, client: "httpx.AsyncClient | None" = None
    ) -> "WeatherSource":
        return cls()


def ensure_valid_coordinate(coordinate: Coordinate) -> None:
    if not coordinate.is_valid:
        raise InvalidLocation()
