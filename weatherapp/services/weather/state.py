"""
Observable state holders for the UI layer.

Each holder owns its published fields and mutates them only from the event
loop it is awaited on. Every mutation is followed by a snapshot delivered to
subscribers. Overlapping fetches are neither merged nor cancelled: whichever
completes last writes the final state.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone as dt_timezone
from typing import Callable, Generic, TypeVar

from weatherapp.core.errors import InvalidData, InvalidLocation, WeatherError
from weatherapp.schemas.weather import (
    Coordinate,
    CurrentWeatherStateResponse,
    ForecastDay,
    ForecastStateResponse,
    WeatherReading,
    forecast_shape_errors,
)
from weatherapp.services.weather.base import WeatherSource

logger = logging.getLogger(__name__)

T = TypeVar("T")
S = TypeVar("S")


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, WeatherError):
        return exc.message
    return f"Unexpected error: {type(exc).__name__}"


class _FetchState(ABC, Generic[T, S]):
    def __init__(self, source: WeatherSource) -> None:
        self._source = source
        self._data: T | None = None
        self._is_loading = False
        self._error_message: str | None = None
        self._last_coordinate: Coordinate | None = None
        self._updated_at: datetime | None = None
        self._subscribers: list[Callable[[S], None]] = []

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def last_coordinate(self) -> Coordinate | None:
        return self._last_coordinate

    def subscribe(self, callback: Callable[[S], None]) -> Callable[[], None]:
        """Register ``callback`` for every published snapshot."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @abstractmethod
    def snapshot(self) -> S:
        pass

    def _publish(self) -> None:
        self._updated_at = datetime.now(dt_timezone.utc)
        snap = self.snapshot()
        for callback in list(self._subscribers):
            callback(snap)

    def _empty(self) -> T | None:
        return None

    @abstractmethod
    async def _load(self, coordinate: Coordinate) -> T:
        pass

    async def fetch(self, coordinate: Coordinate) -> None:
        self._last_coordinate = coordinate
        self._is_loading = True
        self._error_message = None
        self._publish()

        try:
            data = await self._load(coordinate)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s fetch failed: %s", type(self).__name__, describe_error(exc))
            self._data = self._empty()
            self._error_message = describe_error(exc)
        else:
            self._data = data
            self._error_message = None

        self._is_loading = False
        self._publish()

    async def refresh(self) -> None:
        if self._last_coordinate is None:
            self._error_message = InvalidLocation().message
            self._publish()
            return
        await self.fetch(self._last_coordinate)

    def clear_error(self) -> None:
        self._error_message = None
        self._publish()


class CurrentWeatherState(_FetchState[WeatherReading, CurrentWeatherStateResponse]):
    """Loading/data/error state for the current reading."""

    @property
    def data(self) -> WeatherReading | None:
        return self._data

    def snapshot(self) -> CurrentWeatherStateResponse:
        return CurrentWeatherStateResponse(
            data=self._data,
            is_loading=self._is_loading,
            error_message=self._error_message,
            last_coordinate=self._last_coordinate,
            updated_at=self._updated_at,
        )

    async def _load(self, coordinate: Coordinate) -> WeatherReading:
        return await self._source.fetch_current(coordinate)


class ForecastState(_FetchState[list[ForecastDay], ForecastStateResponse]):
    """Loading/data/error state for the seven-day forecast."""

    def __init__(self, source: WeatherSource) -> None:
        super().__init__(source)
        self._data = []

    @property
    def data(self) -> list[ForecastDay]:
        return list(self._data or [])

    def snapshot(self) -> ForecastStateResponse:
        return ForecastStateResponse(
            data=list(self._data or []),
            is_loading=self._is_loading,
            error_message=self._error_message,
            last_coordinate=self._last_coordinate,
            updated_at=self._updated_at,
        )

    def _empty(self) -> list[ForecastDay]:
        return []

    async def _load(self, coordinate: Coordinate) -> list[ForecastDay]:
        days = list(await self._source.fetch_forecast(coordinate))
        problems = forecast_shape_errors(days)
        if problems:
            logger.warning("Rejected forecast: %s", "; ".join(problems))
            raise InvalidData()
        return days
