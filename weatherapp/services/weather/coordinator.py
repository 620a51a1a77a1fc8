from __future__ import annotations

import asyncio
import logging

from weatherapp.schemas.weather import Coordinate, WeatherStateResponse
from weatherapp.services.location import LocationResolver
from weatherapp.services.weather.base import WeatherSource
from weatherapp.services.weather.state import CurrentWeatherState, ForecastState

logger = logging.getLogger(__name__)


class WeatherCoordinator:
    """Runs both state holders against each newly available coordinate."""

    def __init__(
        self,
        *,
        resolver: LocationResolver,
        current: CurrentWeatherState,
        forecast: ForecastState,
    ) -> None:
        self.resolver = resolver
        self.current = current
        self.forecast = forecast
        self._unsubscribe = None

    @classmethod
    def for_source(cls, source: WeatherSource, resolver: LocationResolver) -> "WeatherCoordinator":
        return cls(
            resolver=resolver,
            current=CurrentWeatherState(source),
            forecast=ForecastState(source),
        )

    def attach(self) -> None:
        """Fetch both holders whenever the resolver yields a coordinate."""
        if self._unsubscribe is None:
            self._unsubscribe = self.resolver.subscribe(self.fetch_all)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def fetch_all(self, coordinate: Coordinate) -> None:
        logger.debug("Fetching weather for %s,%s", coordinate.latitude, coordinate.longitude)
        # Holders never raise, so one failing cannot cut the other short.
        await asyncio.gather(
            self.current.fetch(coordinate),
            self.forecast.fetch(coordinate),
        )

    async def refresh_all(self) -> None:
        coordinate = self.resolver.coordinate
        if coordinate is None:
            # Nothing resolved yet: resolving notifies us when attached.
            resolved = await self.resolver.resolve()
            if self._unsubscribe is None:
                await self.fetch_all(resolved)
            return
        await self.fetch_all(coordinate)

    def snapshot(self) -> WeatherStateResponse:
        return WeatherStateResponse(
            current=self.current.snapshot(),
            forecast=self.forecast.snapshot(),
        )
