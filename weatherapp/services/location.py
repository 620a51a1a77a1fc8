"""
Location resolution.

Turns the device's location permission into a coordinate. Denied or
restricted permission, and any failure of the location fix, resolve to a
fixed fallback coordinate instead of an error.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Awaitable, Callable

from weatherapp.schemas.weather import Coordinate

logger = logging.getLogger(__name__)


DEFAULT_FALLBACK_COORDINATE = Coordinate(latitude=25.0330, longitude=121.5654)


class PermissionStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS = "authorized_always"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def is_granted(self) -> bool:
        return self in (PermissionStatus.AUTHORIZED_WHEN_IN_USE, PermissionStatus.AUTHORIZED_ALWAYS)

    @property
    def is_refused(self) -> bool:
        return self in (PermissionStatus.DENIED, PermissionStatus.RESTRICTED)


class ResolverState(str, Enum):
    UNRESOLVED = "unresolved"
    AWAITING_PERMISSION = "awaiting_permission"
    RESOLVED = "resolved"
    DENIED_FALLBACK = "denied_fallback"


class LocationError(Exception):
    """Raised by a provider when a location fix cannot be obtained."""


class LocationProvider(ABC):
    """Device capability that reports permission and produces location fixes."""

    @property
    @abstractmethod
    def authorization_status(self) -> PermissionStatus:
        pass

    @abstractmethod
    async def request_permission(self) -> PermissionStatus:
        """Prompt for permission and return the resulting status."""
        pass

    @abstractmethod
    async def request_location(self) -> Coordinate:
        """Return a one-shot fix, raising LocationError on failure."""
        pass


class ReportedLocationProvider(LocationProvider):
    """Provider fed by a UI client that owns the real location service."""

    def __init__(
        self,
        *,
        status: PermissionStatus = PermissionStatus.NOT_DETERMINED,
        coordinate: Coordinate | None = None,
        failure: str | None = None,
    ) -> None:
        self._status = status
        self._coordinate = coordinate
        self._failure = failure

    def update(
        self,
        *,
        status: PermissionStatus,
        coordinate: Coordinate | None = None,
        failure: str | None = None,
    ) -> None:
        self._status = status
        self._coordinate = coordinate
        self._failure = failure

    @property
    def authorization_status(self) -> PermissionStatus:
        return self._status

    async def request_permission(self) -> PermissionStatus:
        # The client already asked the user; the reported status is the answer.
        return self._status

    async def request_location(self) -> Coordinate:
        if self._failure:
            raise LocationError(self._failure)
        if self._coordinate is None:
            raise LocationError("no location fix reported")
        return self._coordinate


CoordinateListener = Callable[[Coordinate], Awaitable[None]]


class LocationResolver:
    def __init__(
        self,
        provider: LocationProvider,
        *,
        fallback: Coordinate = DEFAULT_FALLBACK_COORDINATE,
    ) -> None:
        self._provider = provider
        self._fallback = fallback
        self._state = ResolverState.UNRESOLVED
        self._coordinate: Coordinate | None = None
        self._listeners: list[CoordinateListener] = []

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def coordinate(self) -> Coordinate | None:
        return self._coordinate

    @property
    def fallback(self) -> Coordinate:
        return self._fallback

    @property
    def is_fallback(self) -> bool:
        return self._coordinate is not None and self._coordinate == self._fallback

    def subscribe(self, listener: CoordinateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def resolve(self, *, force: bool = False) -> Coordinate:
        """
        Resolve a coordinate, notifying listeners when a new one is produced.

        Once resolved, later calls return the same coordinate without asking
        the provider again unless ``force`` is set.
        """
        if self._coordinate is not None and not force:
            return self._coordinate

        status = self._provider.authorization_status
        if status == PermissionStatus.NOT_DETERMINED:
            self._state = ResolverState.AWAITING_PERMISSION
            status = await self._provider.request_permission()

        if status.is_granted:
            try:
                coordinate = await self._provider.request_location()
            except Exception as exc:  # noqa: BLE001
                logger.info("Location fix failed (%s), using fallback", exc)
                coordinate = self._fallback
            self._state = ResolverState.RESOLVED
        else:
            if status.is_refused:
                logger.info("Location permission %s, using fallback", status.value)
            else:
                logger.info("Location permission still undetermined, using fallback")
            coordinate = self._fallback
            self._state = ResolverState.DENIED_FALLBACK

        self._coordinate = coordinate
        for listener in list(self._listeners):
            await listener(coordinate)
        return coordinate
