import pytest

from weatherapp.schemas.weather import Coordinate
from weatherapp.services.location import (
    DEFAULT_FALLBACK_COORDINATE,
    LocationResolver,
    PermissionStatus,
    ReportedLocationProvider,
    ResolverState,
)
from tests.fakes import FakeLocationProvider

OSLO = Coordinate(latitude=59.9139, longitude=10.7522)


def test_fallback_is_taipei():
    assert DEFAULT_FALLBACK_COORDINATE == Coordinate(latitude=25.0330, longitude=121.5654)


@pytest.mark.asyncio
async def test_denied_permission_resolves_to_fallback():
    provider = FakeLocationProvider(status=PermissionStatus.DENIED, coordinate=OSLO)
    resolver = LocationResolver(provider)

    coordinate = await resolver.resolve()

    assert coordinate == DEFAULT_FALLBACK_COORDINATE
    assert resolver.state == ResolverState.DENIED_FALLBACK
    assert resolver.is_fallback
    assert provider.location_requests == 0


@pytest.mark.asyncio
async def test_restricted_permission_resolves_to_fallback():
    resolver = LocationResolver(FakeLocationProvider(status=PermissionStatus.RESTRICTED))
    assert await resolver.resolve() == DEFAULT_FALLBACK_COORDINATE


@pytest.mark.asyncio
async def test_granted_permission_uses_fix():
    provider = FakeLocationProvider(status=PermissionStatus.AUTHORIZED_WHEN_IN_USE, coordinate=OSLO)
    resolver = LocationResolver(provider)

    assert await resolver.resolve() == OSLO
    assert resolver.state == ResolverState.RESOLVED
    assert not resolver.is_fallback
    assert provider.permission_requests == 0


@pytest.mark.asyncio
async def test_first_use_requests_permission():
    provider = FakeLocationProvider(after_prompt=PermissionStatus.AUTHORIZED_ALWAYS, coordinate=OSLO)
    resolver = LocationResolver(provider)
    assert resolver.state == ResolverState.UNRESOLVED

    assert await resolver.resolve() == OSLO
    assert provider.permission_requests == 1


@pytest.mark.asyncio
async def test_prompt_denied_uses_fallback():
    provider = FakeLocationProvider(after_prompt=PermissionStatus.DENIED)
    resolver = LocationResolver(provider)
    assert await resolver.resolve() == DEFAULT_FALLBACK_COORDINATE
    assert resolver.state == ResolverState.DENIED_FALLBACK


@pytest.mark.asyncio
async def test_failed_fix_uses_fallback():
    provider = FakeLocationProvider(status=PermissionStatus.AUTHORIZED_WHEN_IN_USE, fail=True)
    resolver = LocationResolver(provider)
    assert await resolver.resolve() == DEFAULT_FALLBACK_COORDINATE
    assert resolver.is_fallback


@pytest.mark.asyncio
async def test_resolved_coordinate_is_not_re_requested():
    provider = FakeLocationProvider(status=PermissionStatus.AUTHORIZED_WHEN_IN_USE, coordinate=OSLO)
    resolver = LocationResolver(provider)
    notified = []

    async def listener(coordinate):
        notified.append(coordinate)

    resolver.subscribe(listener)
    await resolver.resolve()
    provider.status = PermissionStatus.DENIED
    assert await resolver.resolve() == OSLO

    assert provider.location_requests == 1
    assert notified == [OSLO]


@pytest.mark.asyncio
async def test_force_re_resolves_and_notifies():
    provider = FakeLocationProvider(status=PermissionStatus.AUTHORIZED_WHEN_IN_USE, coordinate=OSLO)
    resolver = LocationResolver(provider)
    notified = []

    async def listener(coordinate):
        notified.append(coordinate)

    unsubscribe = resolver.subscribe(listener)
    await resolver.resolve()
    provider.status = PermissionStatus.DENIED
    assert await resolver.resolve(force=True) == DEFAULT_FALLBACK_COORDINATE
    assert notified == [OSLO, DEFAULT_FALLBACK_COORDINATE]

    unsubscribe()
    await resolver.resolve(force=True)
    assert len(notified) == 2


@pytest.mark.asyncio
async def test_custom_fallback():
    fallback = Coordinate(latitude=1.0, longitude=2.0)
    resolver = LocationResolver(FakeLocationProvider(status=PermissionStatus.DENIED), fallback=fallback)
    assert await resolver.resolve() == fallback


@pytest.mark.asyncio
async def test_reported_provider():
    provider = ReportedLocationProvider()
    assert provider.authorization_status == PermissionStatus.NOT_DETERMINED

    provider.update(status=PermissionStatus.AUTHORIZED_WHEN_IN_USE, coordinate=OSLO)
    resolver = LocationResolver(provider)
    assert await resolver.resolve() == OSLO

    provider.update(status=PermissionStatus.AUTHORIZED_WHEN_IN_USE, failure="timeout")
    assert await resolver.resolve(force=True) == DEFAULT_FALLBACK_COORDINATE
