import asyncio
from datetime import date

import pytest

from weatherapp.core.errors import ApiError, InvalidLocation, NetworkError, SourceUnavailable
from weatherapp.schemas.weather import Coordinate
from weatherapp.services.location import LocationResolver, PermissionStatus
from weatherapp.services.weather import CurrentWeatherState, ForecastState, WeatherCoordinator
from weatherapp.services.weather.mock import MockWeatherSource
from tests.fakes import FakeLocationProvider, FakeWeatherSource, make_reading, make_week

TAIPEI = Coordinate(latitude=25.0330, longitude=121.5654)


@pytest.mark.asyncio
async def test_fetch_success_stores_reading_exactly():
    reading = make_reading(temperature=18.25, condition="rainy", humidity=0.42, wind_speed=33.3, description="Drizzle")
    state = CurrentWeatherState(FakeWeatherSource(reading=reading))

    await state.fetch(TAIPEI)

    assert state.is_loading is False
    assert state.error_message is None
    assert state.data == reading
    assert state.data.description == "Drizzle"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,message",
    [
        (NetworkError(), "Network connection problem"),
        (ApiError("quota exceeded"), "API error: quota exceeded"),
        (SourceUnavailable(), "Weather service unavailable"),
        (RuntimeError("boom"), "Unexpected error: RuntimeError"),
    ],
)
async def test_fetch_failure_clears_data_and_sets_message(error, message):
    source = FakeWeatherSource()
    state = CurrentWeatherState(source)
    await state.fetch(TAIPEI)
    assert state.data is not None

    source.error = error
    await state.fetch(TAIPEI)

    assert state.is_loading is False
    assert state.data is None
    assert state.error_message == message


@pytest.mark.asyncio
async def test_invalid_coordinate_becomes_error_message():
    state = CurrentWeatherState(MockWeatherSource(latency_seconds=0))
    await state.fetch(Coordinate(latitude=999, longitude=0))
    assert state.error_message == "Invalid location"
    assert state.data is None


@pytest.mark.asyncio
async def test_fetch_publishes_loading_then_result():
    state = CurrentWeatherState(FakeWeatherSource())
    snapshots = []
    state.subscribe(snapshots.append)

    await state.fetch(TAIPEI)

    assert [s.is_loading for s in snapshots] == [True, False]
    assert snapshots[0].error_message is None
    assert snapshots[-1].data == state.data


@pytest.mark.asyncio
async def test_fetch_clears_previous_error_while_loading():
    source = FakeWeatherSource(error=NetworkError())
    state = CurrentWeatherState(source)
    await state.fetch(TAIPEI)
    assert state.error_message

    source.error = None
    source.current_gate = asyncio.Event()
    task = asyncio.create_task(state.fetch(TAIPEI))
    await asyncio.sleep(0)
    assert state.is_loading
    assert state.error_message is None

    source.current_gate.set()
    await task
    assert not state.is_loading
    assert state.data is not None


@pytest.mark.asyncio
async def test_clear_error_leaves_data_and_loading():
    source = FakeWeatherSource(error=NetworkError())
    state = CurrentWeatherState(source)
    await state.fetch(TAIPEI)

    state.clear_error()

    assert state.error_message is None
    assert state.data is None
    assert state.is_loading is False


@pytest.mark.asyncio
async def test_refresh_without_coordinate_fails_locally():
    source = FakeWeatherSource()
    state = CurrentWeatherState(source)

    await state.refresh()

    assert state.error_message == InvalidLocation().message
    assert source.current_calls == []


@pytest.mark.asyncio
async def test_refresh_reuses_last_coordinate():
    source = FakeWeatherSource()
    state = CurrentWeatherState(source)
    await state.fetch(TAIPEI)
    await state.refresh()
    assert source.current_calls == [TAIPEI, TAIPEI]


@pytest.mark.asyncio
async def test_overlapping_fetches_last_completion_wins():
    first = make_reading(temperature=10.0)
    second = make_reading(temperature=20.0)
    source = FakeWeatherSource(reading=first)
    gate = asyncio.Event()
    source.current_gate = gate
    state = CurrentWeatherState(source)

    slow = asyncio.create_task(state.fetch(TAIPEI))
    await asyncio.sleep(0)
    assert state.is_loading

    source.current_gate = None
    source.reading = second
    await state.fetch(TAIPEI)
    assert state.data == second

    # The older fetch is not cancelled; when it completes it overwrites.
    source.reading = first
    gate.set()
    await slow
    assert state.data == first
    assert not state.is_loading


@pytest.mark.asyncio
async def test_forecast_success_is_seven_days_from_today():
    today = date(2024, 3, 1)
    state = ForecastState(MockWeatherSource(latency_seconds=0, today=lambda: today))

    await state.fetch(TAIPEI)

    days = state.data
    assert len(days) == 7
    assert days[0].date == today
    assert all((b.date - a.date).days == 1 for a, b in zip(days, days[1:]))
    assert state.error_message is None
    assert not state.is_loading


@pytest.mark.asyncio
async def test_forecast_with_wrong_shape_is_invalid_data():
    source = FakeWeatherSource(forecast=make_week(date(2024, 3, 1))[:5])
    state = ForecastState(source)

    await state.fetch(TAIPEI)

    assert state.data == []
    assert state.error_message == "Invalid weather data"


@pytest.mark.asyncio
async def test_forecast_failure_replaces_previous_week():
    source = FakeWeatherSource()
    state = ForecastState(source)
    await state.fetch(TAIPEI)
    assert len(state.data) == 7

    source.forecast_error = NetworkError()
    await state.fetch(TAIPEI)
    assert state.data == []
    assert state.error_message == "Network connection problem"


@pytest.mark.asyncio
async def test_dual_fetch_runs_concurrently_and_independently():
    source = FakeWeatherSource()
    source.forecast_gate = asyncio.Event()
    coordinator = WeatherCoordinator.for_source(source, LocationResolver(FakeLocationProvider()))

    task = asyncio.create_task(coordinator.fetch_all(TAIPEI))
    for _ in range(5):
        await asyncio.sleep(0)

    # Current finished while the forecast is still held open.
    assert coordinator.current.data is not None
    assert not coordinator.current.is_loading
    assert coordinator.forecast.is_loading

    source.forecast_gate.set()
    await task
    assert len(coordinator.forecast.data) == 7


@pytest.mark.asyncio
async def test_dual_fetch_one_failure_does_not_affect_other():
    source = FakeWeatherSource(forecast_error=ApiError("down"))
    coordinator = WeatherCoordinator.for_source(source, LocationResolver(FakeLocationProvider()))

    await coordinator.fetch_all(TAIPEI)

    assert coordinator.current.data is not None
    assert coordinator.current.error_message is None
    assert coordinator.forecast.error_message == "API error: down"


@pytest.mark.asyncio
async def test_attached_coordinator_fetches_on_resolution():
    source = FakeWeatherSource()
    resolver = LocationResolver(FakeLocationProvider(status=PermissionStatus.DENIED))
    coordinator = WeatherCoordinator.for_source(source, resolver)
    coordinator.attach()

    await resolver.resolve()

    assert source.current_calls == [TAIPEI]
    assert source.forecast_calls == [TAIPEI]
    snapshot = coordinator.snapshot()
    assert snapshot.current.data is not None
    assert len(snapshot.forecast.data) == 7


@pytest.mark.asyncio
async def test_refresh_all_resolves_when_no_coordinate():
    source = FakeWeatherSource()
    resolver = LocationResolver(FakeLocationProvider(status=PermissionStatus.RESTRICTED))
    coordinator = WeatherCoordinator.for_source(source, resolver)

    await coordinator.refresh_all()
    assert source.current_calls == [TAIPEI]

    await coordinator.refresh_all()
    assert len(source.current_calls) == 2


def test_fetch_state_base_cannot_be_instantiated():
    from weatherapp.services.weather.state import _FetchState

    with pytest.raises(TypeError):
        _FetchState(FakeWeatherSource())
