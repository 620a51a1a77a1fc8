from enum import Enum

from fastapi import APIRouter, Depends, Query

from weatherapp.api.v1.deps import get_coordinator
from weatherapp.schemas.weather import (
    CurrentWeatherStateResponse,
    ForecastStateResponse,
    WeatherStateResponse,
)
from weatherapp.services.weather import WeatherCoordinator


router = APIRouter()


class ClearTarget(str, Enum):
    CURRENT = "current"
    FORECAST = "forecast"
    ALL = "all"


@router.get("", response_model=WeatherStateResponse)
async def weather_state(coordinator: WeatherCoordinator = Depends(get_coordinator)):
    return coordinator.snapshot()


@router.get("/current", response_model=CurrentWeatherStateResponse)
async def current_weather(coordinator: WeatherCoordinator = Depends(get_coordinator)):
    return coordinator.current.snapshot()


@router.get("/forecast", response_model=ForecastStateResponse)
async def weekly_forecast(coordinator: WeatherCoordinator = Depends(get_coordinator)):
    return coordinator.forecast.snapshot()


@router.post("/refresh", response_model=WeatherStateResponse)
async def refresh_weather(coordinator: WeatherCoordinator = Depends(get_coordinator)):
    await coordinator.refresh_all()
    return coordinator.snapshot()


@router.post("/clear-error", response_model=WeatherStateResponse)
async def clear_error(
    target: ClearTarget = Query(ClearTarget.ALL),
    coordinator: WeatherCoordinator = Depends(get_coordinator),
):
    if target in (ClearTarget.CURRENT, ClearTarget.ALL):
        coordinator.current.clear_error()
    if target in (ClearTarget.FORECAST, ClearTarget.ALL):
        coordinator.forecast.clear_error()
    return coordinator.snapshot()
