from __future__ import annotations

from fastapi import Request

from weatherapp.services.location import ReportedLocationProvider
from weatherapp.services.weather import WeatherCoordinator


def get_coordinator(request: Request) -> WeatherCoordinator:
    return request.app.state.weather


def get_location_provider(request: Request) -> ReportedLocationProvider:
    return request.app.state.location_provider
