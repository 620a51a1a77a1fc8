from fastapi import APIRouter, Depends

from weatherapp.api.v1.deps import get_coordinator, get_location_provider
from weatherapp.schemas.location import LocationReport, LocationResolution
from weatherapp.services.location import ReportedLocationProvider
from weatherapp.services.weather import WeatherCoordinator


router = APIRouter()


@router.post("", response_model=LocationResolution)
async def report_location(
    report: LocationReport,
    coordinator: WeatherCoordinator = Depends(get_coordinator),
    provider: ReportedLocationProvider = Depends(get_location_provider),
):
    provider.update(status=report.permission, coordinate=report.coordinate, failure=report.failure)
    # Resolving notifies the coordinator, which fetches current and forecast together.
    coordinate = await coordinator.resolver.resolve(force=True)
    return LocationResolution(
        state=coordinator.resolver.state,
        coordinate=coordinate,
        is_fallback=coordinator.resolver.is_fallback,
    )
