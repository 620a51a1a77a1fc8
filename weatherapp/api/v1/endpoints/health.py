from fastapi import APIRouter, Depends

from weatherapp.api.v1.deps import get_coordinator
from weatherapp.services.weather import WeatherCoordinator


router = APIRouter()


@router.get("/health", tags=["meta"])
async def health(coordinator: WeatherCoordinator = Depends(get_coordinator)):
    return {"status": "ok", "location": coordinator.resolver.state.value}
