from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from weatherapp.schemas.weather import Coordinate
from weatherapp.services.location import PermissionStatus, ResolverState


class LocationReport(BaseModel):
    """What the client's location service reported."""

    permission: PermissionStatus
    latitude: float | None = Field(None, description="Fix latitude, when one was obtained.")
    longitude: float | None = Field(None, description="Fix longitude, when one was obtained.")
    failure: str | None = Field(None, max_length=200, description="Why the fix failed, if it did.")

    @model_validator(mode="after")
    def _validate_pair(self) -> "LocationReport":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self

    @property
    def coordinate(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class LocationResolution(BaseModel):
    state: ResolverState
    coordinate: Coordinate
    is_fallback: bool
