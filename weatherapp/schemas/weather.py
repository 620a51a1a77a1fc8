from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from weatherapp.core.errors import InvalidReading


# Reserved value clients send when no real fix exists.
SENTINEL_COORDINATE = 999.0

MIN_TEMPERATURE_C = -50.0
MAX_TEMPERATURE_C = 60.0
MAX_WIND_SPEED_KPH = 200.0


class WeatherCondition(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"
    SNOWY = "snowy"
    WINDY = "windy"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: str) -> "WeatherCondition":
        key = label.strip().lower()
        return _CONDITION_ALIASES.get(key, cls.OTHER)


_CONDITION_ALIASES = {
    "sunny": WeatherCondition.SUNNY,
    "clear": WeatherCondition.SUNNY,
    "cloudy": WeatherCondition.CLOUDY,
    "overcast": WeatherCondition.CLOUDY,
    "rainy": WeatherCondition.RAINY,
    "rain": WeatherCondition.RAINY,
    "stormy": WeatherCondition.STORMY,
    "thunderstorm": WeatherCondition.STORMY,
    "snowy": WeatherCondition.SNOWY,
    "snow": WeatherCondition.SNOWY,
    "windy": WeatherCondition.WINDY,
}


class WeatherQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def reading_validation_errors(
    *, temperature: float, condition: str, humidity: float, wind_speed: float
) -> list[str]:
    errors: list[str] = []
    if not MIN_TEMPERATURE_C <= temperature <= MAX_TEMPERATURE_C:
        errors.append("Temperature out of range (-50°C to 60°C)")
    if not 0 <= humidity <= 1:
        errors.append("Humidity invalid (must be between 0 and 1)")
    if not 0 <= wind_speed <= MAX_WIND_SPEED_KPH:
        errors.append("Wind speed invalid (must be between 0 and 200 km/h)")
    if not condition:
        errors.append("Condition must not be empty")
    return errors


def rate_quality(*, temperature: float, humidity: float, wind_speed: float) -> WeatherQuality:
    comfortable = 18 <= temperature <= 26 and humidity <= 0.7
    if comfortable and wind_speed < 20:
        return WeatherQuality.EXCELLENT
    if 15 <= temperature <= 30 and humidity <= 0.8:
        return WeatherQuality.GOOD
    if 5 <= temperature <= 35:
        return WeatherQuality.FAIR
    return WeatherQuality.POOR


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        if self.latitude == SENTINEL_COORDINATE or self.longitude == SENTINEL_COORDINATE:
            return False
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180


class WeatherReading(BaseModel):
    """
    A single current-weather observation.

    Plain construction does not check ranges so that a bad value can still be
    inspected through ``validation_errors``. Sources build readings through
    ``create``, which refuses invalid data.
    """

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(..., description="Air temperature (C).")
    condition: str = Field(..., description="Condition tag, e.g. sunny or rainy.")
    humidity: float = Field(..., description="Relative humidity as a fraction (0-1).")
    wind_speed: float = Field(..., description="Wind speed (km/h).")
    description: str = Field("", description="Human-friendly condition.")

    @classmethod
    def create(
        cls,
        *,
        temperature: float,
        condition: str,
        humidity: float,
        wind_speed: float,
        description: str,
    ) -> "WeatherReading":
        reasons = reading_validation_errors(
            temperature=temperature,
            condition=condition,
            humidity=humidity,
            wind_speed=wind_speed,
        )
        if reasons:
            raise InvalidReading(reasons)
        return cls(
            temperature=temperature,
            condition=condition,
            humidity=humidity,
            wind_speed=wind_speed,
            description=description,
        )

    @property
    def validation_errors(self) -> list[str]:
        return reading_validation_errors(
            temperature=self.temperature,
            condition=self.condition,
            humidity=self.humidity,
            wind_speed=self.wind_speed,
        )

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    @property
    def condition_tag(self) -> WeatherCondition:
        return WeatherCondition.from_label(self.condition)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def temperature_fahrenheit(self) -> float:
        return self.temperature * 9 / 5 + 32

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_comfortable(self) -> bool:
        return 18 <= self.temperature <= 26 and self.humidity <= 0.7

    @computed_field  # type: ignore[prop-decorator]
    @property
    def quality(self) -> WeatherQuality:
        return rate_quality(
            temperature=self.temperature,
            humidity=self.humidity,
            wind_speed=self.wind_speed,
        )

    @property
    def temperature_display(self) -> str:
        return f"{self.temperature:.1f}°C"

    @property
    def temperature_fahrenheit_display(self) -> str:
        return f"{self.temperature_fahrenheit:.1f}°F"

    @property
    def humidity_display(self) -> str:
        return f"{self.humidity * 100:.0f}%"

    @property
    def wind_speed_display(self) -> str:
        return f"{self.wind_speed:.1f} km/h"


class ForecastDay(BaseModel):
    # low <= high is not enforced; sources are trusted on ordering of the pair.
    model_config = ConfigDict(frozen=True)

    date: date
    condition: str
    high_temperature: float
    low_temperature: float
    description: str = ""

    @property
    def day_name(self) -> str:
        return self.date.strftime("%A")

    @property
    def temperature_range(self) -> str:
        return f"{int(self.low_temperature)}° - {int(self.high_temperature)}°"


FORECAST_DAYS = 7


def forecast_shape_errors(days: list[ForecastDay]) -> list[str]:
    """Check a forecast is exactly seven consecutive, ascending days."""
    errors: list[str] = []
    if len(days) != FORECAST_DAYS:
        errors.append(f"Forecast must contain {FORECAST_DAYS} days, got {len(days)}")
    for prev, cur in zip(days, days[1:]):
        if (cur.date - prev.date).days != 1:
            errors.append(f"Forecast dates not consecutive: {prev.date} -> {cur.date}")
            break
    return errors


class CurrentWeatherStateResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: WeatherReading | None = None
    is_loading: bool = False
    error_message: str | None = None
    last_coordinate: Coordinate | None = None
    updated_at: datetime | None = None


class ForecastStateResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: list[ForecastDay] = Field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None
    last_coordinate: Coordinate | None = None
    updated_at: datetime | None = None


class WeatherStateResponse(BaseModel):
    current: CurrentWeatherStateResponse
    forecast: ForecastStateResponse
