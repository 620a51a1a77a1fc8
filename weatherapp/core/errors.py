from __future__ import annotations


class WeatherError(Exception):
    """Base class for failures that carry a user-displayable message."""

    message = "Weather error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class WeatherServiceError(WeatherError):
    """Failure raised by a weather source."""


class NetworkError(WeatherServiceError):
    message = "Network connection problem"


class InvalidLocation(WeatherServiceError):
    message = "Invalid location"


class ApiError(WeatherServiceError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"API error: {detail}")


class InvalidData(WeatherServiceError):
    message = "Invalid weather data"


class SourceUnavailable(WeatherServiceError):
    message = "Weather service unavailable"


class InvalidReading(WeatherError):
    """A reading failed validation; ``reasons`` lists every violated rule."""

    def __init__(self, reasons: list[str]) -> None:
        self.reasons = list(reasons)
        super().__init__(f"Data validation failed: {', '.join(self.reasons)}")
