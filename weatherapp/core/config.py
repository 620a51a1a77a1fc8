from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WEATHERAPP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = Field(default="INFO")

    # Data source: "mock" or "open_meteo"
    weather_source: str = Field(default="mock", min_length=1, max_length=32)
    mock_latency_seconds: float = Field(default=0.1, ge=0.0, le=10.0)
    open_meteo_url: str = Field(default=OPEN_METEO_URL)

    http_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)

    # Used whenever location permission is denied or the fix fails (Taipei).
    fallback_latitude: float = Field(default=25.0330, ge=-90, le=90)
    fallback_longitude: float = Field(default=121.5654, ge=-180, le=180)

    def model_post_init(self, __context: Any) -> None:
        # Allow WEATHERAPP_CORS_ORIGINS as JSON array or comma-separated string.
        raw_cors = getattr(self, "cors_origins", None)
        if isinstance(raw_cors, str):
            parsed = raw_cors.strip()
            if parsed.startswith("["):
                try:
                    self.cors_origins = [str(x).strip() for x in json.loads(parsed) if str(x).strip()]
                except ValueError:
                    self.cors_origins = [s.strip() for s in parsed.split(",") if s.strip()]
            else:
                self.cors_origins = [s.strip() for s in parsed.split(",") if s.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
