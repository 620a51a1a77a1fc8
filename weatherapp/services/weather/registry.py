from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Type

from weatherapp.core.errors import SourceUnavailable

if TYPE_CHECKING:
    import httpx

    from weatherapp.core.config import Settings
    from weatherapp.services.weather.base import WeatherSource

# Registry mapping source names to source classes
_source_registry: dict[str, Type["WeatherSource"]] = {}


def register_source(source_name: str) -> Callable[[Type["WeatherSource"]], Type["WeatherSource"]]:
    """Decorator to register a weather source."""

    def decorator(cls: Type["WeatherSource"]) -> Type["WeatherSource"]:
        _source_registry[source_name] = cls
        cls.source_name = source_name
        return cls

    return decorator


def get_source_class(source_name: str) -> Type["WeatherSource"] | None:
    return _source_registry.get(source_name)


def list_available_sources() -> list[str]:
    return sorted(_source_registry)


def build_source(settings: "Settings", *, client: "httpx.AsyncClient | None" = None) -> "WeatherSource":
    """Instantiate the source named by ``settings.weather_source``."""
    cls = get_source_class(settings.weather_source)
    if cls is None:
        raise SourceUnavailable(f"Weather service unavailable: unknown source '{settings.weather_source}'")
    return cls.from_settings(settings, client=client)
