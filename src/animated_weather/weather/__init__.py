"""Weather provider integrations and normalization."""

from __future__ import annotations

import logging

import httpx

from ..config import ProviderName, Settings
from .base import WeatherProvider
from .conditions import Condition, describe_condition
from .formatting import build_display
from .models import (
    CurrentConditions,
    DisplayWeather,
    FetchRequest,
    ForecastEntry,
    NormalizedWeather,
    SunTimes,
)
from .open_meteo import OpenMeteoProvider
from .openweathermap import OpenWeatherMapProvider

PROVIDERS: dict[str, type[WeatherProvider]] = {
    "open_meteo": OpenMeteoProvider,
    "openweathermap": OpenWeatherMapProvider,
}


def create_provider(
    name: ProviderName,
    settings: Settings,
    logger: logging.Logger,
    *,
    client: httpx.AsyncClient | None = None,
) -> WeatherProvider:
    """Instantiate the provider registered under `name`."""
    try:
        provider_cls = PROVIDERS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown weather provider '{name}'.") from exc
    return provider_cls(settings, logger, client=client)


__all__ = [
    "Condition",
    "CurrentConditions",
    "DisplayWeather",
    "FetchRequest",
    "ForecastEntry",
    "NormalizedWeather",
    "OpenMeteoProvider",
    "OpenWeatherMapProvider",
    "PROVIDERS",
    "SunTimes",
    "WeatherProvider",
    "build_display",
    "create_provider",
    "describe_condition",
]
