"""Condition-code lookup tables shared by the weather providers.

Both tables map a provider code onto the animated icon set used by the
widget (`icons/fill/<icon_id>.svg`) plus an English description. Lookups are
total: anything outside a table degrades to `UNKNOWN_CONDITION`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any

DAYTIME_START_HOUR = 6
DAYTIME_END_HOUR = 20


@dataclass(frozen=True, slots=True)
class Condition:
    """Provider-agnostic description and icon identifier."""

    description: str
    icon_id: str


UNKNOWN_CONDITION = Condition(description="Unknown", icon_id="not-available")

WMO_DESCRIPTIONS = MappingProxyType(
    {
        0: "Clear sky",
        1: "Mainly clear",
        2: "Partly cloudy",
        3: "Overcast",
        45: "Foggy",
        48: "Depositing rime fog",
        51: "Light drizzle",
        53: "Moderate drizzle",
        55: "Dense drizzle",
        61: "Slight rain",
        63: "Moderate rain",
        65: "Heavy rain",
        66: "Light freezing rain",
        67: "Heavy freezing rain",
        71: "Slight snow",
        73: "Moderate snow",
        75: "Heavy snow",
        77: "Snow grains",
        80: "Slight rain showers",
        81: "Moderate rain showers",
        82: "Violent rain showers",
        85: "Slight snow showers",
        86: "Heavy snow showers",
        95: "Thunderstorm",
        96: "Thunderstorm with slight hail",
        99: "Thunderstorm with heavy hail",
    }
)

# (day icon, night icon); codes without a day/night variant repeat the icon.
WMO_ICONS = MappingProxyType(
    {
        0: ("clear-day", "clear-night"),
        1: ("clear-day", "clear-night"),
        2: ("partly-cloudy-day", "partly-cloudy-night"),
        3: ("overcast-day", "overcast-night"),
        45: ("fog-day", "fog-night"),
        48: ("fog-day", "fog-night"),
        51: ("drizzle", "drizzle"),
        53: ("drizzle", "drizzle"),
        55: ("drizzle", "drizzle"),
        61: ("partly-cloudy-day-rain", "partly-cloudy-night-rain"),
        63: ("rain", "rain"),
        65: ("rain", "rain"),
        66: ("sleet", "sleet"),
        67: ("sleet", "sleet"),
        71: ("partly-cloudy-day-snow", "partly-cloudy-night-snow"),
        73: ("snow", "snow"),
        75: ("snow", "snow"),
        77: ("snow", "snow"),
        80: ("partly-cloudy-day-rain", "partly-cloudy-night-rain"),
        81: ("rain", "rain"),
        82: ("rain", "rain"),
        85: ("partly-cloudy-day-snow", "partly-cloudy-night-snow"),
        86: ("snow", "snow"),
        95: ("thunderstorms-day", "thunderstorms-night"),
        96: ("thunderstorms-day", "thunderstorms-night"),
        99: ("thunderstorms-day", "thunderstorms-night"),
    }
)

# OpenWeatherMap icon codes already carry the d/n suffix.
OWM_CONDITIONS = MappingProxyType(
    {
        "01d": Condition("Clear sky", "clear-day"),
        "01n": Condition("Clear sky", "clear-night"),
        "02d": Condition("Few clouds", "partly-cloudy-day"),
        "02n": Condition("Few clouds", "partly-cloudy-night"),
        "03d": Condition("Scattered clouds", "cloudy"),
        "03n": Condition("Scattered clouds", "cloudy"),
        "04d": Condition("Broken clouds", "overcast-day"),
        "04n": Condition("Broken clouds", "overcast-night"),
        "09d": Condition("Shower rain", "rain"),
        "09n": Condition("Shower rain", "rain"),
        "10d": Condition("Rain", "partly-cloudy-day-rain"),
        "10n": Condition("Rain", "partly-cloudy-night-rain"),
        "11d": Condition("Thunderstorm", "thunderstorms-day"),
        "11n": Condition("Thunderstorm", "thunderstorms-night"),
        "13d": Condition("Snow", "partly-cloudy-day-snow"),
        "13n": Condition("Snow", "partly-cloudy-night-snow"),
        "50d": Condition("Mist", "fog-day"),
        "50n": Condition("Mist", "fog-night"),
    }
)


def _as_wmo_code(code: Any) -> int | None:
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, float) and code.is_integer():
        return int(code)
    if isinstance(code, str) and code.strip().isdigit():
        return int(code.strip())
    return None


def describe_wmo(code: Any, is_daytime: bool) -> Condition:
    """Map an Open-Meteo WMO weather code to a condition."""
    wmo_code = _as_wmo_code(code)
    if wmo_code is None or wmo_code not in WMO_DESCRIPTIONS:
        return UNKNOWN_CONDITION
    day_icon, night_icon = WMO_ICONS[wmo_code]
    return Condition(
        description=WMO_DESCRIPTIONS[wmo_code],
        icon_id=day_icon if is_daytime else night_icon,
    )


def describe_owm(icon_code: Any, is_daytime: bool) -> Condition:
    """Map an OpenWeatherMap icon code; `is_daytime` is ignored."""
    del is_daytime
    if not isinstance(icon_code, str):
        return UNKNOWN_CONDITION
    return OWM_CONDITIONS.get(icon_code.strip().lower(), UNKNOWN_CONDITION)


_DESCRIBERS = MappingProxyType(
    {
        "open_meteo": describe_wmo,
        "openweathermap": describe_owm,
    }
)


def describe_condition(provider: str, code: Any, is_daytime: bool) -> Condition:
    """Dispatch to the provider's table; unknown providers get the default."""
    describer = _DESCRIBERS.get(provider)
    if describer is None:
        return UNKNOWN_CONDITION
    return describer(code, is_daytime)


def is_daytime_hour(instant: datetime) -> bool:
    """Rough day/night flag from the local hour (06:00 inclusive to 20:00 exclusive)."""
    return DAYTIME_START_HOUR <= instant.hour < DAYTIME_END_HOUR


def icon_filename(icon_id: str) -> str:
    return f"{icon_id}.svg"
