"""Normalization helpers turning raw provider values into display strings."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from typing import Any

from ..config import UnitSystem
from .conditions import describe_condition
from .models import DisplayForecastHour, DisplayWeather, ForecastEntry, NormalizedWeather

METRIC_WIND_LABELS = {
    "open_meteo": "km/h",
    "openweathermap": "m/s",
}
IMPERIAL_WIND_LABEL = "mph"


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (.5 goes towards +infinity)."""
    return math.floor(value + 0.5)


def as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def as_code(value: Any) -> int | str | None:
    """Condition code as reported, or None when it is not an int or string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, str)):
        return value
    return None


def format_temperature(value: float | None, round_temp: bool = True) -> str | None:
    """Whole degrees when rounding is enabled, else one decimal place."""
    if value is None:
        return None
    if round_temp:
        return str(round_half_up(value))
    return f"{value:.1f}"


def format_wind_speed(
    value: float | None,
    unit_system: UnitSystem,
    metric_label: str,
) -> str | None:
    if value is None:
        return None
    label = IMPERIAL_WIND_LABEL if unit_system == "imperial" else metric_label
    return f"{round_half_up(value)} {label}"


def format_humidity(value: float | None) -> str | None:
    if value is None:
        return None
    return f"{round_half_up(value)}%"


def offset_timezone(offset_seconds: Any) -> tzinfo:
    """Fixed-offset zone for a provider's UTC offset; UTC when absent."""
    if isinstance(offset_seconds, bool) or not isinstance(offset_seconds, (int, float)):
        return UTC
    return timezone(timedelta(seconds=int(offset_seconds)))


def to_instant(value: Any, tz: tzinfo = UTC) -> datetime | None:
    """Normalize an ISO-8601 string or epoch seconds to an aware datetime in `tz`.

    Naive ISO strings are interpreted as local time in `tz` (Open-Meteo returns
    them that way with `timezone=auto`). Anything unparseable yields None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=tz)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def format_clock(instant: datetime | None) -> str | None:
    """Local hour:minute of an instant, in the zone it carries."""
    if instant is None:
        return None
    return instant.strftime("%H:%M")


def select_upcoming(
    entries: Iterable[ForecastEntry],
    *,
    now: datetime,
    limit: int,
) -> list[ForecastEntry]:
    """Chronological, de-duplicated slice starting at the first entry after `now`.

    When no entry lies after `now` the slice starts at the earliest entry.
    """
    seen: set[datetime] = set()
    ordered: list[ForecastEntry] = []
    for entry in sorted(entries, key=lambda item: item.time):
        if entry.time in seen:
            continue
        seen.add(entry.time)
        ordered.append(entry)

    start = next((index for index, entry in enumerate(ordered) if entry.time > now), 0)
    return ordered[start : start + limit]


def build_display(weather: NormalizedWeather, *, round_temp: bool = True) -> DisplayWeather:
    """Format a normalized record for rendering.

    Fields missing from the record stay None so the presentation layer can
    omit the section instead of showing a misleading zero.
    """
    current = weather.current
    condition = describe_condition(weather.provider, current.condition_code, current.is_daytime)
    metric_label = METRIC_WIND_LABELS.get(weather.provider, "km/h")

    forecast = []
    for entry in weather.forecast:
        entry_condition = describe_condition(
            weather.provider, entry.condition_code, entry.is_daytime
        )
        forecast.append(
            DisplayForecastHour(
                time=format_clock(entry.time) or "",
                temperature=format_temperature(entry.temperature, round_temp),
                icon_id=entry_condition.icon_id,
                description=entry_condition.description,
            )
        )

    return DisplayWeather(
        icon_id=condition.icon_id,
        description=condition.description,
        location_name=current.location_name,
        temperature=format_temperature(current.temperature, round_temp),
        feels_like=format_temperature(current.feels_like, round_temp),
        humidity=format_humidity(current.humidity),
        wind=format_wind_speed(current.wind_speed, weather.unit_system, metric_label),
        sunrise=format_clock(weather.sun.sunrise) if weather.sun else None,
        sunset=format_clock(weather.sun.sunset) if weather.sun else None,
        forecast=forecast,
    )
