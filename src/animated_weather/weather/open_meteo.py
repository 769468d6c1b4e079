"""Open-Meteo (api.open-meteo.com) weather provider implementation."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from ..exceptions import ParseFailure
from .base import WeatherProvider
from .conditions import is_daytime_hour
from .fetch import fetch_json
from .formatting import as_code, as_float, offset_timezone, select_upcoming, to_instant
from .models import CurrentConditions, FetchRequest, ForecastEntry, NormalizedWeather, SunTimes

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "weather_code",
    "wind_speed_10m",
    "is_day",
)
HOURLY_FIELDS = ("temperature_2m", "weather_code")
DAILY_FIELDS = ("sunrise", "sunset")
MIN_FORECAST_HORIZON_HOURS = 12


class OpenMeteoProvider(WeatherProvider):
    """Fetches current, hourly and daily sections from a single keyless endpoint."""

    provider_name = "open_meteo"
    metric_wind_label = "km/h"

    def build_params(self, request: FetchRequest) -> dict[str, Any]:
        params: dict[str, Any] = {
            "latitude": request.latitude,
            "longitude": request.longitude,
            "current": ",".join(CURRENT_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
            "forecast_days": 1,
            # One spare hour so the strip stays full after skipping past slots.
            "forecast_hours": max(MIN_FORECAST_HORIZON_HOURS, request.forecast_limit + 1),
        }
        if request.unit_system == "imperial":
            params["temperature_unit"] = "fahrenheit"
            params["wind_speed_unit"] = "mph"
        return params

    async def fetch(self, request: FetchRequest) -> NormalizedWeather:
        url = f"{self.settings.open_meteo_base_url.rstrip('/')}/v1/forecast"
        payload = await fetch_json(
            self._client,
            url,
            params=self.build_params(request),
            logger=self.logger,
            context="Open-Meteo forecast",
        )
        return self.normalize(payload, request)

    def normalize(self, payload: dict[str, Any], request: FetchRequest) -> NormalizedWeather:
        raw_current = payload.get("current")
        if not isinstance(raw_current, dict):
            raise ParseFailure("No weather data available")

        tz = offset_timezone(payload.get("utc_offset_seconds"))
        retrieved_at = self._clock()
        now = retrieved_at.astimezone(tz)
        hourly = payload.get("hourly")
        daily = payload.get("daily")

        entries = self._normalize_hourly(hourly, tz) if isinstance(hourly, dict) else []
        return NormalizedWeather(
            provider=self.provider_name,
            unit_system=request.unit_system,
            retrieval_timestamp=retrieved_at,
            current=self._normalize_current(raw_current, tz, now),
            sun=self._normalize_sun(daily, tz) if isinstance(daily, dict) else None,
            forecast=select_upcoming(entries, now=now, limit=request.forecast_limit),
        )

    @staticmethod
    def _normalize_current(
        current: dict[str, Any], tz: tzinfo, now: datetime
    ) -> CurrentConditions:
        observed_at = to_instant(current.get("time"), tz)
        is_day = current.get("is_day")
        if isinstance(is_day, (int, float)) and not isinstance(is_day, bool):
            is_daytime = is_day == 1
        else:
            is_daytime = is_daytime_hour(observed_at or now)

        return CurrentConditions(
            temperature=as_float(current.get("temperature_2m")),
            feels_like=as_float(current.get("apparent_temperature")),
            humidity=as_float(current.get("relative_humidity_2m")),
            wind_speed=as_float(current.get("wind_speed_10m")),
            condition_code=as_code(current.get("weather_code")),
            is_daytime=is_daytime,
            observed_at=observed_at,
        )

    @staticmethod
    def _normalize_sun(daily: dict[str, Any], tz: tzinfo) -> SunTimes | None:
        sunrise = to_instant(_first(daily.get("sunrise")), tz)
        sunset = to_instant(_first(daily.get("sunset")), tz)
        if sunrise is None or sunset is None:
            return None
        return SunTimes(sunrise=sunrise, sunset=sunset)

    @staticmethod
    def _normalize_hourly(hourly: dict[str, Any], tz: tzinfo) -> list[ForecastEntry]:
        times = hourly.get("time")
        if not isinstance(times, list):
            return []
        temperatures = hourly.get("temperature_2m")
        codes = hourly.get("weather_code")

        entries: list[ForecastEntry] = []
        for index, raw_time in enumerate(times):
            instant = to_instant(raw_time, tz)
            if instant is None:
                continue
            entries.append(
                ForecastEntry(
                    time=instant,
                    temperature=as_float(_at(temperatures, index)),
                    condition_code=as_code(_at(codes, index)),
                    is_daytime=is_daytime_hour(instant),
                )
            )
        return entries


def _first(values: Any) -> Any:
    return _at(values, 0)


def _at(values: Any, index: int) -> Any:
    if isinstance(values, list) and 0 <= index < len(values):
        return values[index]
    return None
