"""OpenWeatherMap (api.openweathermap.org) weather provider implementation."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from ..exceptions import ConfigError
from .base import WeatherProvider
from .conditions import is_daytime_hour
from .fetch import fetch_json
from .formatting import as_float, as_str, offset_timezone, select_upcoming, to_instant
from .join import EndpointJoin
from .models import CurrentConditions, FetchRequest, ForecastEntry, NormalizedWeather, SunTimes

CURRENT_ENDPOINT = "current"
FORECAST_ENDPOINT = "forecast"


class OpenWeatherMapProvider(WeatherProvider):
    """Fetches the current-weather and forecast endpoints concurrently and merges them."""

    provider_name = "openweathermap"
    metric_wind_label = "m/s"

    def build_params(self, request: FetchRequest, *, forecast: bool = False) -> dict[str, Any]:
        if not request.api_key:
            raise ConfigError("An OpenWeatherMap API key is required for this provider.")
        params: dict[str, Any] = {
            "lat": request.latitude,
            "lon": request.longitude,
            "appid": request.api_key,
            "units": request.unit_system,
            "lang": request.language,
        }
        if forecast:
            # One spare slot so the strip stays full after skipping past slots.
            params["cnt"] = request.forecast_limit + 1
        return params

    async def fetch(self, request: FetchRequest) -> NormalizedWeather:
        current_params = self.build_params(request)
        forecast_params = self.build_params(request, forecast=True)
        base_url = self.settings.openweathermap_base_url.rstrip("/")

        join = EndpointJoin(primary=CURRENT_ENDPOINT, logger=self.logger)
        result = await join.run(
            {
                CURRENT_ENDPOINT: fetch_json(
                    self._client,
                    f"{base_url}/data/2.5/weather",
                    params=current_params,
                    logger=self.logger,
                    context="OpenWeatherMap current",
                ),
                FORECAST_ENDPOINT: fetch_json(
                    self._client,
                    f"{base_url}/data/2.5/forecast",
                    params=forecast_params,
                    logger=self.logger,
                    context="OpenWeatherMap forecast",
                ),
            }
        )
        return self.normalize(result.primary, result.secondary(FORECAST_ENDPOINT), request)

    def normalize(
        self,
        current_payload: dict[str, Any],
        forecast_payload: dict[str, Any] | None,
        request: FetchRequest,
    ) -> NormalizedWeather:
        """Merge the current record with the forecast list; a missing forecast yields []."""
        tz = offset_timezone(current_payload.get("timezone"))
        retrieved_at = self._clock()
        now = retrieved_at.astimezone(tz)
        sun = self._normalize_sun(current_payload.get("sys"), tz)

        entries: list[ForecastEntry] = []
        if forecast_payload is not None:
            entries = self._normalize_forecast(forecast_payload, tz)

        return NormalizedWeather(
            provider=self.provider_name,
            unit_system=request.unit_system,
            retrieval_timestamp=retrieved_at,
            current=self._normalize_current(current_payload, tz, now, sun),
            sun=sun,
            forecast=select_upcoming(entries, now=now, limit=request.forecast_limit),
        )

    @staticmethod
    def _normalize_current(
        payload: dict[str, Any],
        tz: tzinfo,
        now: datetime,
        sun: SunTimes | None,
    ) -> CurrentConditions:
        main = payload.get("main")
        main = main if isinstance(main, dict) else {}
        wind = payload.get("wind")
        wind = wind if isinstance(wind, dict) else {}
        icon = _icon_code(payload)
        observed_at = to_instant(payload.get("dt"), tz)

        is_daytime = _daytime_from_icon(icon)
        if is_daytime is None:
            reference = observed_at or now
            if sun is not None:
                is_daytime = sun.sunrise <= reference < sun.sunset
            else:
                is_daytime = is_daytime_hour(reference)

        return CurrentConditions(
            temperature=as_float(main.get("temp")),
            feels_like=as_float(main.get("feels_like")),
            humidity=as_float(main.get("humidity")),
            wind_speed=as_float(wind.get("speed")),
            condition_code=icon,
            is_daytime=is_daytime,
            location_name=as_str(payload.get("name")),
            observed_at=observed_at,
        )

    @staticmethod
    def _normalize_sun(sys_section: Any, tz: tzinfo) -> SunTimes | None:
        if not isinstance(sys_section, dict):
            return None
        sunrise = to_instant(sys_section.get("sunrise"), tz)
        sunset = to_instant(sys_section.get("sunset"), tz)
        if sunrise is None or sunset is None:
            return None
        return SunTimes(sunrise=sunrise, sunset=sunset)

    @staticmethod
    def _normalize_forecast(payload: dict[str, Any], fallback_tz: tzinfo) -> list[ForecastEntry]:
        items = payload.get("list")
        if not isinstance(items, list):
            return []
        city = payload.get("city")
        tz = fallback_tz
        if isinstance(city, dict) and city.get("timezone") is not None:
            tz = offset_timezone(city.get("timezone"))

        entries: list[ForecastEntry] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            instant = to_instant(item.get("dt"), tz)
            if instant is None:
                continue
            main = item.get("main")
            icon = _icon_code(item)
            is_daytime = _daytime_from_icon(icon)
            entries.append(
                ForecastEntry(
                    time=instant,
                    temperature=as_float(main.get("temp")) if isinstance(main, dict) else None,
                    condition_code=icon,
                    is_daytime=is_daytime if is_daytime is not None else is_daytime_hour(instant),
                )
            )
        return entries


def _icon_code(section: dict[str, Any]) -> str | None:
    weather = section.get("weather")
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        return as_str(weather[0].get("icon"))
    return None


def _daytime_from_icon(icon: str | None) -> bool | None:
    if icon is None:
        return None
    if icon.endswith("d"):
        return True
    if icon.endswith("n"):
        return False
    return None
