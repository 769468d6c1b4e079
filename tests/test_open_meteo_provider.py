"""Open-Meteo provider tests with mocked HTTP responses."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from animated_weather.config import Settings
from animated_weather.exceptions import HTTPStatusFailure, ParseFailure
from animated_weather.weather.formatting import build_display
from animated_weather.weather.models import FetchRequest, NormalizedWeather
from animated_weather.weather.open_meteo import OpenMeteoProvider

FIXED_NOW = datetime(2026, 10, 19, 10, 30, tzinfo=UTC)
LOGGER = logging.getLogger("test.open_meteo")

Handler = Callable[[httpx.Request], httpx.Response]


def _settings() -> Settings:
    return Settings(_env_file=None, OPEN_METEO_BASE_URL="https://open-meteo.test")


def _request(**overrides: Any) -> FetchRequest:
    values: dict[str, Any] = {"latitude": 51.48, "longitude": -3.18, "forecast_limit": 6}
    values.update(overrides)
    return FetchRequest(**values)


def _payload() -> dict[str, Any]:
    hours = [f"2026-10-19T{hour:02d}:00" for hour in range(11, 24)]
    return {
        "latitude": 51.48,
        "longitude": -3.18,
        "utc_offset_seconds": 7200,
        "timezone": "Europe/Berlin",
        "current": {
            "time": "2026-10-19T12:30",
            "temperature_2m": 21.37,
            "relative_humidity_2m": 64,
            "apparent_temperature": 20.8,
            "weather_code": 61,
            "wind_speed_10m": 12.6,
            "is_day": 1,
        },
        "hourly": {
            "time": hours,
            "temperature_2m": [10.0 + index for index in range(len(hours))],
            "weather_code": [3] * len(hours),
        },
        "daily": {
            "time": ["2026-10-19"],
            "sunrise": ["2026-10-19T07:41"],
            "sunset": ["2026-10-19T18:32"],
        },
    }


def _fetch(
    handler: Handler, request: FetchRequest | None = None
) -> tuple[NormalizedWeather, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording(incoming: httpx.Request) -> httpx.Response:
        seen.append(incoming)
        return handler(incoming)

    async def _run() -> NormalizedWeather:
        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        async with client:
            provider = OpenMeteoProvider(
                _settings(), LOGGER, client=client, clock=lambda: FIXED_NOW
            )
            return await provider.fetch(request or _request())

    return asyncio.run(_run()), seen


def _respond(payload: Any, status: int = 200) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return handler


def test_full_response_normalizes_every_section() -> None:
    weather, seen = _fetch(_respond(_payload()))

    assert len(seen) == 1
    assert seen[0].url.path == "/v1/forecast"
    assert weather.provider == "open_meteo"
    assert weather.retrieval_timestamp == FIXED_NOW

    current = weather.current
    assert current.temperature == 21.37
    assert current.feels_like == 20.8
    assert current.humidity == 64.0
    assert current.wind_speed == 12.6
    assert current.condition_code == 61
    assert current.is_daytime is True

    assert weather.sun is not None
    assert weather.sun.sunrise.utcoffset() == timedelta(hours=2)
    assert weather.sun.sunrise.strftime("%H:%M") == "07:41"

    # 10:30 UTC is 12:30 local, so the strip starts at 13:00 local.
    assert [entry.time.strftime("%H:%M") for entry in weather.forecast] == [
        "13:00",
        "14:00",
        "15:00",
        "16:00",
        "17:00",
        "18:00",
    ]
    assert weather.forecast[0].temperature == 12.0


def test_display_of_full_response() -> None:
    weather, _ = _fetch(_respond(_payload()))
    display = build_display(weather, round_temp=True)
    assert display.temperature == "21"
    assert display.description == "Slight rain"
    assert display.icon_id == "partly-cloudy-day-rain"
    assert display.wind == "13 km/h"
    assert display.sunrise == "07:41"
    assert display.sunset == "18:32"
    assert display.forecast[0].icon_id == "overcast-day"


def test_request_parameters_metric() -> None:
    _, seen = _fetch(_respond(_payload()))
    params = seen[0].url.params
    assert params["latitude"] == "51.48"
    assert params["longitude"] == "-3.18"
    assert params["timezone"] == "auto"
    assert "weather_code" in params["current"]
    assert params["daily"] == "sunrise,sunset"
    assert "temperature_unit" not in params
    assert "wind_speed_unit" not in params


def test_request_parameters_imperial() -> None:
    weather, seen = _fetch(_respond(_payload()), _request(unit_system="imperial"))
    params = seen[0].url.params
    assert params["temperature_unit"] == "fahrenheit"
    assert params["wind_speed_unit"] == "mph"
    assert build_display(weather).wind == "13 mph"


def test_forecast_horizon_covers_requested_limit() -> None:
    provider = OpenMeteoProvider(_settings(), LOGGER)
    assert provider.build_params(_request(forecast_limit=3))["forecast_hours"] == 12
    assert provider.build_params(_request(forecast_limit=24))["forecast_hours"] == 25
    asyncio.run(provider.aclose())


def test_missing_optional_sections_are_absent() -> None:
    payload = _payload()
    del payload["hourly"]
    del payload["daily"]
    del payload["current"]["relative_humidity_2m"]

    weather, _ = _fetch(_respond(payload))
    assert weather.sun is None
    assert weather.forecast == []
    assert weather.current.humidity is None

    display = build_display(weather)
    assert display.humidity is None
    assert display.sunrise is None


def test_missing_current_section_is_a_parse_failure() -> None:
    payload = _payload()
    del payload["current"]
    with pytest.raises(ParseFailure, match="No weather data available"):
        _fetch(_respond(payload))


def test_http_error_status_propagates() -> None:
    with pytest.raises(HTTPStatusFailure) as excinfo:
        _fetch(_respond({"error": True, "reason": "bad"}, status=500))
    assert excinfo.value.message == "API Error: 500"


def test_daytime_falls_back_to_local_hour_without_is_day() -> None:
    payload = _payload()
    del payload["current"]["is_day"]
    payload["current"]["time"] = "2026-10-19T21:00"
    weather, _ = _fetch(_respond(payload))
    assert weather.current.is_daytime is False


def test_hourly_duplicates_and_ragged_arrays_are_tolerated() -> None:
    payload = _payload()
    payload["hourly"] = {
        "time": ["2026-10-19T14:00", "2026-10-19T13:00", "2026-10-19T13:00", "garbage"],
        "temperature_2m": [15.0, 14.0],
        "weather_code": [0],
    }
    weather, _ = _fetch(_respond(payload))
    assert [entry.time.hour for entry in weather.forecast] == [13, 14]
    assert weather.forecast[0].temperature == 14.0
    assert weather.forecast[0].condition_code is None
    assert weather.forecast[1].condition_code == 0
