"""Condition-code mapper tests for both provider tables."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from animated_weather.weather.conditions import (
    OWM_CONDITIONS,
    UNKNOWN_CONDITION,
    WMO_DESCRIPTIONS,
    Condition,
    describe_condition,
    describe_owm,
    describe_wmo,
    icon_filename,
    is_daytime_hour,
)


@pytest.mark.parametrize(
    ("code", "is_daytime", "expected"),
    [
        (0, True, Condition("Clear sky", "clear-day")),
        (0, False, Condition("Clear sky", "clear-night")),
        (61, False, Condition("Slight rain", "partly-cloudy-night-rain")),
        (61, True, Condition("Slight rain", "partly-cloudy-day-rain")),
        (63, False, Condition("Moderate rain", "rain")),
        (66, True, Condition("Light freezing rain", "sleet")),
        (99, False, Condition("Thunderstorm with heavy hail", "thunderstorms-night")),
        (999, True, Condition("Unknown", "not-available")),
    ],
)
def test_wmo_scenarios(code: int, is_daytime: bool, expected: Condition) -> None:
    assert describe_wmo(code, is_daytime) == expected


@pytest.mark.parametrize("is_daytime", [True, False])
def test_every_known_wmo_code_maps_to_non_default(is_daytime: bool) -> None:
    for code in WMO_DESCRIPTIONS:
        condition = describe_wmo(code, is_daytime)
        assert condition != UNKNOWN_CONDITION
        assert condition.description != "Unknown"
        assert condition.icon_id != "not-available"


@pytest.mark.parametrize("code", [-1, 4, 100, 999, None, "rain", "", [], {}, 61.5, True])
def test_unknown_wmo_codes_degrade_to_default(code: object) -> None:
    assert describe_wmo(code, True) == UNKNOWN_CONDITION
    assert describe_wmo(code, False) == UNKNOWN_CONDITION


def test_wmo_accepts_integral_float_and_numeric_string() -> None:
    assert describe_wmo(61.0, True).description == "Slight rain"
    assert describe_wmo("3", False).icon_id == "overcast-night"


def test_every_known_owm_code_maps_to_non_default() -> None:
    for code in OWM_CONDITIONS:
        assert describe_owm(code, True) != UNKNOWN_CONDITION


def test_owm_suffix_wins_over_daytime_flag() -> None:
    assert describe_owm("01n", True) == Condition("Clear sky", "clear-night")
    assert describe_owm("10d", False).icon_id == "partly-cloudy-day-rain"


@pytest.mark.parametrize("code", ["99d", "01", "", None, 800])
def test_unknown_owm_codes_degrade_to_default(code: object) -> None:
    assert describe_owm(code, True) == UNKNOWN_CONDITION


def test_mapper_is_idempotent() -> None:
    assert describe_wmo(45, False) == describe_wmo(45, False)
    assert describe_condition("openweathermap", "13d", True) == describe_condition(
        "openweathermap", "13d", True
    )


def test_describe_condition_dispatches_per_provider() -> None:
    assert describe_condition("open_meteo", 0, True).icon_id == "clear-day"
    assert describe_condition("openweathermap", "50n", True).icon_id == "fog-night"
    assert describe_condition("somewhere-else", 0, True) == UNKNOWN_CONDITION


@pytest.mark.parametrize(
    ("hour", "expected"),
    [(5, False), (6, True), (12, True), (19, True), (20, False), (23, False)],
)
def test_daytime_window_is_six_to_twenty(hour: int, expected: bool) -> None:
    assert is_daytime_hour(datetime(2026, 10, 19, hour, 59, tzinfo=UTC)) is expected


def test_daytime_window_uses_the_instant_local_hour() -> None:
    # 05:00 UTC is 07:00 at UTC+2.
    local = datetime(2026, 10, 19, 5, 0, tzinfo=UTC).astimezone(timezone(timedelta(hours=2)))
    assert is_daytime_hour(local) is True


def test_icon_filename() -> None:
    assert icon_filename("clear-day") == "clear-day.svg"
