"""Poll-cycle sequencing tests: stale results never overwrite fresher ones."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

import pytest

from animated_weather.config import Settings
from animated_weather.exceptions import HTTPStatusFailure
from animated_weather.poller import CycleResult, WeatherPoller
from animated_weather.weather.base import WeatherProvider
from animated_weather.weather.models import CurrentConditions, FetchRequest, NormalizedWeather

LOGGER_NAME = "test.poller"
LOGGER = logging.getLogger(LOGGER_NAME)
REQUEST = FetchRequest(latitude=51.48, longitude=-3.18)


def _weather(temperature: float) -> NormalizedWeather:
    return NormalizedWeather(
        provider="open_meteo",
        unit_system="metric",
        retrieval_timestamp=datetime(2026, 10, 19, 10, 30, tzinfo=UTC),
        current=CurrentConditions(temperature=temperature, condition_code=0),
    )


class ScriptedProvider(WeatherProvider):
    """Answers each fetch after a scripted delay with a scripted outcome."""

    provider_name = "open_meteo"
    metric_wind_label = "km/h"

    def __init__(self, script: list[tuple[float, float | Exception]]) -> None:
        super().__init__(Settings(_env_file=None), LOGGER)
        self.script = list(script)
        self.calls = 0

    async def fetch(self, request: FetchRequest) -> NormalizedWeather:
        delay, outcome = self.script[self.calls]
        self.calls += 1
        await asyncio.sleep(delay)
        if isinstance(outcome, Exception):
            raise outcome
        return _weather(outcome)


def _result(cycle_id: int, temperature: float = 10.0) -> CycleResult:
    return CycleResult(
        cycle_id=cycle_id,
        completed_at=datetime.now(UTC),
        weather=_weather(temperature),
    )


def test_accept_discards_results_older_than_latest(caplog: pytest.LogCaptureFixture) -> None:
    seen: list[int] = []
    poller = WeatherPoller(
        ScriptedProvider([]), REQUEST, LOGGER, on_result=lambda r: seen.append(r.cycle_id)
    )

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        assert poller.accept(_result(2)) is True
        assert poller.accept(_result(1)) is False
        assert poller.accept(_result(3)) is True

    assert poller.latest is not None
    assert poller.latest.cycle_id == 3
    assert seen == [2, 3]
    assert any("Discarding stale result of cycle 1" in r.getMessage() for r in caplog.records)


def test_cycle_ids_increase_monotonically() -> None:
    poller = WeatherPoller(ScriptedProvider([]), REQUEST, LOGGER)
    assert [poller.next_cycle_id() for _ in range(3)] == [1, 2, 3]


def test_run_cycle_wraps_success() -> None:
    poller = WeatherPoller(ScriptedProvider([(0.0, 18.0)]), REQUEST, LOGGER)
    result = asyncio.run(poller.run_cycle())
    assert result.ok
    assert result.error is None
    assert result.weather is not None
    assert result.weather.current.temperature == 18.0
    assert poller.latest is result


def test_run_cycle_wraps_failure_message() -> None:
    poller = WeatherPoller(ScriptedProvider([(0.0, HTTPStatusFailure(500))]), REQUEST, LOGGER)
    result = asyncio.run(poller.run_cycle())
    assert not result.ok
    assert result.weather is None
    assert result.error == "API Error: 500"


def test_slow_earlier_cycle_does_not_overwrite_newer_result() -> None:
    # Cycle 1 takes 0.2s; cycle 2 starts after 0.05s and finishes at ~0.06s.
    provider = ScriptedProvider([(0.2, 1.0), (0.01, 2.0)])
    accepted: list[CycleResult] = []
    poller = WeatherPoller(provider, REQUEST, LOGGER, on_result=accepted.append)

    latest = asyncio.run(poller.run_forever(0.05, max_cycles=2))

    assert provider.calls == 2
    assert latest is not None
    assert latest.cycle_id == 2
    assert latest.weather is not None
    assert latest.weather.current.temperature == 2.0
    assert [result.cycle_id for result in accepted] == [2]


def test_newer_failure_replaces_older_success() -> None:
    provider = ScriptedProvider([(0.0, 5.0), (0.0, HTTPStatusFailure(503))])
    poller = WeatherPoller(provider, REQUEST, LOGGER)

    latest = asyncio.run(poller.run_forever(0.01, max_cycles=2))

    assert latest is not None
    assert latest.cycle_id == 2
    assert latest.error == "API Error: 503"
