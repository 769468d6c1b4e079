"""Poll-cycle scheduling with stale-result suppression."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from .exceptions import WeatherError
from .weather.base import WeatherProvider
from .weather.models import FetchRequest, NormalizedWeather


@dataclass(frozen=True, slots=True)
class CycleResult:
    """Outcome of one poll cycle: exactly one of `weather` or `error` is set."""

    cycle_id: int
    completed_at: datetime
    weather: NormalizedWeather | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.weather is not None


class WeatherPoller:
    """Runs acquisition cycles and keeps only the freshest result.

    Each cycle gets a monotonically increasing id. In-flight cycles are never
    cancelled, so a slow cycle can finish after a newer one; its result is
    then discarded instead of overwriting fresher data.
    """

    def __init__(
        self,
        provider: WeatherProvider,
        request: FetchRequest,
        logger: logging.Logger,
        on_result: Callable[[CycleResult], None] | None = None,
    ) -> None:
        self.provider = provider
        self.request = request
        self.logger = logger
        self.on_result = on_result
        self.latest: CycleResult | None = None
        self._last_cycle_id = 0
        self._in_flight: set[asyncio.Task[CycleResult]] = set()

    def next_cycle_id(self) -> int:
        self._last_cycle_id += 1
        return self._last_cycle_id

    async def run_cycle(self, cycle_id: int | None = None) -> CycleResult:
        """Run one acquisition and offer its result to `accept`."""
        if cycle_id is None:
            cycle_id = self.next_cycle_id()
        try:
            weather = await self.provider.fetch(self.request)
        except WeatherError as exc:
            self.logger.warning(
                "Cycle %d failed (%s): %s",
                cycle_id,
                exc.kind,
                exc.message,
                extra={"cycle_id": cycle_id, "provider": self.provider.provider_name},
            )
            result = CycleResult(
                cycle_id=cycle_id,
                completed_at=datetime.now(UTC),
                error=exc.message,
            )
        else:
            result = CycleResult(
                cycle_id=cycle_id,
                completed_at=datetime.now(UTC),
                weather=weather,
            )
        self.accept(result)
        return result

    def accept(self, result: CycleResult) -> bool:
        """Store `result` unless a newer cycle has already been accepted."""
        if self.latest is not None and result.cycle_id < self.latest.cycle_id:
            self.logger.info(
                "Discarding stale result of cycle %d (latest accepted: %d)",
                result.cycle_id,
                self.latest.cycle_id,
                extra={"cycle_id": result.cycle_id},
            )
            return False
        self.latest = result
        if self.on_result is not None:
            self.on_result(result)
        return True

    async def run_forever(
        self,
        interval_seconds: float,
        *,
        max_cycles: int | None = None,
    ) -> CycleResult | None:
        """Start a cycle every `interval_seconds` without waiting for the previous one.

        With `max_cycles` set, returns the latest accepted result once every
        started cycle has settled.
        """
        started = 0
        while max_cycles is None or started < max_cycles:
            cycle_id = self.next_cycle_id()
            task = asyncio.create_task(self.run_cycle(cycle_id))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            started += 1
            if max_cycles is not None and started >= max_cycles:
                break
            await asyncio.sleep(interval_seconds)

        if self._in_flight:
            await asyncio.gather(*self._in_flight)
        return self.latest
