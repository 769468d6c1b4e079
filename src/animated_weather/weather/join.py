"""Fan-in barrier for providers whose data spans several endpoints."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import WeatherError


@dataclass(slots=True)
class EndpointOutcome:
    """Terminal state of one named endpoint fetch."""

    name: str
    payload: dict[str, Any] | None = None
    error: WeatherError | None = None


@dataclass(slots=True)
class JoinResult:
    """Primary payload plus each secondary payload (None when that endpoint failed)."""

    primary: dict[str, Any]
    secondaries: dict[str, dict[str, Any] | None] = field(default_factory=dict)
    failed: dict[str, WeatherError] = field(default_factory=dict)

    def secondary(self, name: str) -> dict[str, Any] | None:
        return self.secondaries.get(name)


class EndpointJoin:
    """Run named endpoint fetches concurrently and decide once all have settled.

    The primary endpoint gates the result: its failure is raised and any
    secondary data is dropped. A failed secondary is logged and reported as
    absent. Completion order does not matter.
    """

    def __init__(self, *, primary: str, logger: logging.Logger) -> None:
        self.primary = primary
        self.logger = logger

    async def run(self, fetches: Mapping[str, Awaitable[dict[str, Any]]]) -> JoinResult:
        if self.primary not in fetches:
            raise ValueError(f"Primary endpoint '{self.primary}' missing from join.")

        settled = await asyncio.gather(
            *(self._settle(name, awaitable) for name, awaitable in fetches.items()),
            return_exceptions=True,
        )
        # Anything other than a WeatherError is a bug; raise it once every endpoint is done.
        for outcome in settled:
            if isinstance(outcome, BaseException):
                raise outcome
        by_name = {outcome.name: outcome for outcome in settled}

        primary = by_name[self.primary]
        if primary.error is not None:
            self.logger.error(
                "Primary endpoint '%s' failed (%s); discarding %d secondary result(s)",
                self.primary,
                primary.error.kind,
                len(by_name) - 1,
                extra={"endpoint": self.primary},
            )
            raise primary.error

        result = JoinResult(primary=primary.payload or {})
        for name, outcome in by_name.items():
            if name == self.primary:
                continue
            if outcome.error is not None:
                self.logger.warning(
                    "Secondary endpoint '%s' failed (%s: %s); continuing without it",
                    name,
                    outcome.error.kind,
                    outcome.error.message,
                    extra={"endpoint": name},
                )
                result.failed[name] = outcome.error
                result.secondaries[name] = None
            else:
                result.secondaries[name] = outcome.payload
        return result

    @staticmethod
    async def _settle(name: str, awaitable: Awaitable[dict[str, Any]]) -> EndpointOutcome:
        try:
            payload = await awaitable
        except WeatherError as exc:
            return EndpointOutcome(name=name, error=exc)
        return EndpointOutcome(name=name, payload=payload)
