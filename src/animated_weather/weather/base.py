"""Provider-agnostic weather interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import ProviderName, Settings
from .models import FetchRequest, NormalizedWeather


def utc_now() -> datetime:
    return datetime.now(UTC)


class WeatherProvider(ABC):
    """Base contract for providers feeding the widget.

    Subclasses issue their requests through a shared `httpx.AsyncClient` and
    return a normalized record, raising `WeatherError` subclasses on failure.
    """

    provider_name: ProviderName
    metric_wind_label: str

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        *,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._clock = clock
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> WeatherProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the HTTP client when this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    @abstractmethod
    async def fetch(self, request: FetchRequest) -> NormalizedWeather:
        """Run one acquisition and normalize the response."""
