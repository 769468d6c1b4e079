"""Application exception classes."""

from __future__ import annotations

from typing import Literal

WeatherErrorKind = Literal["network-failure", "http-status-failure", "parse-failure"]


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherError(Exception):
    """Terminal failure of one acquisition request.

    Carries only the failure kind, a display message and (for HTTP failures)
    the status code. Partial payloads are never attached.
    """

    kind: WeatherErrorKind = "network-failure"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkFailure(WeatherError):
    """Raised when the transport fails (DNS, connection reset, timeout)."""

    kind: WeatherErrorKind = "network-failure"


class HTTPStatusFailure(WeatherError):
    """Raised when a provider answers with a non-200 status."""

    kind: WeatherErrorKind = "http-status-failure"

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"API Error: {status_code}", status_code=status_code)


class ParseFailure(WeatherError):
    """Raised when a response body is not a usable JSON object."""

    kind: WeatherErrorKind = "parse-failure"
