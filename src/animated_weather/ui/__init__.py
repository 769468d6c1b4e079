"""Terminal presentation helpers for the weather widget."""

from .render import (
    build_cycle_panel,
    build_error_panel,
    build_loading_panel,
    build_weather_panel,
    weather_header,
)

__all__ = [
    "build_cycle_panel",
    "build_error_panel",
    "build_loading_panel",
    "build_weather_panel",
    "weather_header",
]
