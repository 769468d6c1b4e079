"""CLI: fetch weather once or keep polling, and render it in the terminal."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from rich.console import Console

from .config import ProviderName, Settings, load_settings
from .exceptions import ConfigError
from .log_setup import setup_logger
from .poller import WeatherPoller
from .redaction import sanitize_for_logging
from .ui.render import build_cycle_panel, build_error_panel, build_loading_panel
from .weather import create_provider
from .weather.models import FetchRequest


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show current weather and a short forecast from Open-Meteo or OpenWeatherMap."
    )
    parser.add_argument(
        "--provider",
        choices=["open_meteo", "openweathermap"],
        default=None,
        help="Weather provider (defaults to WEATHER_PROVIDER).",
    )
    parser.add_argument("--lat", type=float, default=None, help="Latitude of the location.")
    parser.add_argument("--lon", type=float, default=None, help="Longitude of the location.")
    parser.add_argument(
        "--units",
        choices=["metric", "imperial"],
        default=None,
        help="Unit system (defaults to WEATHER_UNITS).",
    )
    parser.add_argument("--language", type=str, default=None, help="Language code.")
    parser.add_argument(
        "--forecast-hours",
        type=int,
        default=None,
        help="Number of forecast slots to show.",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep polling at the configured interval.",
    )
    parser.add_argument(
        "--interval-minutes",
        type=float,
        default=None,
        help="Poll interval in watch mode (defaults to WEATHER_UPDATE_INTERVAL_MINUTES).",
    )
    parser.add_argument(
        "--max-cycles",
        type=int,
        default=None,
        help="Stop watch mode after this many cycles.",
    )
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace, settings: Settings) -> FetchRequest:
    """Combine CLI overrides with settings into a FetchRequest."""
    lat = args.lat if args.lat is not None else settings.weather_lat
    lon = args.lon if args.lon is not None else settings.weather_lon
    if lat is None or lon is None:
        raise ConfigError("Please set latitude and longitude in the config.")
    if not (-90 <= lat <= 90):
        raise ConfigError(f"Invalid latitude {lat}; expected between -90 and 90.")
    if not (-180 <= lon <= 180):
        raise ConfigError(f"Invalid longitude {lon}; expected between -180 and 180.")

    forecast_hours = (
        args.forecast_hours if args.forecast_hours is not None else settings.weather_forecast_hours
    )
    if forecast_hours <= 0:
        raise ConfigError("--forecast-hours must be > 0 when provided.")

    return FetchRequest(
        latitude=lat,
        longitude=lon,
        unit_system=args.units or settings.weather_units,
        language=args.language or settings.weather_language,
        api_key=settings.openweathermap_api_key,
        forecast_limit=forecast_hours,
    )


def _validate_run_args(
    args: argparse.Namespace,
    provider_name: str,
    request: FetchRequest,
    settings: Settings,
) -> float:
    """Check run-mode arguments and return the poll interval in seconds."""
    if provider_name == "openweathermap" and not request.api_key:
        raise ConfigError("OPENWEATHERMAP_API_KEY is required for the openweathermap provider.")
    if args.max_cycles is not None and args.max_cycles <= 0:
        raise ConfigError("--max-cycles must be > 0 when provided.")
    interval_minutes = (
        args.interval_minutes
        if args.interval_minutes is not None
        else settings.weather_update_interval_minutes
    )
    if interval_minutes <= 0:
        raise ConfigError("--interval-minutes must be > 0 when provided.")
    return interval_minutes * 60


async def _run(
    args: argparse.Namespace,
    settings: Settings,
    request: FetchRequest,
    provider_name: ProviderName,
    interval_seconds: float,
    logger: logging.Logger,
    console: Console,
) -> int:
    async with create_provider(provider_name, settings, logger) as provider:
        if not args.watch:
            result = await WeatherPoller(provider, request, logger).run_cycle()
            console.print(build_cycle_panel(result, settings=settings))
            return 0 if result.ok else 4

        console.print(build_loading_panel())
        poller = WeatherPoller(
            provider,
            request,
            logger,
            on_result=lambda result: console.print(build_cycle_panel(result, settings=settings)),
        )
        latest = await poller.run_forever(interval_seconds, max_cycles=args.max_cycles)
    if latest is not None and not latest.ok:
        return 4
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the weather widget."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
        logger.setLevel(settings.log_level)
        request = build_request(args, settings)
        provider_name = args.provider or settings.weather_provider
        interval_seconds = _validate_run_args(args, provider_name, request, settings)
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        console.print(build_error_panel(str(exc)))
        return 2

    logger.info("Starting weather widget: %s", sanitize_for_logging(settings.safe_summary()))
    try:
        return asyncio.run(
            _run(args, settings, request, provider_name, interval_seconds, logger, console)
        )
    except KeyboardInterrupt:
        logger.info("Weather widget stopped.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
