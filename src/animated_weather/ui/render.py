"""Rich renderables for the terminal weather widget."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config import Settings
from ..poller import CycleResult
from ..weather.conditions import icon_filename
from ..weather.formatting import build_display
from ..weather.models import DisplayWeather


def weather_header(location_name: str | None) -> str:
    if location_name:
        return f"{location_name}'s Weather"
    return "Weather"


def build_loading_panel() -> Panel:
    return Panel(Text("Loading weather...", style="dim"), title="Weather")


def build_error_panel(message: str) -> Panel:
    """Generic error panel; error kinds are not distinguished."""
    return Panel(Text(message, style="bold red"), title="Weather", border_style="red")


def build_weather_panel(
    display: DisplayWeather,
    *,
    settings: Settings,
    location_name: str | None = None,
) -> Panel:
    """Render icon, temperature, details, sun times and forecast strip.

    Sections whose value is absent are skipped rather than shown as zero.
    """
    parts: list[RenderableType] = []

    top = Text()
    top.append(f"[{display.icon_id}]", style="cyan")
    top.append(f" {icon_filename(display.icon_id)}", style="dim")
    if settings.weather_show_temperature and display.temperature is not None:
        top.append(f"   {display.temperature}°", style="bold")
    parts.append(top)

    if settings.weather_show_summary:
        parts.append(Text(display.description, style="italic"))

    details: list[str] = []
    if settings.weather_show_feels_like and display.feels_like is not None:
        details.append(f"Feels like {display.feels_like}°")
    if settings.weather_show_humidity and display.humidity is not None:
        details.append(f"Humidity {display.humidity}")
    if settings.weather_show_wind and display.wind is not None:
        details.append(f"Wind {display.wind}")
    if details:
        parts.append(Text("  |  ".join(details)))

    if display.sunrise is not None and display.sunset is not None:
        parts.append(Text(f"Sunrise {display.sunrise}  Sunset {display.sunset}"))

    if settings.weather_show_forecast and display.forecast:
        table = Table(show_header=False, box=None, padding=(0, 2))
        for _ in display.forecast:
            table.add_column(justify="center")
        table.add_row(*(hour.time for hour in display.forecast))
        table.add_row(*(hour.icon_id for hour in display.forecast))
        table.add_row(
            *(
                f"{hour.temperature}°" if hour.temperature is not None else "-"
                for hour in display.forecast
            )
        )
        parts.append(table)

    title = weather_header(location_name or display.location_name)
    return Panel(Group(*parts), title=title, border_style="blue")


def build_cycle_panel(result: CycleResult | None, *, settings: Settings) -> Panel:
    """Panel for the latest poll result (loading, error or weather)."""
    if result is None:
        return build_loading_panel()
    if result.weather is None:
        return build_error_panel(result.error or "No weather data available")
    display = build_display(result.weather, round_temp=settings.weather_round_temp)
    return build_weather_panel(
        display,
        settings=settings,
        location_name=settings.weather_location_name,
    )
