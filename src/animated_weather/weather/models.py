"""Typed models for requests and normalized weather records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..config import ProviderName, UnitSystem

ConditionCode = int | str


class FetchRequest(BaseModel):
    """Parameters of one acquisition cycle."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    unit_system: UnitSystem = "metric"
    language: str = "en"
    api_key: str | None = Field(default=None, repr=False)
    forecast_limit: int = Field(default=6, gt=0)


class CurrentConditions(BaseModel):
    """Current observation. Numeric fields are None when the provider omits them."""

    temperature: float | None = None
    feels_like: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    condition_code: ConditionCode | None = None
    is_daytime: bool = True
    location_name: str | None = None
    observed_at: datetime | None = None


class SunTimes(BaseModel):
    """Sunrise and sunset instants for the current day."""

    sunrise: datetime
    sunset: datetime


class ForecastEntry(BaseModel):
    """One slot of the short-term forecast strip."""

    time: datetime
    temperature: float | None = None
    condition_code: ConditionCode | None = None
    is_daytime: bool = True


class NormalizedWeather(BaseModel):
    """Provider-agnostic record consumed by the presentation layer."""

    provider: ProviderName
    unit_system: UnitSystem
    retrieval_timestamp: datetime
    current: CurrentConditions
    sun: SunTimes | None = None
    forecast: list[ForecastEntry] = Field(default_factory=list)


class DisplayForecastHour(BaseModel):
    """Display strings for one forecast slot."""

    time: str
    temperature: str | None = None
    icon_id: str
    description: str


class DisplayWeather(BaseModel):
    """Display-ready strings; None marks a section that must not be rendered."""

    icon_id: str
    description: str
    location_name: str | None = None
    temperature: str | None = None
    feels_like: str | None = None
    humidity: str | None = None
    wind: str | None = None
    sunrise: str | None = None
    sunset: str | None = None
    forecast: list[DisplayForecastHour] = Field(default_factory=list)
