"""Typed settings loader for the weather widget."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

ProviderName = Literal["open_meteo", "openweathermap"]
UnitSystem = Literal["metric", "imperial"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weather_provider: ProviderName = Field(default="open_meteo", alias="WEATHER_PROVIDER")
    weather_lat: float | None = Field(default=None, alias="WEATHER_LAT")
    weather_lon: float | None = Field(default=None, alias="WEATHER_LON")
    weather_location_name: str | None = Field(default=None, alias="WEATHER_LOCATION_NAME")
    weather_units: UnitSystem = Field(default="metric", alias="WEATHER_UNITS")
    weather_language: str = Field(default="en", alias="WEATHER_LANGUAGE")

    openweathermap_api_key: str | None = Field(
        default=None, alias="OPENWEATHERMAP_API_KEY", repr=False
    )
    open_meteo_base_url: str = Field(
        default="https://api.open-meteo.com",
        alias="OPEN_METEO_BASE_URL",
    )
    openweathermap_base_url: str = Field(
        default="https://api.openweathermap.org",
        alias="OPENWEATHERMAP_BASE_URL",
    )
    # Unset means no client-side timeout at all.
    weather_timeout_seconds: float | None = Field(default=None, alias="WEATHER_TIMEOUT_SECONDS")

    weather_update_interval_minutes: float = Field(
        default=10.0,
        alias="WEATHER_UPDATE_INTERVAL_MINUTES",
    )
    weather_forecast_hours: int = Field(default=6, alias="WEATHER_FORECAST_HOURS")
    weather_round_temp: bool = Field(default=True, alias="WEATHER_ROUND_TEMP")

    weather_show_temperature: bool = Field(default=True, alias="WEATHER_SHOW_TEMPERATURE")
    weather_show_feels_like: bool = Field(default=True, alias="WEATHER_SHOW_FEELS_LIKE")
    weather_show_humidity: bool = Field(default=True, alias="WEATHER_SHOW_HUMIDITY")
    weather_show_wind: bool = Field(default=True, alias="WEATHER_SHOW_WIND")
    weather_show_summary: bool = Field(default=True, alias="WEATHER_SHOW_SUMMARY")
    weather_show_forecast: bool = Field(default=True, alias="WEATHER_SHOW_FORECAST")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator(
        "weather_lat",
        "weather_lon",
        "weather_location_name",
        "openweathermap_api_key",
        "weather_timeout_seconds",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optional values."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_settings(self) -> Settings:
        """Validate cross-field constraints."""
        has_lat = self.weather_lat is not None
        has_lon = self.weather_lon is not None
        if has_lat != has_lon:
            raise ValueError("WEATHER_LAT and WEATHER_LON must be set together.")
        if has_lat and not (-90 <= self.weather_lat <= 90):
            raise ValueError("WEATHER_LAT must be between -90 and 90.")
        if has_lon and not (-180 <= self.weather_lon <= 180):
            raise ValueError("WEATHER_LON must be between -180 and 180.")
        if self.weather_provider == "openweathermap" and not self.openweathermap_api_key:
            raise ValueError(
                "OPENWEATHERMAP_API_KEY is required when WEATHER_PROVIDER='openweathermap'."
            )
        if self.weather_timeout_seconds is not None and self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0 when set.")
        if self.weather_update_interval_minutes <= 0:
            raise ValueError("WEATHER_UPDATE_INTERVAL_MINUTES must be > 0.")
        if self.weather_forecast_hours <= 0:
            raise ValueError("WEATHER_FORECAST_HOURS must be > 0.")
        if not self.weather_language.strip():
            raise ValueError("WEATHER_LANGUAGE must not be empty.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "provider": self.weather_provider,
            "units": self.weather_units,
            "language": self.weather_language,
            "location_name": self.weather_location_name,
            "has_coordinates": self.weather_lat is not None,
            "has_api_key": bool(self.openweathermap_api_key),
            "timeout_seconds": self.weather_timeout_seconds,
            "update_interval_minutes": self.weather_update_interval_minutes,
            "forecast_hours": self.weather_forecast_hours,
            "round_temp": self.weather_round_temp,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
