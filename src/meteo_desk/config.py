"""Typed settings loader for the Open-Meteo weather client."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

# Open-Meteo rejects forecast_days above this value.
MAX_FORECAST_DAYS = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    geocoding_base_url: str = Field(
        default="https://geocoding-api.open-meteo.com/v1",
        alias="GEOCODING_BASE_URL",
    )
    weather_base_url: str = Field(
        default="https://api.open-meteo.com/v1",
        alias="WEATHER_BASE_URL",
    )
    user_agent: str = Field(default="WeatherApp/1.0", alias="WEATHER_USER_AGENT")
    request_timeout_seconds: float = Field(default=10.0, alias="WEATHER_TIMEOUT_SECONDS")
    language: str = Field(default="zh", alias="WEATHER_LANGUAGE")
    units: Literal["metric", "imperial"] = Field(default="metric", alias="WEATHER_UNITS")

    default_city: str = Field(default="北京", alias="WEATHER_DEFAULT_CITY")
    default_forecast_days: int = Field(default=3, alias="WEATHER_FORECAST_DAYS")
    session_forecast_days: int = Field(default=7, alias="WEATHER_SESSION_FORECAST_DAYS")
    search_limit: int = Field(default=10, alias="WEATHER_SEARCH_LIMIT")
    hourly_limit: int = Field(default=24, alias="WEATHER_HOURLY_LIMIT")

    # Stand-in for a device location lookup; defaults to Beijing.
    current_location_lat: float = Field(default=39.9042, alias="WEATHER_CURRENT_LAT")
    current_location_lon: float = Field(default=116.4074, alias="WEATHER_CURRENT_LON")
    current_location_label: str = Field(default="当前位置", alias="WEATHER_CURRENT_LABEL")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("geocoding_base_url", "weather_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: Any) -> Any:
        """Normalize base URLs so endpoint paths can be appended directly."""
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("units", mode="before")
    @classmethod
    def lower_units(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Reject values the Open-Meteo endpoints or the client cannot use."""
        if not self.geocoding_base_url.startswith(("http://", "https://")):
            raise ValueError("GEOCODING_BASE_URL must be an http(s) URL.")
        if not self.weather_base_url.startswith(("http://", "https://")):
            raise ValueError("WEATHER_BASE_URL must be an http(s) URL.")
        if not self.user_agent.strip():
            raise ValueError("WEATHER_USER_AGENT must not be empty.")
        if self.request_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if not self.language.strip():
            raise ValueError("WEATHER_LANGUAGE must not be empty.")
        if not self.default_city.strip():
            raise ValueError("WEATHER_DEFAULT_CITY must not be empty.")
        if not (1 <= self.default_forecast_days <= MAX_FORECAST_DAYS):
            raise ValueError(
                f"WEATHER_FORECAST_DAYS must be between 1 and {MAX_FORECAST_DAYS}."
            )
        if not (1 <= self.session_forecast_days <= MAX_FORECAST_DAYS):
            raise ValueError(
                f"WEATHER_SESSION_FORECAST_DAYS must be between 1 and {MAX_FORECAST_DAYS}."
            )
        if self.search_limit <= 0:
            raise ValueError("WEATHER_SEARCH_LIMIT must be > 0.")
        if self.hourly_limit <= 0:
            raise ValueError("WEATHER_HOURLY_LIMIT must be > 0.")
        if not (-90 <= self.current_location_lat <= 90):
            raise ValueError("WEATHER_CURRENT_LAT must be between -90 and 90.")
        if not (-180 <= self.current_location_lon <= 180):
            raise ValueError("WEATHER_CURRENT_LON must be between -180 and 180.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary suitable for startup logging."""
        return {
            "geocoding_base_url": self.geocoding_base_url,
            "weather_base_url": self.weather_base_url,
            "timeout_seconds": self.request_timeout_seconds,
            "language": self.language,
            "units": self.units,
            "default_city": self.default_city,
            "default_forecast_days": self.default_forecast_days,
            "search_limit": self.search_limit,
            "hourly_limit": self.hourly_limit,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
