"""Typed models for geocoded places and normalized weather snapshots."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """WGS84 position in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Place(BaseModel):
    """Geocoder match for a place name."""

    model_config = ConfigDict(frozen=True)

    name: str
    country: str = ""
    coordinate: Coordinate
    admin1: str | None = None
    timezone: str | None = None

    @property
    def display_name(self) -> str:
        parts = [self.name]
        if self.admin1 and self.admin1 != self.name:
            parts.append(self.admin1)
        if self.country:
            parts.append(self.country)
        return ", ".join(parts)


class CurrentConditions(BaseModel):
    """Current conditions at acquisition time."""

    model_config = ConfigDict(frozen=True)

    temperature: float
    apparent_temperature: float
    humidity: int
    wind_speed: float
    condition: str
    icon: str
    captured_at: datetime
    weather_code: int
    is_day: bool = True
    wind_direction: int = 0
    pressure: float = 1013.0
    precipitation: float = 0.0
    cloud_cover: int = 0


class HourlyPoint(BaseModel):
    """One hour of the hourly forecast block."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    temperature: float
    precipitation_probability: float
    weather_code: int
    icon: str


class DailyPoint(BaseModel):
    """One day of the daily forecast block."""

    model_config = ConfigDict(frozen=True)

    date: date
    temperature_max: float
    temperature_min: float
    precipitation_sum: float
    weather_code: int
    condition: str
    icon: str
    sunrise: datetime | None = None
    sunset: datetime | None = None


class ForecastResult(BaseModel):
    """Normalized forecast response plus the raw payload it came from."""

    model_config = ConfigDict(frozen=True)

    current: CurrentConditions
    hourly: list[HourlyPoint] = Field(default_factory=list)
    daily: list[DailyPoint] = Field(default_factory=list)
    timezone: str | None = None
    raw_payload: dict[str, Any] = Field(default_factory=dict, repr=False)


class WeatherSnapshot(BaseModel):
    """Everything the presentation layer shows for one place.

    A snapshot is replaced wholesale on every refresh; it is never updated
    in place.
    """

    model_config = ConfigDict(frozen=True)

    city: str
    country: str = ""
    coordinate: Coordinate
    timezone: str | None = None
    current: CurrentConditions
    hourly: list[HourlyPoint] = Field(default_factory=list)
    daily: list[DailyPoint] = Field(default_factory=list)
    created_at: datetime
