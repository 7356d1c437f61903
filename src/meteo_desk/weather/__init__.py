"""Open-Meteo geocoding and forecast integration."""

from .base import WeatherProvider
from .geocoding import OpenMeteoGeocoder
from .models import (
    Coordinate,
    CurrentConditions,
    DailyPoint,
    ForecastResult,
    HourlyPoint,
    Place,
    WeatherSnapshot,
)
from .openmeteo import OpenMeteoWeatherProvider
from .service import WeatherService

__all__ = [
    "Coordinate",
    "CurrentConditions",
    "DailyPoint",
    "ForecastResult",
    "HourlyPoint",
    "OpenMeteoGeocoder",
    "OpenMeteoWeatherProvider",
    "Place",
    "WeatherProvider",
    "WeatherService",
    "WeatherSnapshot",
]
