"""Application exception classes."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherError(Exception):
    """Base class for weather acquisition failures shown to the user."""


class CityNotFoundError(WeatherError):
    """Raised when geocoding produced no match for a single-place lookup."""

    def __init__(self, query: str) -> None:
        super().__init__(f"city not found: {query}")
        self.query = query


class UpstreamError(WeatherError):
    """Raised for network, HTTP status, or payload shape failures from Open-Meteo."""

    def __init__(self, stage: str, cause: str) -> None:
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
        self.cause = cause


class WeatherInputError(WeatherError):
    """Raised when a caller passes an unusable query or coordinate."""
