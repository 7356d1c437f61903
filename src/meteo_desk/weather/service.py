"""Public weather operations consumed by the presentation layer."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from time import perf_counter
from typing import Any

from ..config import MAX_FORECAST_DAYS
from ..exceptions import CityNotFoundError, WeatherInputError
from .base import WeatherProvider
from .geocoding import OpenMeteoGeocoder
from .models import Coordinate, CurrentConditions, Place, WeatherSnapshot
from .openmeteo import OpenMeteoWeatherProvider


@dataclass(slots=True)
class ServiceStats:
    """Running counters for one `WeatherService` instance."""

    requests: int = 0
    upstream_calls: int = 0
    failures: int = 0
    total_seconds: float = 0.0

    @property
    def average_response_ms(self) -> float:
        if not self.requests:
            return 0.0
        return self.total_seconds / self.requests * 1000


class WeatherService:
    """Composes geocoding and forecast retrieval into snapshot-level operations.

    Every method either returns a fully populated result or raises a
    `WeatherError` subclass whose message is fit to show to a user.
    """

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        geocoder: OpenMeteoGeocoder | None = None,
        provider: WeatherProvider | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.geocoder = geocoder or OpenMeteoGeocoder(settings=settings, logger=logger)
        self.provider = provider or OpenMeteoWeatherProvider(settings=settings, logger=logger)
        self.stats = ServiceStats()

    def __enter__(self) -> WeatherService:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self.geocoder.close()
        self.provider.close()

    def statistics(self) -> dict[str, Any]:
        """Return request counters plus the mean operation latency in ms."""
        summary = asdict(self.stats)
        summary["average_response_ms"] = round(self.stats.average_response_ms, 1)
        return summary

    def get_current_weather(self, city: str, country: str = "") -> WeatherSnapshot:
        """Geocode `city` and return its current conditions."""
        with self._tracked():
            place = self._resolve(city, country)
            current = self._fetch_current(place.coordinate)
        self.logger.info("Fetched current weather for %s", place.display_name)
        return WeatherSnapshot(
            city=place.name,
            country=place.country,
            coordinate=place.coordinate,
            timezone=place.timezone,
            current=current,
            created_at=datetime.now(UTC),
        )

    def get_forecast(
        self, city: str, days: int | None = None, country: str = ""
    ) -> WeatherSnapshot:
        """Geocode `city` and return current conditions plus a `days`-day forecast."""
        if days is None:
            days = self.settings.default_forecast_days
        self._check_days(days)
        with self._tracked():
            place = self._resolve(city, country)
            return self._forecast_snapshot(
                place.coordinate,
                days=days,
                name=place.name,
                country=place.country,
                fallback_timezone=place.timezone,
            )

    def search_locations(self, query: str) -> list[Place]:
        """Return candidate places for a free-text query (possibly empty)."""
        if not query or not query.strip():
            raise WeatherInputError("search query must not be empty")
        with self._tracked():
            self.stats.upstream_calls += 1
            places = self.geocoder.search(query.strip())
        self.logger.info("Place search %r returned %d result(s)", query, len(places))
        return places

    def get_weather_by_coordinates(
        self,
        latitude: float,
        longitude: float,
        name: str | None = None,
        country: str = "",
        days: int | None = None,
    ) -> WeatherSnapshot:
        """Return weather for raw coordinates without geocoding.

        Only current conditions are fetched unless `days` is given.
        """
        if not (-90 <= latitude <= 90):
            raise WeatherInputError(f"invalid latitude {latitude}; expected between -90 and 90")
        if not (-180 <= longitude <= 180):
            raise WeatherInputError(
                f"invalid longitude {longitude}; expected between -180 and 180"
            )
        if days is not None:
            self._check_days(days)
        coordinate = Coordinate(latitude=latitude, longitude=longitude)
        label = name or self.settings.current_location_label
        with self._tracked():
            if days is not None:
                return self._forecast_snapshot(coordinate, days=days, name=label, country=country)
            current = self._fetch_current(coordinate)
        return WeatherSnapshot(
            city=label,
            country=country,
            coordinate=coordinate,
            current=current,
            created_at=datetime.now(UTC),
        )

    @contextmanager
    def _tracked(self) -> Iterator[None]:
        start = perf_counter()
        self.stats.requests += 1
        try:
            yield
        except Exception:
            self.stats.failures += 1
            raise
        finally:
            self.stats.total_seconds += perf_counter() - start

    @staticmethod
    def _check_days(days: int) -> None:
        if not (1 <= days <= MAX_FORECAST_DAYS):
            raise WeatherInputError(
                f"invalid forecast days {days}; expected between 1 and {MAX_FORECAST_DAYS}"
            )

    def _resolve(self, city: str, country: str) -> Place:
        if not city or not city.strip():
            raise WeatherInputError("city name must not be empty")
        self.stats.upstream_calls += 1
        place = self.geocoder.resolve_one(city.strip(), country.strip())
        if place is None:
            raise CityNotFoundError(city)
        return place

    def _fetch_current(self, coordinate: Coordinate) -> CurrentConditions:
        self.stats.upstream_calls += 1
        return self.provider.fetch_current(coordinate)

    def _forecast_snapshot(
        self,
        coordinate: Coordinate,
        *,
        days: int,
        name: str,
        country: str,
        fallback_timezone: str | None = None,
    ) -> WeatherSnapshot:
        self.stats.upstream_calls += 1
        result = self.provider.fetch_forecast(coordinate, days=days)
        self.logger.info(
            "Fetched %d-day forecast for %s (hourly=%d daily=%d)",
            days,
            name,
            len(result.hourly),
            len(result.daily),
        )
        return WeatherSnapshot(
            city=name,
            country=country,
            coordinate=coordinate,
            timezone=result.timezone or fallback_timezone,
            current=result.current,
            hourly=result.hourly,
            daily=result.daily,
            created_at=datetime.now(UTC),
        )
