"""Presentation-facing weather session state.

A view binds to `WeatherSession` attributes and calls its methods in response
to user actions. Each method returns a `LoadResult` describing what happened;
the session never pushes change notifications itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .exceptions import WeatherError
from .weather.models import Coordinate, Place, WeatherSnapshot
from .weather.service import WeatherService


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Outcome of one session action."""

    ok: bool
    message: str
    snapshot: WeatherSnapshot | None = None


class WeatherSession:
    """Holds the snapshot currently on screen plus search suggestions."""

    def __init__(self, service: WeatherService, settings: Any, logger: logging.Logger) -> None:
        self.service = service
        self.settings = settings
        self.logger = logger
        self.snapshot: WeatherSnapshot | None = None
        self.suggestions: list[Place] = []
        self.status_message = ""
        self.is_loading = False
        # Set when the snapshot on screen came from coordinates rather than a city name.
        self._last_place: Place | None = None

    def load_default(self) -> LoadResult:
        """Load the configured default city; call once at startup."""
        return self._load_city(self.settings.default_city, failure_prefix="加载默认天气失败")

    def search(self, query: str) -> LoadResult:
        if not query or not query.strip():
            return self._finish(False, "请输入城市名称")
        return self._load_city(query.strip())

    def suggest(self, query: str) -> LoadResult:
        """Replace `suggestions` with places matching `query`."""
        try:
            self.suggestions = self.service.search_locations(query)
        except WeatherError as exc:
            self.suggestions = []
            return self._finish(False, f"搜索城市失败: {exc}")
        if not self.suggestions:
            return self._finish(False, "未找到匹配的城市")
        return self._finish(True, f"找到 {len(self.suggestions)} 个匹配的城市")

    def select_location(self, place: Place) -> LoadResult:
        """Show weather for a chosen suggestion, keeping its display name."""
        return self._load_place(
            place,
            loading_message=f"正在获取 {place.name} 的天气...",
            failure_prefix="获取天气失败",
        )

    def refresh(self) -> LoadResult:
        """Reload the snapshot on screen the same way it was first loaded."""
        if self.snapshot is None or not self.snapshot.city:
            return self._finish(False, "没有可刷新的城市")
        if self._last_place is not None:
            return self._load_place(
                self._last_place,
                loading_message=f"正在获取 {self.snapshot.city} 的天气...",
                failure_prefix="获取天气失败",
            )
        return self._load_city(self.snapshot.city, self.snapshot.country)

    def use_current_location(self, coordinate: Coordinate | None = None) -> LoadResult:
        """Show weather at `coordinate`, or at the configured stand-in location."""
        target = coordinate or Coordinate(
            latitude=self.settings.current_location_lat,
            longitude=self.settings.current_location_lon,
        )
        # An empty name makes the service apply its current-location label.
        return self._load_place(
            Place(name="", coordinate=target),
            loading_message="获取当前位置...",
            failure_prefix="获取当前位置失败",
        )

    def _load_city(
        self, city: str, country: str = "", failure_prefix: str = "获取天气失败"
    ) -> LoadResult:
        return self._load(
            lambda: self.service.get_forecast(
                city, days=self.settings.session_forecast_days, country=country
            ),
            loading_message=f"正在获取 {city} 的天气...",
            failure_prefix=failure_prefix,
        )

    def _load_place(
        self, place: Place, *, loading_message: str, failure_prefix: str
    ) -> LoadResult:
        return self._load(
            lambda: self.service.get_weather_by_coordinates(
                place.coordinate.latitude,
                place.coordinate.longitude,
                name=place.name or None,
                country=place.country,
                days=self.settings.session_forecast_days,
            ),
            loading_message=loading_message,
            failure_prefix=failure_prefix,
            place=place,
        )

    def _load(
        self,
        fetch: Callable[[], WeatherSnapshot],
        *,
        loading_message: str,
        failure_prefix: str,
        place: Place | None = None,
    ) -> LoadResult:
        self.is_loading = True
        self.status_message = loading_message
        try:
            snapshot = fetch()
        except WeatherError as exc:
            self.logger.warning("%s: %s", failure_prefix, exc)
            return self._finish(False, f"{failure_prefix}: {exc}")
        finally:
            self.is_loading = False

        self.snapshot = snapshot
        self._last_place = place
        return self._finish(True, f"已更新 {snapshot.city} 的天气", snapshot)

    def _finish(
        self, ok: bool, message: str, snapshot: WeatherSnapshot | None = None
    ) -> LoadResult:
        self.status_message = message
        return LoadResult(ok=ok, message=message, snapshot=snapshot)
