"""Shared HTTP plumbing and the provider-agnostic weather interface."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..exceptions import UpstreamError
from .models import Coordinate, CurrentConditions, ForecastResult


class OpenMeteoComponent:
    """Owns a pooled httpx client and turns responses into JSON objects.

    Every request failure (transport error, timeout, non-2xx status, non-JSON
    body, non-object body) is raised as `UpstreamError` tagged with the
    caller's stage so the message reads e.g. "failed to fetch forecast: ...".
    """

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=settings.request_timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": settings.user_agent,
            },
        )

    def __enter__(self) -> OpenMeteoComponent:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request_json(self, url: str, params: dict[str, Any], stage: str) -> dict[str, Any]:
        self.logger.debug("GET %s params=%s", url, params)
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self.logger.warning("Open-Meteo request failed (HTTP %d) at %s", status, url)
            raise UpstreamError(
                stage, f"HTTP {status} from {url}: {exc.response.text[:300]}"
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.warning(
                "Open-Meteo request failed (%s) at %s", type(exc).__name__, url
            )
            raise UpstreamError(stage, f"{type(exc).__name__}: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(stage, f"non-JSON response from {url}") from exc

        if not isinstance(payload, dict):
            raise UpstreamError(
                stage, f"unexpected payload type {type(payload).__name__} from {url}"
            )
        return payload


class WeatherProvider(ABC):
    """Base contract for providers that turn coordinates into weather."""

    @abstractmethod
    def fetch_current(self, coordinate: Coordinate) -> CurrentConditions:
        """Fetch and normalize current conditions."""

    @abstractmethod
    def fetch_forecast(self, coordinate: Coordinate, days: int = 3) -> ForecastResult:
        """Fetch and normalize current conditions plus hourly/daily blocks."""

    @abstractmethod
    def close(self) -> None:
        """Release provider resources."""
