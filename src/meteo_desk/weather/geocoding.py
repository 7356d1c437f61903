"""Open-Meteo geocoding: place names to coordinates."""

from __future__ import annotations

from typing import Any

from ..exceptions import UpstreamError
from .base import OpenMeteoComponent
from .models import Coordinate, Place

RESOLVE_STAGE = "failed to resolve place"
SEARCH_STAGE = "failed to search places"


class OpenMeteoGeocoder(OpenMeteoComponent):
    """Resolves free-text place names against the Open-Meteo geocoding API."""

    def resolve_one(self, city: str, country: str = "") -> Place | None:
        """Return the best match for `city` (optionally `country`), or None.

        Transport and payload failures are logged and reported as no match;
        the caller decides how to surface a missing place.
        """
        query = f"{city},{country}" if country else city
        try:
            results = self._lookup(query, count=1, stage=RESOLVE_STAGE)
            if not results:
                return None
            return self._to_place(results[0], fallback_name=city, stage=RESOLVE_STAGE)
        except UpstreamError as exc:
            self.logger.warning("Geocoding lookup for %r failed: %s", query, exc)
            return None

    def search(self, query: str) -> list[Place]:
        """Return up to `search_limit` matches in upstream relevance order."""
        limit = self.settings.search_limit
        results = self._lookup(query, count=limit, stage=SEARCH_STAGE)
        return [
            self._to_place(item, fallback_name="", stage=SEARCH_STAGE)
            for item in results[:limit]
        ]

    def _lookup(self, name: str, count: int, stage: str) -> list[Any]:
        payload = self._request_json(
            f"{self.settings.geocoding_base_url}/search",
            params={
                "name": name,
                "count": count,
                "language": self.settings.language,
                "format": "json",
            },
            stage=stage,
        )
        # The API omits `results` entirely when nothing matches.
        results = payload.get("results")
        if results is None:
            return []
        if not isinstance(results, list):
            raise UpstreamError(stage, "geocoding payload 'results' is not a list")
        return results

    @staticmethod
    def _to_place(item: Any, fallback_name: str, stage: str) -> Place:
        if not isinstance(item, dict):
            raise UpstreamError(stage, "geocoding result is not an object")
        lat = item.get("latitude")
        lon = item.get("longitude")
        if not _is_number(lat) or not _is_number(lon):
            raise UpstreamError(stage, "geocoding result missing latitude/longitude")

        name = item.get("name")
        country = item.get("country")
        admin1 = item.get("admin1")
        timezone = item.get("timezone")
        return Place(
            name=name if isinstance(name, str) and name else fallback_name,
            country=country if isinstance(country, str) else "",
            coordinate=Coordinate(latitude=float(lat), longitude=float(lon)),
            admin1=admin1 if isinstance(admin1, str) and admin1 else None,
            timezone=timezone if isinstance(timezone, str) and timezone else None,
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
