"""Open-Meteo geocoder outcome tests: single lookup, search, and failure handling."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from meteo_desk.exceptions import UpstreamError
from meteo_desk.weather.geocoding import OpenMeteoGeocoder


def _make_settings(**overrides: Any) -> Any:
    defaults = {
        "geocoding_base_url": "https://geocoding-api.open-meteo.com/v1",
        "user_agent": "WeatherApp/1.0",
        "request_timeout_seconds": 10.0,
        "language": "zh",
        "search_limit": 10,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_geocoder(client: httpx.Client | None = None, **overrides: Any) -> OpenMeteoGeocoder:
    logger = logging.getLogger("test_geocoding")
    return OpenMeteoGeocoder(settings=_make_settings(**overrides), logger=logger, client=client)


def _result(index: int, **overrides: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": 1000 + index,
        "name": f"城市{index}",
        "latitude": 30.0 + index,
        "longitude": 110.0 + index,
        "country": "中国",
        "admin1": f"省{index}",
        "timezone": "Asia/Shanghai",
    }
    item.update(overrides)
    return item


def test_resolve_one_builds_city_country_query() -> None:
    geocoder = _make_geocoder()
    calls: list[tuple[str, dict[str, Any], str]] = []

    def _fake_request(url: str, params: dict[str, Any], stage: str) -> dict[str, Any]:
        calls.append((url, params, stage))
        return {"results": [_result(0, name="Paris", country="France")]}

    geocoder._request_json = _fake_request  # type: ignore[assignment]
    place = geocoder.resolve_one("Paris", "FR")

    assert place is not None
    assert place.name == "Paris"
    assert place.country == "France"
    assert place.coordinate.latitude == 30.0
    url, params, _ = calls[0]
    assert url == "https://geocoding-api.open-meteo.com/v1/search"
    assert params == {"name": "Paris,FR", "count": 1, "language": "zh", "format": "json"}


def test_resolve_one_without_country_uses_bare_city() -> None:
    geocoder = _make_geocoder()
    captured: dict[str, Any] = {}

    def _fake_request(url: str, params: dict[str, Any], stage: str) -> dict[str, Any]:
        captured.update(params)
        return {"results": [_result(0)]}

    geocoder._request_json = _fake_request  # type: ignore[assignment]
    geocoder.resolve_one("北京")
    assert captured["name"] == "北京"


def test_resolve_one_returns_first_result_only() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {  # type: ignore[assignment]
        "results": [_result(0), _result(1)]
    }
    place = geocoder.resolve_one("城市")
    assert place is not None
    assert place.name == "城市0"
    assert place.admin1 == "省0"
    assert place.timezone == "Asia/Shanghai"


@pytest.mark.parametrize("payload", [{"results": []}, {}, {"generationtime_ms": 0.5}])
def test_resolve_one_no_results_is_not_found(payload: dict[str, Any]) -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: payload  # type: ignore[assignment]
    assert geocoder.resolve_one("Atlantis") is None


def test_resolve_one_converts_upstream_failure_to_not_found() -> None:
    geocoder = _make_geocoder()

    def _failing_request(url: str, params: dict[str, Any], stage: str) -> dict[str, Any]:
        raise UpstreamError(stage, "connection refused")

    geocoder._request_json = _failing_request  # type: ignore[assignment]
    assert geocoder.resolve_one("北京") is None


def test_resolve_one_network_error_returns_none() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route to host", request=request)

    client = httpx.Client(transport=httpx.MockTransport(_handler))
    geocoder = _make_geocoder(client=client)
    assert geocoder.resolve_one("北京") is None
    client.close()


def test_resolve_one_malformed_result_returns_none() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {  # type: ignore[assignment]
        "results": [{"name": "Nowhere"}]
    }
    assert geocoder.resolve_one("Nowhere") is None


def test_resolve_one_missing_name_falls_back_to_query_city() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {  # type: ignore[assignment]
        "results": [{"latitude": 1.5, "longitude": 2.5}]
    }
    place = geocoder.resolve_one("Somewhere", "XX")
    assert place is not None
    assert place.name == "Somewhere"
    assert place.country == ""


def test_search_caps_at_ten_in_upstream_order() -> None:
    geocoder = _make_geocoder()
    captured: dict[str, Any] = {}

    def _fake_request(url: str, params: dict[str, Any], stage: str) -> dict[str, Any]:
        captured.update(params)
        return {"results": [_result(i) for i in range(15)]}

    geocoder._request_json = _fake_request  # type: ignore[assignment]
    places = geocoder.search("城市")

    assert captured["count"] == 10
    assert len(places) == 10
    assert [p.name for p in places] == [f"城市{i}" for i in range(10)]


def test_search_empty_results_is_empty_list() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {"results": []}  # type: ignore[assignment]
    assert geocoder.search("zzzz") == []


def test_search_missing_results_key_is_empty_list() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {"generationtime_ms": 0.2}  # type: ignore[assignment]
    assert geocoder.search("zzzz") == []


def test_search_propagates_upstream_failure() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    client = httpx.Client(transport=httpx.MockTransport(_handler))
    geocoder = _make_geocoder(client=client)

    with pytest.raises(UpstreamError, match="^failed to search places: HTTP 503"):
        geocoder.search("北京")
    client.close()


def test_search_rejects_non_list_results() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {"results": {"name": "x"}}  # type: ignore[assignment]
    with pytest.raises(UpstreamError, match="'results' is not a list"):
        geocoder.search("x")


def test_search_rejects_result_without_coordinates() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {  # type: ignore[assignment]
        "results": [_result(0), {"name": "broken", "latitude": "n/a"}]
    }
    with pytest.raises(UpstreamError, match="failed to search places: .*latitude/longitude"):
        geocoder.search("x")


def test_search_display_name_includes_region_and_country() -> None:
    geocoder = _make_geocoder()
    geocoder._request_json = lambda url, params, stage: {  # type: ignore[assignment]
        "results": [_result(0, name="Springfield", admin1="Illinois", country="United States")]
    }
    place = geocoder.search("Springfield")[0]
    assert place.display_name == "Springfield, Illinois, United States"
