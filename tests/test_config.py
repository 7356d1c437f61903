"""Settings defaults, environment overrides, and validation tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from meteo_desk.config import Settings, load_settings
from meteo_desk.exceptions import ConfigError


def test_defaults_match_open_meteo_endpoints() -> None:
    settings = Settings(_env_file=None)
    assert settings.geocoding_base_url == "https://geocoding-api.open-meteo.com/v1"
    assert settings.weather_base_url == "https://api.open-meteo.com/v1"
    assert settings.user_agent == "WeatherApp/1.0"
    assert settings.request_timeout_seconds == 10.0
    assert settings.language == "zh"
    assert settings.units == "metric"
    assert settings.default_forecast_days == 3
    assert settings.search_limit == 10
    assert settings.hourly_limit == 24
    assert settings.default_city == "北京"
    assert (settings.current_location_lat, settings.current_location_lon) == (39.9042, 116.4074)


def test_env_overrides_and_base_url_normalization(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEATHER_BASE_URL", "https://meteo.internal.example/v1/")
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("WEATHER_FORECAST_DAYS", "7")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("WEATHER_UNITS", " Imperial ")

    settings = Settings(_env_file=None)
    assert settings.weather_base_url == "https://meteo.internal.example/v1"
    assert settings.request_timeout_seconds == 2.5
    assert settings.default_forecast_days == 7
    assert settings.log_level == "DEBUG"
    assert settings.units == "imperial"


@pytest.mark.parametrize(
    ("env_name", "value", "message"),
    [
        ("WEATHER_TIMEOUT_SECONDS", "0", "WEATHER_TIMEOUT_SECONDS must be > 0"),
        ("WEATHER_USER_AGENT", "   ", "WEATHER_USER_AGENT must not be empty"),
        ("WEATHER_FORECAST_DAYS", "17", "WEATHER_FORECAST_DAYS must be between 1 and 16"),
        ("WEATHER_SEARCH_LIMIT", "0", "WEATHER_SEARCH_LIMIT must be > 0"),
        ("WEATHER_HOURLY_LIMIT", "-1", "WEATHER_HOURLY_LIMIT must be > 0"),
        ("WEATHER_CURRENT_LAT", "95", "WEATHER_CURRENT_LAT must be between -90 and 90"),
        ("WEATHER_BASE_URL", "ftp://example.com", "WEATHER_BASE_URL must be an http"),
        ("WEATHER_UNITS", "kelvin", "metric"),
    ],
)
def test_invalid_values_rejected(
    monkeypatch: pytest.MonkeyPatch, env_name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(env_name, value)
    with pytest.raises(ValidationError, match=message):
        Settings(_env_file=None)


def test_load_settings_wraps_validation_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "-3")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_settings()


def test_load_settings_reads_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("WEATHER_DEFAULT_CITY=上海\n", encoding="utf-8")
    settings = load_settings()
    assert settings.default_city == "上海"


def test_safe_summary_has_no_surprises() -> None:
    summary = Settings(_env_file=None).safe_summary()
    assert summary["timeout_seconds"] == 10.0
    assert summary["language"] == "zh"
    assert set(summary) >= {"geocoding_base_url", "weather_base_url", "default_city"}
