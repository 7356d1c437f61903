"""Open-Meteo forecast provider implementation."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from typing import Any

from ..config import MAX_FORECAST_DAYS
from ..exceptions import UpstreamError
from .base import OpenMeteoComponent, WeatherProvider
from .codes import condition_label, icon_name
from .models import Coordinate, CurrentConditions, DailyPoint, ForecastResult, HourlyPoint

CURRENT_STAGE = "failed to fetch current weather"
FORECAST_STAGE = "failed to fetch forecast"

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "wind_speed_10m",
    "wind_direction_10m",
    "pressure_msl",
    "precipitation",
    "cloud_cover",
    "weather_code",
    "is_day",
)
HOURLY_FIELDS = ("time", "temperature_2m", "precipitation_probability", "weather_code")
DAILY_FIELDS = (
    "time",
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "sunrise",
    "sunset",
)

# Null array entries carry no code; this maps to the unknown label/icon.
MISSING_CODE = -1


class OpenMeteoWeatherProvider(OpenMeteoComponent, WeatherProvider):
    """Fetches and normalizes current and forecast weather from api.open-meteo.com."""

    provider_name = "open-meteo"

    def fetch_current(self, coordinate: Coordinate) -> CurrentConditions:
        """Fetch current conditions only."""
        payload = self._request_json(
            f"{self.settings.weather_base_url}/forecast",
            params=self._base_params(coordinate),
            stage=CURRENT_STAGE,
        )
        return self._parse_current(payload, stage=CURRENT_STAGE)

    def fetch_forecast(self, coordinate: Coordinate, days: int = 3) -> ForecastResult:
        """Fetch current conditions with hourly and daily blocks for `days` days.

        A missing or misaligned hourly/daily block yields an empty sequence for
        that block; only the current block is mandatory.
        """
        if not (1 <= days <= MAX_FORECAST_DAYS):
            raise ValueError(f"days must be between 1 and {MAX_FORECAST_DAYS}, got {days}.")

        params = self._base_params(coordinate)
        params["hourly"] = ",".join(HOURLY_FIELDS[1:])
        params["daily"] = ",".join(DAILY_FIELDS[1:])
        params["forecast_days"] = days
        payload = self._request_json(
            f"{self.settings.weather_base_url}/forecast",
            params=params,
            stage=FORECAST_STAGE,
        )

        current = self._parse_current(payload, stage=FORECAST_STAGE)
        tz = self._payload_tz(payload)
        zone_name = payload.get("timezone")
        return ForecastResult(
            current=current,
            hourly=self._parse_hourly(payload, tz),
            daily=self._parse_daily(payload, tz),
            timezone=zone_name if isinstance(zone_name, str) else None,
            raw_payload=payload,
        )

    def _base_params(self, coordinate: Coordinate) -> dict[str, Any]:
        params: dict[str, Any] = {
            "latitude": f"{coordinate.latitude:.6f}",
            "longitude": f"{coordinate.longitude:.6f}",
            "current": ",".join(CURRENT_FIELDS),
            "timezone": "auto",
            "language": self.settings.language,
        }
        if self.settings.units == "imperial":
            params["temperature_unit"] = "fahrenheit"
            params["wind_speed_unit"] = "mph"
        return params

    def _parse_current(self, payload: dict[str, Any], stage: str) -> CurrentConditions:
        current = payload.get("current")
        if not isinstance(current, dict):
            raise UpstreamError(stage, "payload missing 'current' object")

        def required(key: str) -> float:
            value = current.get(key)
            if not _is_number(value):
                raise UpstreamError(stage, f"payload missing numeric 'current.{key}'")
            return float(value)

        def optional(key: str, default: float) -> float:
            value = current.get(key)
            return float(value) if _is_number(value) else default

        code = int(required("weather_code"))
        is_day = int(required("is_day")) == 1
        return CurrentConditions(
            temperature=required("temperature_2m"),
            apparent_temperature=required("apparent_temperature"),
            humidity=int(round(required("relative_humidity_2m"))),
            wind_speed=required("wind_speed_10m"),
            condition=condition_label(code),
            icon=icon_name(code, is_day),
            captured_at=datetime.now(UTC),
            weather_code=code,
            is_day=is_day,
            wind_direction=int(round(optional("wind_direction_10m", 0.0))),
            pressure=optional("pressure_msl", 1013.0),
            precipitation=optional("precipitation", 0.0),
            cloud_cover=int(round(optional("cloud_cover", 0.0))),
        )

    def _parse_hourly(self, payload: dict[str, Any], tz: tzinfo) -> list[HourlyPoint]:
        arrays = self._block_arrays(payload, "hourly", HOURLY_FIELDS)
        if arrays is None:
            return []
        count = min(min(len(values) for values in arrays.values()), self.settings.hourly_limit)

        points: list[HourlyPoint] = []
        for i in range(count):
            code = _as_code(arrays["weather_code"][i])
            points.append(
                HourlyPoint(
                    time=_parse_local_datetime(arrays["time"][i], tz) or datetime.now(tz),
                    temperature=_as_float(arrays["temperature_2m"][i]),
                    precipitation_probability=_as_float(arrays["precipitation_probability"][i]),
                    weather_code=code,
                    icon=icon_name(code, True),
                )
            )
        return points

    def _parse_daily(self, payload: dict[str, Any], tz: tzinfo) -> list[DailyPoint]:
        arrays = self._block_arrays(payload, "daily", DAILY_FIELDS)
        if arrays is None:
            return []
        count = min(len(values) for values in arrays.values())

        points: list[DailyPoint] = []
        for i in range(count):
            code = _as_code(arrays["weather_code"][i])
            day = _parse_local_datetime(arrays["time"][i], tz) or datetime.now(tz)
            points.append(
                DailyPoint(
                    date=day.date(),
                    temperature_max=_as_float(arrays["temperature_2m_max"][i]),
                    temperature_min=_as_float(arrays["temperature_2m_min"][i]),
                    precipitation_sum=_as_float(arrays["precipitation_sum"][i]),
                    weather_code=code,
                    condition=condition_label(code),
                    icon=icon_name(code, True),
                    sunrise=_parse_local_datetime(arrays["sunrise"][i], tz),
                    sunset=_parse_local_datetime(arrays["sunset"][i], tz),
                )
            )
        return points

    def _block_arrays(
        self, payload: dict[str, Any], block_name: str, fields: tuple[str, ...]
    ) -> dict[str, list[Any]] | None:
        block = payload.get(block_name)
        if not isinstance(block, dict):
            self.logger.debug("Forecast payload has no '%s' block; skipping", block_name)
            return None
        arrays: dict[str, list[Any]] = {}
        for field in fields:
            values = block.get(field)
            if not isinstance(values, list):
                self.logger.debug(
                    "Forecast '%s' block missing '%s' array; skipping block", block_name, field
                )
                return None
            arrays[field] = values
        return arrays

    @staticmethod
    def _payload_tz(payload: dict[str, Any]) -> tzinfo:
        # With timezone=auto, times are local wall-clock without an offset.
        offset = payload.get("utc_offset_seconds")
        if _is_number(offset):
            return timezone(timedelta(seconds=int(offset)))
        return UTC


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # json accepts NaN and Infinity literals.
    return math.isfinite(value)


def _as_float(value: Any) -> float:
    return float(value) if _is_number(value) else 0.0


def _as_code(value: Any) -> int:
    return int(value) if _is_number(value) else MISSING_CODE


def _parse_local_datetime(value: Any, tz: tzinfo) -> datetime | None:
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not candidate:
        return None
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)
