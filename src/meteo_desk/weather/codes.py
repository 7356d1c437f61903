"""WMO weather code classification and display formatting.

Open-Meteo reports conditions as WMO 4677 codes. The labels below are the
fixed Chinese wording shown to users; numerically adjacent codes do not
always share a label (71/85 are both light snow, 73/86 moderate, 75 heavy).
"""

from __future__ import annotations

UNKNOWN_LABEL = "未知"
UNKNOWN_ICON = "unknown"

_CONDITION_LABELS: dict[int, str] = {
    0: "晴天",
    1: "大部晴朗",
    2: "部分多云",
    3: "阴天",
    45: "有雾",
    48: "有雾",
    51: "小雨",
    56: "小雨",
    53: "中雨",
    57: "中雨",
    55: "大雨",
    61: "小雨",
    66: "小雨",
    63: "中雨",
    67: "中雨",
    65: "大雨",
    71: "小雪",
    85: "小雪",
    73: "中雪",
    86: "中雪",
    75: "大雪",
    77: "雪粒",
    80: "小阵雨",
    81: "中阵雨",
    82: "强阵雨",
    95: "雷暴",
    96: "雹暴",
    99: "雹暴",
}


def condition_label(code: int) -> str:
    """Return the condition label for a WMO code, or the unknown label."""
    return _CONDITION_LABELS.get(code, UNKNOWN_LABEL)


def icon_name(code: int, is_day: bool = True) -> str:
    """Return the icon identifier for a WMO code and day/night flag."""
    if code == 0:
        return "sunny" if is_day else "clear-night"
    if 1 <= code <= 3:
        return "partly-cloudy-day" if is_day else "partly-cloudy-night"
    if code in (45, 48):
        return "fog"
    if 51 <= code <= 57:
        return "drizzle"
    if 61 <= code <= 67:
        return "rain"
    if 71 <= code <= 77:
        return "snow"
    if 80 <= code <= 82:
        return "rain"
    if 85 <= code <= 86:
        return "snow"
    if 95 <= code <= 99:
        return "thunderstorm"
    return UNKNOWN_ICON


def format_temperature(value: float, units: str = "metric") -> str:
    text = f"{value:.1f}"
    if units == "metric":
        return f"{text}°C"
    if units == "imperial":
        return f"{text}°F"
    return text


def format_wind_speed(value: float, units: str = "metric") -> str:
    text = f"{value:.1f}"
    if units == "metric":
        return f"{text} km/h"
    if units == "imperial":
        return f"{text} mph"
    return text


def format_pressure(value: float) -> str:
    return f"{value:.0f} hPa"
