"""CLI: look up places and print current weather or forecasts from Open-Meteo."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from .config import MAX_FORECAST_DAYS, load_settings
from .exceptions import CityNotFoundError, ConfigError, WeatherError, WeatherInputError
from .log_setup import setup_logger
from .weather.codes import format_pressure, format_temperature, format_wind_speed
from .weather.models import Place, WeatherSnapshot
from .weather.service import WeatherService


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(description="Fetch weather from Open-Meteo.")
    parser.add_argument(
        "--units",
        choices=("metric", "imperial"),
        default=None,
        help="Unit system for temperature and wind (default: WEATHER_UNITS).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    current = subparsers.add_parser("current", help="Current conditions for a city.")
    current.add_argument("city", help="City name, e.g. 北京 or Berlin.")
    current.add_argument("--country", default="", help="Optional country qualifier.")

    forecast = subparsers.add_parser("forecast", help="Current + hourly + daily forecast.")
    forecast.add_argument("city", help="City name.")
    forecast.add_argument("--country", default="", help="Optional country qualifier.")
    forecast.add_argument(
        "--days",
        type=int,
        default=None,
        help=f"Forecast horizon in days (1-{MAX_FORECAST_DAYS}).",
    )
    forecast.add_argument(
        "--hours",
        type=int,
        default=12,
        help="Number of hourly rows to print.",
    )

    search = subparsers.add_parser("search", help="List places matching a query.")
    search.add_argument("query", help="Free-text place query.")

    coords = subparsers.add_parser("coords", help="Current conditions for coordinates.")
    coords.add_argument("lat", type=float, help="Latitude.")
    coords.add_argument("lon", type=float, help="Longitude.")
    coords.add_argument("--name", default=None, help="Display name for the location.")
    return parser.parse_args(argv)


def _validate_cli_input(args: argparse.Namespace) -> None:
    if getattr(args, "days", None) is not None and not (1 <= args.days <= MAX_FORECAST_DAYS):
        raise WeatherInputError(f"--days must be between 1 and {MAX_FORECAST_DAYS}.")
    if getattr(args, "hours", None) is not None and args.hours <= 0:
        raise WeatherInputError("--hours must be > 0.")


def _print_current(console: Console, snapshot: WeatherSnapshot, units: str) -> None:
    current = snapshot.current
    location = f"{snapshot.city}, {snapshot.country}" if snapshot.country else snapshot.city
    table = Table(title=f"{location} ({current.condition})")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Temperature", format_temperature(current.temperature, units))
    table.add_row("Feels like", format_temperature(current.apparent_temperature, units))
    table.add_row("Humidity", f"{current.humidity}%")
    wind = format_wind_speed(current.wind_speed, units)
    table.add_row("Wind", f"{wind} @ {current.wind_direction}°")
    table.add_row("Pressure", format_pressure(current.pressure))
    table.add_row("Precipitation", f"{current.precipitation:g} mm")
    table.add_row("Cloud cover", f"{current.cloud_cover}%")
    table.add_row("Icon", current.icon)
    table.add_row("Captured (UTC)", current.captured_at.isoformat(timespec="seconds"))
    console.print(table)


def _print_forecast(
    console: Console, snapshot: WeatherSnapshot, units: str, max_hours: int
) -> None:
    _print_current(console, snapshot, units)

    if snapshot.hourly:
        hourly = Table(title="Hourly")
        hourly.add_column("Time")
        hourly.add_column("Temp")
        hourly.add_column("Precip %")
        hourly.add_column("Icon")
        for point in snapshot.hourly[:max_hours]:
            hourly.add_row(
                point.time.strftime("%m-%d %H:%M"),
                format_temperature(point.temperature, units),
                f"{point.precipitation_probability:g}",
                point.icon,
            )
        console.print(hourly)
    else:
        console.print("No hourly forecast returned.")

    if not snapshot.daily:
        console.print("No daily forecast returned.")
        return

    daily = Table(title="Daily")
    daily.add_column("Date")
    daily.add_column("Condition")
    daily.add_column("Min / Max")
    daily.add_column("Precip")
    daily.add_column("Sunrise")
    daily.add_column("Sunset")
    for day in snapshot.daily:
        daily.add_row(
            day.date.isoformat(),
            day.condition,
            f"{format_temperature(day.temperature_min, units)} / "
            f"{format_temperature(day.temperature_max, units)}",
            f"{day.precipitation_sum:g} mm",
            day.sunrise.strftime("%H:%M") if day.sunrise else "-",
            day.sunset.strftime("%H:%M") if day.sunset else "-",
        )
    console.print(daily)


def _print_places(console: Console, places: list[Place]) -> None:
    if not places:
        console.print("No matching places.")
        return
    table = Table(title="Places")
    table.add_column("#")
    table.add_column("Name", overflow="fold")
    table.add_column("Latitude")
    table.add_column("Longitude")
    for index, place in enumerate(places, start=1):
        table.add_row(
            str(index),
            place.display_name,
            f"{place.coordinate.latitude:.4f}",
            f"{place.coordinate.longitude:.4f}",
        )
    console.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    """Run one weather CLI command and return its exit code."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    if args.units:
        settings = settings.model_copy(update={"units": args.units})
    logger.setLevel(getattr(logging, settings.log_level))
    logger.debug("Loaded settings: %s", settings.safe_summary())

    try:
        _validate_cli_input(args)
        with WeatherService(settings=settings, logger=logger) as service:
            if args.command == "current":
                snapshot = service.get_current_weather(args.city, args.country)
                _print_current(console, snapshot, settings.units)
            elif args.command == "forecast":
                snapshot = service.get_forecast(args.city, days=args.days, country=args.country)
                _print_forecast(console, snapshot, settings.units, max_hours=args.hours)
            elif args.command == "search":
                _print_places(console, service.search_locations(args.query))
            else:
                snapshot = service.get_weather_by_coordinates(args.lat, args.lon, name=args.name)
                _print_current(console, snapshot, settings.units)
            logger.debug("Service statistics: %s", service.statistics())
    except CityNotFoundError as exc:
        logger.error("%s", exc)
        return 3
    except WeatherError as exc:
        logger.error("Weather request failure: %s", exc)
        return 4
    except Exception as exc:  # pragma: no cover - last-resort guard for CLI runtime
        logger.exception("Unexpected weather CLI failure: %s", exc)
        return 99
    return 0


if __name__ == "__main__":
    sys.exit(main())
