"""Open-Meteo weather client: geocoding, forecast normalization and a terminal front end."""

__version__ = "0.1.0"
