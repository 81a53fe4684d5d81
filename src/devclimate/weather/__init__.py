"""Upstream weather data."""

from devclimate.weather.client import OpenWeatherClient
from devclimate.weather.models import CurrentConditions, ms_to_kmh, round_half_up

__all__ = [
    "OpenWeatherClient",
    "CurrentConditions",
    "ms_to_kmh",
    "round_half_up",
]
