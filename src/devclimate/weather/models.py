"""Current weather models.

`CurrentConditions` is the normalized shape every lookup is stored in. The
`OpenWeather*` models describe the subset of the OpenWeatherMap response we
read; unknown fields are ignored.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

# 1 m/s = 3.6 km/h
MS_TO_KMH = 3.6


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up (-2.5 -> -2)."""
    return math.floor(value + 0.5)


def ms_to_kmh(speed_ms: float) -> int:
    """Convert meters per second to whole kilometers per hour."""
    return round_half_up(speed_ms * MS_TO_KMH)


class OpenWeatherMain(BaseModel):
    model_config = ConfigDict(extra="ignore")

    temp: float
    feels_like: float
    humidity: int  # %
    pressure: int  # hPa


class OpenWeatherCondition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str
    icon: str | None = None


class OpenWeatherWind(BaseModel):
    model_config = ConfigDict(extra="ignore")

    speed: float = 0.0


class OpenWeatherSys(BaseModel):
    model_config = ConfigDict(extra="ignore")

    country: str | None = None


class OpenWeatherResponse(BaseModel):
    """`GET /weather` response body (metric units)."""

    model_config = ConfigDict(extra="ignore")

    name: str
    main: OpenWeatherMain
    weather: list[OpenWeatherCondition] = Field(min_length=1)
    wind: OpenWeatherWind = Field(default_factory=OpenWeatherWind)
    sys: OpenWeatherSys = Field(default_factory=OpenWeatherSys)


class CurrentConditions(BaseModel):
    """Normalized current weather for a city.

    Temperatures in whole °C, wind in whole km/h, pressure in hPa,
    humidity in percent.
    """

    city: str
    country: str | None = None
    temperature: int
    feels_like: int
    description: str
    humidity: int
    wind_speed: int
    pressure: int
    icon: str | None = None

    @classmethod
    def from_openweather(cls, data: OpenWeatherResponse) -> CurrentConditions:
        condition = data.weather[0]
        return cls(
            city=data.name,
            country=data.sys.country,
            temperature=round_half_up(data.main.temp),
            feels_like=round_half_up(data.main.feels_like),
            description=condition.description,
            humidity=data.main.humidity,
            wind_speed=ms_to_kmh(data.wind.speed),
            pressure=data.main.pressure,
            icon=condition.icon,
        )
