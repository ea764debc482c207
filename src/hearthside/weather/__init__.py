"""Regional weather."""

from hearthside.weather.weather_types import (
    WEATHER_CHANGE_PROBABILITY,
    WEATHER_UPDATE_INTERVAL,
    WeatherChange,
    WeatherCondition,
    WeatherField,
    WeatherRegion,
    roll_weather,
)

__all__ = [
    "WEATHER_CHANGE_PROBABILITY",
    "WEATHER_UPDATE_INTERVAL",
    "WeatherChange",
    "WeatherCondition",
    "WeatherField",
    "WeatherRegion",
    "roll_weather",
]
