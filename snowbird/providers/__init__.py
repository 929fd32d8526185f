"""Weather and flight data providers."""

from .base import FlightProvider, SnowbirdError, WeatherProvider, WeatherUnavailable
from .amadeus import AmadeusFlightProvider
from .open_meteo import OpenMeteoProvider
from .openweather import OpenWeatherProvider

__all__ = [
    "AmadeusFlightProvider",
    "FlightProvider",
    "OpenMeteoProvider",
    "OpenWeatherProvider",
    "SnowbirdError",
    "WeatherProvider",
    "WeatherUnavailable",
]
