"""Open-Meteo daily forecast provider (no API key required)."""

import asyncio
import logging
from datetime import date
from typing import Any, Optional

from .base import WeatherProvider, WeatherUnavailable
from .http import REQUEST_ERRORS, get_json
from ..models import DayWeather

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

FORECAST_DAYS = 8
DAILY_FIELDS = [
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "snowfall_sum",
    "rain_sum",
    "wind_speed_10m_max",
]

# WMO weather code -> (condition, icon) in OpenWeatherMap vocabulary
WMO_CODES = {
    0: ("Clear", "01d"),
    1: ("Clouds", "02d"),
    2: ("Clouds", "03d"),
    3: ("Clouds", "04d"),
    45: ("Fog", "50d"),
    48: ("Fog", "50d"),
    51: ("Drizzle", "09d"),
    53: ("Drizzle", "09d"),
    55: ("Drizzle", "09d"),
    56: ("Drizzle", "09d"),
    57: ("Drizzle", "09d"),
    61: ("Rain", "10d"),
    63: ("Rain", "10d"),
    65: ("Rain", "10d"),
    66: ("Rain", "13d"),
    67: ("Rain", "13d"),
    71: ("Snow", "13d"),
    73: ("Snow", "13d"),
    75: ("Snow", "13d"),
    77: ("Snow", "13d"),
    80: ("Rain", "09d"),
    81: ("Rain", "09d"),
    82: ("Rain", "09d"),
    85: ("Snow", "13d"),
    86: ("Snow", "13d"),
    95: ("Thunderstorm", "11d"),
    96: ("Thunderstorm", "11d"),
    99: ("Thunderstorm", "11d"),
}


def describe_weather_code(code: Optional[int]) -> tuple[str, str]:
    """Map a WMO code to (condition, icon); unknown codes read as Clouds."""
    if code is None:
        return "Clouds", "03d"
    return WMO_CODES.get(int(code), ("Clouds", "03d"))


class OpenMeteoProvider(WeatherProvider):
    """Daily forecasts from Open-Meteo."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    @property
    def source_name(self) -> str:
        return "open-meteo"

    async def forecast(self, city: str) -> list[DayWeather]:
        try:
            geo = await asyncio.to_thread(
                get_json, GEOCODING_URL, {"name": city, "count": 1}, None, self.timeout
            )
        except REQUEST_ERRORS as e:
            logger.warning("Open-Meteo geocoding for %s failed: %s", city, e)
            raise WeatherUnavailable(f"Failed to geocode {city}: {e}") from e

        results = geo.get("results") if isinstance(geo, dict) else None
        if not results:
            raise WeatherUnavailable(f"Could not find a location for {city!r}")

        place = results[0] if isinstance(results, list) else None
        if not isinstance(place, dict) or "latitude" not in place or "longitude" not in place:
            raise WeatherUnavailable(f"Could not find a location for {city!r}")
        params = {
            "latitude": place["latitude"],
            "longitude": place["longitude"],
            "daily": ",".join(DAILY_FIELDS),
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "precipitation_unit": "inch",
            "timezone": place.get("timezone") or "auto",
            "forecast_days": FORECAST_DAYS,
        }
        try:
            raw = await asyncio.to_thread(get_json, FORECAST_URL, params, None, self.timeout)
        except REQUEST_ERRORS as e:
            logger.warning("Open-Meteo forecast for %s failed: %s", city, e)
            raise WeatherUnavailable(f"Failed to fetch weather data for {city}: {e}") from e

        return self._parse_daily(raw, city)

    def _parse_daily(self, raw: Any, city: str) -> list[DayWeather]:
        """Parse Open-Meteo's column-oriented daily block."""
        daily = raw.get("daily") if isinstance(raw, dict) else None
        if not isinstance(daily, dict) or not daily.get("time"):
            raise WeatherUnavailable(f"No daily forecast returned for {city}")

        days: list[DayWeather] = []
        try:
            for i, day_str in enumerate(daily["time"][:FORECAST_DAYS]):
                t_max = float(daily["temperature_2m_max"][i])
                t_min = float(daily["temperature_2m_min"][i])
                condition, icon = describe_weather_code(daily["weather_code"][i])
                days.append(DayWeather(
                    date=date.fromisoformat(day_str),
                    temp=(t_max + t_min) / 2,
                    condition=condition,
                    snow=float(daily["snowfall_sum"][i] or 0),
                    rain=float(daily["rain_sum"][i] or 0),
                    wind_speed=float(daily["wind_speed_10m_max"][i] or 0),
                    icon=icon,
                ))
        except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
            raise WeatherUnavailable(f"Malformed forecast for {city}: {e!r}") from e

        return days
