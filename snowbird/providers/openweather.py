"""OpenWeatherMap One Call daily forecast provider."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .base import WeatherProvider, WeatherUnavailable
from .http import REQUEST_ERRORS, get_json
from ..models import DayWeather

logger = logging.getLogger(__name__)

GEO_URL = "https://api.openweathermap.org/geo/1.0/direct"
ONECALL_URL = "https://api.openweathermap.org/data/3.0/onecall"

FORECAST_DAYS = 8
MM_PER_INCH = 25.4
DEFAULT_TZ = "America/Chicago"


class OpenWeatherProvider(WeatherProvider):
    """Daily forecasts from OpenWeatherMap (geocoding + One Call 3.0)."""

    def __init__(self, api_key: str, timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout

    @property
    def source_name(self) -> str:
        return "openweather"

    async def forecast(self, city: str) -> list[DayWeather]:
        coords = await self._geocode(city)
        if coords is None:
            raise WeatherUnavailable(f"Could not find a location for {city!r}")

        lat, lon = coords
        params = {
            "lat": lat,
            "lon": lon,
            "exclude": "hourly,minutely,current,alerts",
            "units": "imperial",
            "appid": self.api_key,
        }
        try:
            raw = await asyncio.to_thread(get_json, ONECALL_URL, params, None, self.timeout)
        except REQUEST_ERRORS as e:
            logger.warning("OpenWeatherMap forecast for %s failed: %s", city, e)
            raise WeatherUnavailable(f"Failed to fetch weather data for {city}: {e}") from e

        return self._parse_daily(raw, city)

    async def _geocode(self, city: str) -> Optional[tuple[float, float]]:
        params = {"q": city, "limit": 1, "appid": self.api_key}
        try:
            data = await asyncio.to_thread(get_json, GEO_URL, params, None, self.timeout)
        except REQUEST_ERRORS as e:
            logger.warning("OpenWeatherMap geocoding for %s failed: %s", city, e)
            raise WeatherUnavailable(f"Failed to geocode {city}: {e}") from e

        if not data:
            return None
        try:
            return float(data[0]["lat"]), float(data[0]["lon"])
        except (KeyError, TypeError, ValueError, IndexError):
            return None

    def _parse_daily(self, raw: Any, city: str) -> list[DayWeather]:
        """Parse a One Call response into DayWeather entries.

        Precipitation comes back in millimetres even with imperial units,
        so snow and rain are converted to inches.
        """
        if not isinstance(raw, dict) or not raw.get("daily"):
            raise WeatherUnavailable(f"No daily forecast returned for {city}")

        try:
            tz = ZoneInfo(raw.get("timezone") or DEFAULT_TZ)
        except (ZoneInfoNotFoundError, ValueError):
            tz = ZoneInfo(DEFAULT_TZ)

        days: list[DayWeather] = []
        try:
            for day in raw["daily"][:FORECAST_DAYS]:
                weather = day["weather"][0]
                days.append(DayWeather(
                    date=datetime.fromtimestamp(day["dt"], tz).date(),
                    temp=float(day["temp"]["day"]),
                    condition=weather["main"],
                    snow=float(day.get("snow") or 0) / MM_PER_INCH,
                    rain=float(day.get("rain") or 0) / MM_PER_INCH,
                    wind_speed=float(day["wind_speed"]),
                    icon=weather.get("icon", ""),
                ))
        except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
            raise WeatherUnavailable(f"Malformed forecast for {city}: {e!r}") from e

        return days
