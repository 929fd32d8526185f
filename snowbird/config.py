"""Configuration utilities.

Settings come from the environment, with an optional ``.env`` file in the
working directory loaded first. CLI options override them.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .providers.amadeus import DEFAULT_BASE_URL

WEATHER_SOURCES = ("openweather", "open-meteo")


@dataclass(frozen=True)
class Settings:
    openweather_api_key: Optional[str] = None
    amadeus_client_id: Optional[str] = None
    amadeus_client_secret: Optional[str] = None
    amadeus_base_url: str = DEFAULT_BASE_URL
    weather_source: str = "openweather"
    timeout: float = 30.0
    discord_webhook: Optional[str] = None

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        if load_dotenv_file:
            load_dotenv(find_dotenv(usecwd=True))
        return cls(
            openweather_api_key=os.getenv("OPENWEATHERMAP_API_KEY") or None,
            amadeus_client_id=os.getenv("AMADEUS_CLIENT_ID") or None,
            amadeus_client_secret=os.getenv("AMADEUS_CLIENT_SECRET") or None,
            amadeus_base_url=os.getenv("AMADEUS_BASE_URL") or DEFAULT_BASE_URL,
            weather_source=os.getenv("SNOWBIRD_WEATHER_SOURCE") or "openweather",
            timeout=float(os.getenv("SNOWBIRD_TIMEOUT") or 30.0),
            discord_webhook=os.getenv("SNOWBIRD_DISCORD_WEBHOOK") or None,
        )

    def amadeus_configured(self) -> bool:
        return all([self.amadeus_client_id, self.amadeus_client_secret])
