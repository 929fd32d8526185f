"""Weather and flight provider interfaces."""

from abc import ABC, abstractmethod
from datetime import date

from ..models import DayWeather, FlightOffer


class SnowbirdError(Exception):
    """Base class for snowbird errors."""


class WeatherUnavailable(SnowbirdError):
    """A city's forecast could not be resolved, fetched or parsed."""


class WeatherProvider(ABC):
    """Abstract base class for daily forecast sources."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Short name of the forecast source."""
        ...

    @abstractmethod
    async def forecast(self, city: str) -> list[DayWeather]:
        """
        Fetch the daily forecast for a city.

        Args:
            city: City name, e.g. "Minneapolis"

        Returns:
            Today plus the next 7 days (8 entries), oldest first.

        Raises:
            WeatherUnavailable: geocoding, network or payload failure.
        """
        ...


class FlightProvider(ABC):
    """Abstract base class for one-way flight offer sources."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        ...

    @abstractmethod
    async def offers(self, origin: str, destination: str, departure_date: date) -> list[FlightOffer]:
        """
        Search qualifying one-way offers for an exact date.

        Args:
            origin: IATA airport code (e.g. "MSP")
            destination: IATA airport code (e.g. "LAS")
            departure_date: Day of departure

        Returns:
            Up to 3 offers, cheapest first. Empty when nothing qualifies
            or the lookup failed.
        """
        ...
