"""Data models for snowbird best-day search."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DayWeather:
    """One calendar day of forecast for one city."""
    date: date
    temp: float         # °F
    condition: str      # e.g. Clear / Clouds / Snow
    snow: float = 0.0   # inches
    rain: float = 0.0   # inches
    wind_speed: float = 0.0  # mph
    icon: str = ""


@dataclass(frozen=True)
class FlightOffer:
    """A priced one-way itinerary."""
    price: float  # USD grand total
    carrier_code: str
    carrier: str
    flight_number: str
    departure: datetime  # local time at origin
    arrival: datetime    # local time at destination

    @property
    def flight_no(self) -> str:
        return f"{self.carrier_code} {self.flight_number}"


@dataclass(frozen=True)
class ScoreBreakdown:
    """Unweighted per-criterion points behind a day's score."""
    flight_points: float = 0.0
    cold_points: float = 0.0
    vegas_points: float = 0.0
    snow_points: float = 0.0
    extra_snow_points: float = 0.0
    severe_bonus: float = 0.0

    def items(self) -> list[tuple[str, float]]:
        return [
            ("flight_points", self.flight_points),
            ("cold_points", self.cold_points),
            ("vegas_points", self.vegas_points),
            ("snow_points", self.snow_points),
            ("extra_snow_points", self.extra_snow_points),
            ("severe_bonus", self.severe_bonus),
        ]


@dataclass(frozen=True)
class DayScore:
    """Score for one candidate departure date."""
    date: date
    score: float
    flight_price: Optional[float]
    flight: Optional[FlightOffer]
    alternatives: tuple[FlightOffer, ...] = ()
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    @property
    def has_flight(self) -> bool:
        return self.flight is not None


@dataclass(frozen=True)
class BestDayResult:
    """The winning day plus everything needed to render the week."""
    best_day: DayScore
    day_scores: tuple[DayScore, ...]
    origin_forecast: tuple[DayWeather, ...]
    destination_forecast: tuple[DayWeather, ...]

    def day(self, offset: int) -> DayScore:
        """Return the day score for *offset* (1 = tomorrow)."""
        if not 1 <= offset <= len(self.day_scores):
            raise IndexError(f"day must be between 1 and {len(self.day_scores)}")
        return self.day_scores[offset - 1]
