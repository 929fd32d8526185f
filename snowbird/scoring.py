"""Best-day scoring model.

A candidate departure day earns points for a cheap flight, for miserable
weather in Minneapolis, for pleasant weather in Las Vegas, for snow, and
for getting out before a severe weather day arrives.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .models import DayWeather, ScoreBreakdown

# Flight price
IDEAL_FLIGHT_PRICE = 150.0
MAX_FLIGHT_VALUE = 300.0
MAX_FLIGHT_POINTS = 40.0

# Cold at origin
MAX_COLD_POINTS = 15.0
COLD_CEILING_F = 50.0

# Weather at destination
MAX_CLEAR_POINTS = 15.0
IDEAL_VEGAS_TEMP = 75.0
VEGAS_TEMP_TOLERANCE = 25.0

# Snow at origin
MAX_SNOW_INCHES = 4.0
MAX_SNOW_POINTS = 20.0
EXTRA_SNOW_INCHES = 1.0
EXTRA_SNOW_POINTS = 2.0

# Severe weather
BEFORE_SEVERE_BONUS = 10.0
SEVERE_SNOW_INCHES = 4.0
SEVERE_WINDCHILL_F = 0.0


@dataclass(frozen=True)
class ScoringWeights:
    """User preference multipliers applied to each component of the total."""
    flight: float = 1.0
    cold: float = 1.0
    vegas_weather: float = 1.0
    snow: float = 1.0
    before_severe: float = 1.0


DEFAULT_WEIGHTS = ScoringWeights()


def windchill(temp_f: float, wind_mph: float) -> float:
    """Effective temperature in °F (NWS formula, only at ≤ 50°F and ≥ 3 mph)."""
    if temp_f <= 50 and wind_mph >= 3:
        w = wind_mph ** 0.16
        return 35.74 + 0.6215 * temp_f - 35.75 * w + 0.4275 * temp_f * w
    return temp_f


def day_windchill(day: DayWeather) -> float:
    return windchill(day.temp, day.wind_speed)


def flight_points(price: Optional[float]) -> float:
    """Linear from full points at the ideal price down to zero at the ceiling."""
    if price is None:
        return 0.0
    if price <= IDEAL_FLIGHT_PRICE:
        return MAX_FLIGHT_POINTS
    if price >= MAX_FLIGHT_VALUE:
        return 0.0
    ratio = (MAX_FLIGHT_VALUE - price) / (MAX_FLIGHT_VALUE - IDEAL_FLIGHT_PRICE)
    return ratio * MAX_FLIGHT_POINTS


def cold_points(origin_day: DayWeather) -> float:
    wc = day_windchill(origin_day)
    if wc <= 0:
        return MAX_COLD_POINTS
    if wc < COLD_CEILING_F:
        return (COLD_CEILING_F - wc) / COLD_CEILING_F * MAX_COLD_POINTS
    return 0.0


def vegas_points(vegas_day: DayWeather) -> float:
    """Full points for a clear 75°F day; half credit when it isn't clear."""
    clear_ratio = 1.0 if vegas_day.condition == "Clear" else 0.5
    temp_diff = abs(vegas_day.temp - IDEAL_VEGAS_TEMP)
    temp_ratio = 1 - min(temp_diff / VEGAS_TEMP_TOLERANCE, 1)
    return MAX_CLEAR_POINTS * clear_ratio * temp_ratio


def snow_points(origin_day: DayWeather) -> float:
    return min(origin_day.snow / MAX_SNOW_INCHES, 1) * MAX_SNOW_POINTS


def extra_snow_points(origin_day: DayWeather) -> float:
    return EXTRA_SNOW_POINTS if origin_day.snow >= EXTRA_SNOW_INCHES else 0.0


def compute_score(
    flight_price: Optional[float],
    vegas_day: DayWeather,
    origin_day: DayWeather,
    is_before_severe: bool,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> tuple[float, ScoreBreakdown]:
    """
    Score one candidate departure day.

    Factors:
    1. Flight price (max 40): cheaper is better, nothing when no flight.
    2. Minneapolis cold (max 15): by windchill, full points at or below 0°F.
    3. Las Vegas weather (max 15): clear skies near 75°F.
    4. Minneapolis snow (max 20): saturates at 4 inches.
    5. Extra snow (2): at least 1 inch of snow.
    6. Severe weather bonus (10): leaving before the first severe day.

    The breakdown holds unweighted points; weights only enter the total.

    Returns (total score, breakdown).
    """
    fp = flight_points(flight_price)
    cp = cold_points(origin_day)
    vp = vegas_points(vegas_day)
    sp = snow_points(origin_day)
    xp = extra_snow_points(origin_day)
    sb = BEFORE_SEVERE_BONUS if is_before_severe else 0.0

    score = 0.0
    if flight_price is not None:
        score += fp * weights.flight
    score += cp * weights.cold
    score += vp * weights.vegas_weather
    score += sp * weights.snow
    score += xp * weights.snow
    score += sb * weights.before_severe

    breakdown = ScoreBreakdown(
        flight_points=fp,
        cold_points=cp,
        vegas_points=vp,
        snow_points=sp,
        extra_snow_points=xp,
        severe_bonus=sb,
    )
    return score, breakdown


def is_severe(day: DayWeather) -> bool:
    return day.snow >= SEVERE_SNOW_INCHES or day_windchill(day) <= SEVERE_WINDCHILL_F


def days_until_severe_weather(forecast: Sequence[DayWeather]) -> Optional[int]:
    """
    Find the first severe day in the week ahead.

    Args:
        forecast: today followed by the next 7 days (index 0 is today)

    Returns:
        Days from today to the first severe day (1-7), or None.
    """
    upcoming = list(forecast[1:8])
    for offset, day in enumerate(upcoming, start=1):
        if is_severe(day):
            return offset
    return None


def is_before_severe(offset: int, severe_offset: Optional[int]) -> bool:
    """True when departing *offset* days out beats the severe day."""
    return severe_offset is not None and offset < severe_offset
