"""Best-day selection over the week ahead."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from .models import BestDayResult, DayScore, DayWeather, FlightOffer
from .providers.base import FlightProvider, WeatherProvider, WeatherUnavailable
from .scoring import (
    DEFAULT_WEIGHTS,
    ScoringWeights,
    compute_score,
    days_until_severe_weather,
    is_before_severe,
)

logger = logging.getLogger(__name__)

ORIGIN_CITY = "Minneapolis"
DESTINATION_CITY = "Las Vegas"
ORIGIN_AIRPORT = "MSP"
DESTINATION_AIRPORT = "LAS"

CANDIDATE_DAYS = 7
FORECAST_DAYS = CANDIDATE_DAYS + 1  # today + the week ahead
DEFAULT_TIMEOUT = 30.0  # seconds per collaborator call


async def _fetch_forecast(weather: WeatherProvider, city: str, timeout: float) -> list[DayWeather]:
    try:
        forecast = await asyncio.wait_for(weather.forecast(city), timeout)
    except asyncio.TimeoutError as e:
        raise WeatherUnavailable(f"Timed out fetching weather data for {city}") from e

    if len(forecast) < FORECAST_DAYS:
        raise WeatherUnavailable(
            f"Forecast for {city} has {len(forecast)} days, need {FORECAST_DAYS}"
        )
    return list(forecast[:FORECAST_DAYS])


async def _fetch_offers(
    flights: FlightProvider,
    departure_date: date,
    timeout: float,
) -> list[FlightOffer]:
    try:
        return await asyncio.wait_for(
            flights.offers(ORIGIN_AIRPORT, DESTINATION_AIRPORT, departure_date), timeout
        )
    except asyncio.TimeoutError:
        logger.warning("Flight search for %s timed out after %.0fs", departure_date, timeout)
        return []


def pick_best_day(day_scores: Sequence[DayScore]) -> DayScore:
    """Highest score wins; on a tie the earliest day is kept."""
    if not day_scores:
        raise ValueError("no day scores to choose from")
    best = day_scores[0]
    for current in day_scores[1:]:
        if current.score > best.score:
            best = current
    return best


async def find_best_day(
    weather: WeatherProvider,
    flights: FlightProvider,
    today: Optional[date] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    timeout: float = DEFAULT_TIMEOUT,
) -> BestDayResult:
    """
    Score each of the next 7 days and pick the best one to fly MSP → LAS.

    Both forecasts are fetched before any flight search; if either is
    unavailable the whole run fails with WeatherUnavailable. Days are
    searched one at a time, in order.

    A call that exceeds *timeout* is abandoned, not cancelled: its worker
    thread keeps running until the provider's own socket timeout fires,
    and asyncio.run() returns only once that thread is done.
    """
    today = today or date.today()

    vegas_forecast = await _fetch_forecast(weather, DESTINATION_CITY, timeout)
    origin_forecast = await _fetch_forecast(weather, ORIGIN_CITY, timeout)

    severe_offset = days_until_severe_weather(origin_forecast)
    if severe_offset is not None:
        logger.info("Severe weather expected in %s in %d day(s)", ORIGIN_CITY, severe_offset)

    upcoming_vegas = vegas_forecast[1:]
    upcoming_origin = origin_forecast[1:]

    day_scores: list[DayScore] = []
    for offset, (vegas_day, origin_day) in enumerate(zip(upcoming_vegas, upcoming_origin), start=1):
        candidate = today + timedelta(days=offset)

        offers = await _fetch_offers(flights, candidate, timeout)
        chosen = offers[0] if offers else None
        price = chosen.price if chosen else None

        score, breakdown = compute_score(
            price,
            vegas_day,
            origin_day,
            is_before_severe(offset, severe_offset),
            weights,
        )
        logger.debug("%s: score=%.2f price=%s", candidate, score, price)

        day_scores.append(DayScore(
            date=candidate,
            score=score,
            flight_price=price,
            flight=chosen,
            alternatives=tuple(offers[1:3]),
            breakdown=breakdown,
        ))

    return BestDayResult(
        best_day=pick_best_day(day_scores),
        day_scores=tuple(day_scores),
        origin_forecast=tuple(origin_forecast),
        destination_forecast=tuple(vegas_forecast),
    )
