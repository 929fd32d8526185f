"""Amadeus Flight Offers Search provider."""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Optional

from .base import FlightProvider
from .http import REQUEST_ERRORS, get_json, post_form
from ..models import FlightOffer

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.amadeus.com"
TOKEN_PATH = "/v1/security/oauth2/token"
OFFERS_PATH = "/v2/shopping/flight-offers"

MAX_RESULTS = 20          # offers requested from the API
MAX_OFFERS = 3            # offers handed back (cheapest + 2 alternatives)
EARLIEST_DEPARTURE_HOUR = 6

MAJOR_AIRLINES = ["DL", "AA", "UA", "WN", "AS", "B6", "NK"]
AIRLINE_NAMES = {
    "DL": "Delta Air Lines",
    "AA": "American Airlines",
    "UA": "United Airlines",
    "WN": "Southwest Airlines",
    "AS": "Alaska Airlines",
    "B6": "JetBlue Airways",
    "NK": "Spirit Airlines",
    "SY": "Sun Country",
}


def carrier_name(code: str) -> str:
    return AIRLINE_NAMES.get(code, code)


def meets_criteria(offer: dict) -> bool:
    """Non-stop, leaves at or after 06:00 local, flown by a major carrier."""
    itineraries = offer.get("itineraries") or []
    if not itineraries:
        return False
    segments = itineraries[0].get("segments") or []
    if not segments:
        return False
    if len(segments) > 1:
        return False

    departure = datetime.fromisoformat(segments[0]["departure"]["at"])
    if departure.hour < EARLIEST_DEPARTURE_HOUR:
        return False

    return any(seg.get("carrierCode") in MAJOR_AIRLINES for seg in segments)


def extract_offer(offer: dict) -> FlightOffer:
    segment = offer["itineraries"][0]["segments"][0]
    code = segment["carrierCode"]
    return FlightOffer(
        price=float(offer["price"]["grandTotal"]),
        carrier_code=code,
        carrier=carrier_name(code),
        flight_number=str(segment["number"]),
        departure=datetime.fromisoformat(segment["departure"]["at"]),
        arrival=datetime.fromisoformat(segment["arrival"]["at"]),
    )


class AmadeusFlightProvider(FlightProvider):
    """One-way offers from the Amadeus self-service API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token: Optional[str] = None

    @property
    def source_name(self) -> str:
        return "amadeus"

    async def offers(self, origin: str, destination: str, departure_date: date) -> list[FlightOffer]:
        """Search Amadeus for qualifying offers; lookup failures read as no flights."""
        try:
            token = await self._access_token()
            if not token:
                return []
            params = {
                "originLocationCode": origin.upper(),
                "destinationLocationCode": destination.upper(),
                "departureDate": departure_date.isoformat(),
                "adults": 1,
                "nonStop": "true",
                "max": MAX_RESULTS,
                "currencyCode": "USD",
            }
            raw = await asyncio.to_thread(
                get_json,
                self.base_url + OFFERS_PATH,
                params,
                {"Authorization": f"Bearer {token}"},
                self.timeout,
            )
        except REQUEST_ERRORS as e:
            logger.warning(
                "Amadeus search %s->%s on %s failed: %s", origin, destination, departure_date, e
            )
            return []

        return self._parse_offers(raw)

    async def _access_token(self) -> Optional[str]:
        if self._token:
            return self._token

        data = await asyncio.to_thread(
            post_form,
            self.base_url + TOKEN_PATH,
            {
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            self.timeout,
        )
        self._token = data.get("access_token") if isinstance(data, dict) else None
        if not self._token:
            logger.warning("Amadeus token response had no access_token")
        return self._token

    def _parse_offers(self, raw: Any) -> list[FlightOffer]:
        """Filter, sort by price and keep the cheapest few offers."""
        if not isinstance(raw, dict):
            return []
        data = raw.get("data")
        if not data or not isinstance(data, list):
            logger.info("No flight offers returned (Amadeus)")
            return []

        parsed: list[FlightOffer] = []
        for offer in data:
            try:
                if not meets_criteria(offer):
                    continue
                parsed.append(extract_offer(offer))
            except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
                logger.debug("Skipping malformed offer %s: %r", offer.get("id") if isinstance(offer, dict) else "?", e)

        parsed.sort(key=lambda o: o.price)
        return parsed[:MAX_OFFERS]
