"""Weather/fare advisories and Discord notifications for a best-day run.

Advisories:
  - Heavy snow (more than 6 inches on any day) in the Minneapolis forecast
  - The best day's flight costs more than $500

Notification fires when the best day's score reaches a threshold
(60 by default).

Usage::

    from snowbird.alerts import build_advisories, notify

    advisories = build_advisories(result)
    if should_notify(result):
        notify(webhook_url, result, advisories)
"""

import json
import logging
import urllib.request
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .models import BestDayResult
from .providers.http import REQUEST_ERRORS

logger = logging.getLogger(__name__)

HEAVY_SNOW_INCHES = 6.0
EXPENSIVE_FLIGHT_PRICE = 500.0
SCORE_ALERT_THRESHOLD = 60.0


@dataclass(frozen=True)
class Advisory:
    """A warning worth showing next to the recommendation."""
    kind: str  # heavy_snow / expensive_flight
    message: str


def build_advisories(result: BestDayResult) -> list[Advisory]:
    """Collect advisories for a result (may be empty)."""
    advisories: list[Advisory] = []

    max_snow = max((d.snow for d in result.origin_forecast), default=0.0)
    if max_snow > HEAVY_SNOW_INCHES:
        advisories.append(Advisory(
            kind="heavy_snow",
            message="Severe Weather Alert: Heavy snowfall expected in Minnesota!",
        ))

    price = result.best_day.flight_price
    if price is not None and price > EXPENSIVE_FLIGHT_PRICE:
        advisories.append(Advisory(
            kind="expensive_flight",
            message=f"Expensive Flight Alert: Flights cost more than ${EXPENSIVE_FLIGHT_PRICE:.0f}!",
        ))

    return advisories


def should_notify(result: BestDayResult, threshold: float = SCORE_ALERT_THRESHOLD) -> bool:
    return result.best_day.score >= threshold


def build_discord_embed(result: BestDayResult, advisories: Optional[list[Advisory]] = None) -> dict:
    """Build a Discord embed dict for the best day."""
    best = result.best_day
    title = f"❄️ → 🎰 Best day to fly MSP → LAS: {best.date:%A, %B %d}"

    lines = [f"🏆 **Score {best.score:.1f}**"]
    if best.has_flight:
        lines.append(
            f"✈ {best.flight.carrier} {best.flight.flight_number} · "
            f"departs {best.flight.departure:%I:%M %p}"
        )
        lines.append(f"💰 **${best.flight_price:.2f}** one-way")
    else:
        lines.append("✈ No flights found")
    for adv in advisories or []:
        lines.append(f"⚠️ {adv.message}")

    color = 0x00CC44 if best.score >= 70 else 0xFFAA00 if best.score >= 40 else 0xFF4444

    return {
        "title": title,
        "description": "\n".join(lines),
        "color": color,
        "footer": {"text": "snowbird"},
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


def notify(
    webhook_url: str,
    result: BestDayResult,
    advisories: Optional[list[Advisory]] = None,
    dry_run: bool = False,
) -> bool:
    """Send a Discord webhook notification for the best day.

    Returns:
        True if the notification was sent (or dry_run=True), False on error.
    """
    if dry_run:
        logger.info("[dry-run] Would notify: %s score %.1f", result.best_day.date, result.best_day.score)
        return True

    payload = json.dumps({"embeds": [build_discord_embed(result, advisories)]}).encode("utf-8")
    req = urllib.request.Request(
        webhook_url,
        data=payload,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=10) as resp:
            return resp.status in (200, 204)
    except REQUEST_ERRORS as e:
        logger.warning("Discord webhook failed: %s", e)
        return False
