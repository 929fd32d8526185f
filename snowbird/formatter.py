"""Output formatting for best-day results."""

import csv
import io
import json
import urllib.parse
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich import box
from rich.text import Text

from .models import BestDayResult, DayScore, DayWeather, FlightOffer, ScoreBreakdown
from .planner import DESTINATION_AIRPORT, ORIGIN_AIRPORT
from .scoring import windchill

console = Console()

CHART_WIDTH = 40
CHART_MAX_SCORE = 100.0

# (field, label, explanation)
BREAKDOWN_LABELS = [
    ("flight_points", "Airfare Value", "Higher means cheaper, better flight deals."),
    ("cold_points", "MN Cold Weather Bonus", "Cold in Minnesota makes a warm Vegas getaway more appealing."),
    ("vegas_points", "Vegas Weather Bonus", "Vegas is warm, clear and pleasant."),
    ("snow_points", "Snow Event Adjustment", "Snow in MN makes leaving more tempting."),
    ("extra_snow_points", "Extra Snowy Days Bonus", "At least an inch of snow on the ground."),
    ("severe_bonus", "Severe Weather Bonus", "You leave before severe weather hits MN."),
]

# OpenWeatherMap icon codes ("13d", "01n") by their two-digit prefix
ICON_GLYPHS = {
    "01": "☀️",
    "02": "🌤",
    "03": "☁️",
    "04": "☁️",
    "09": "🌧",
    "10": "🌦",
    "11": "⛈",
    "13": "❄️",
    "50": "🌫",
}

PERFECT_DAY = [
    "Flight Price: $150 (low enough to earn maximum flight points)",
    "Vegas Weather: A comfortable 75°F and sunny",
    "Minnesota Weather: Extremely cold (e.g., 0°F) with snow on the way",
    "Leaving just before a severe weather event hits Minnesota",
]


def score_style(score: float) -> str:
    """Gauge band: red below 40, yellow below 70, green above."""
    if score >= 70:
        return "bold green"
    if score >= 40:
        return "yellow"
    return "red"


def weather_glyph(icon: str) -> str:
    return ICON_GLYPHS.get(icon[:2], "") if icon else ""


def format_price(price: Optional[float]) -> str:
    return f"${price:.2f}" if price is not None else "No flights found"


def format_long_date(d: date) -> str:
    return f"{d:%B} {d.day}, {d.year}"


def format_time(dt: datetime) -> str:
    return dt.strftime("%m/%d %I:%M %p")


def google_flights_link(d: date) -> str:
    query = f"Flights from {ORIGIN_AIRPORT} to {DESTINATION_AIRPORT} on {d.isoformat()}"
    return f"https://www.google.com/travel/flights?q={urllib.parse.quote(query)}"


def print_breakdown(day: DayScore, show_zero: bool = True) -> None:
    """Print the itemized points behind a day's score."""
    table = Table(
        title=f"Score Breakdown for {day.date:%m/%d/%Y}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Criterion", style="bold")
    table.add_column("Points", justify="right")
    table.add_column("Why", style="dim")

    for field_name, label, why in BREAKDOWN_LABELS:
        value = getattr(day.breakdown, field_name)
        # Airfare value is always listed
        if not show_zero and value == 0 and field_name != "flight_points":
            continue
        table.add_row(label, f"{value:.2f}", why)

    table.add_row(
        Text("Total Score", style="bold"),
        Text(f"{day.score:.2f}", style=score_style(day.score)),
        "",
    )
    console.print(table)


def print_flight(day: DayScore) -> None:
    """Print the chosen flight and up to two alternatives."""
    console.print(f"[bold]Flight Price:[/bold] {format_price(day.flight_price)}")

    if not day.has_flight:
        console.print("[dim]No flight details available for this day.[/dim]")
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold cyan")
    table.add_column("", style="dim")
    table.add_column("Airline")
    table.add_column("Flight #")
    table.add_column("Departs", no_wrap=True)
    table.add_column("Arrives", no_wrap=True)
    table.add_column("Price", justify="right", style="bold")

    def add(tag: str, offer: FlightOffer) -> None:
        table.add_row(
            tag,
            offer.carrier,
            offer.flight_number,
            format_time(offer.departure),
            format_time(offer.arrival),
            f"${offer.price:.2f}",
        )

    add("selected", day.flight)
    for alt in day.alternatives:
        add("alt", alt)

    console.print(table)


def print_score_chart(
    day_scores: Sequence[DayScore],
    best: Optional[DayScore] = None,
    selected: Optional[DayScore] = None,
) -> None:
    """Print a bar chart of the week's scores."""
    console.print("\n[bold blue]Score Over the Next 7 Days[/bold blue]")
    for i, day in enumerate(day_scores, start=1):
        filled = int(round(min(max(day.score, 0), CHART_MAX_SCORE) / CHART_MAX_SCORE * CHART_WIDTH))
        bar = Text("█" * filled, style=score_style(day.score))
        bar.append("·" * (CHART_WIDTH - filled), style="dim")

        marker = ""
        if best is not None and day is best:
            marker += " 🏆"
        if selected is not None and day is selected and day is not best:
            marker += " ◀"

        line = Text(f"{i}  {day.date:%a %m/%d}  ")
        line.append(bar)
        line.append(f" {day.score:6.2f}{marker}")
        console.print(line)


def _forecast_table(
    title: str,
    forecast: Sequence[DayWeather],
    highlight: Optional[date],
    origin: bool,
) -> Table:
    table = Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Date")
    table.add_column("Temp", justify="right")
    table.add_column("")
    table.add_column("Condition")
    if origin:
        table.add_column("Snow", justify="right")
        table.add_column("Windchill", justify="right")
    else:
        table.add_column("Rain", justify="right")

    for d in forecast[1:8]:
        row = [f"{d.date:%m/%d/%Y}", f"{d.temp:.1f}°F", weather_glyph(d.icon), d.condition]
        if origin:
            row.append(f"{d.snow:.2f} in snow" if d.snow > 0 else "")
            row.append(f"{windchill(d.temp, d.wind_speed):.1f}°F")
        else:
            row.append(f"{d.rain:.2f} in rain" if d.rain > 0 else "")
        table.add_row(*row, style="bold reverse" if d.date == highlight else None)

    return table


def print_forecasts(result: BestDayResult, highlight: Optional[date] = None) -> None:
    highlight = highlight or result.best_day.date
    console.print(_forecast_table("Las Vegas 7-Day Forecast", result.destination_forecast, highlight, origin=False))
    console.print(_forecast_table("Minneapolis 7-Day Forecast", result.origin_forecast, highlight, origin=True))


def print_advisories(advisories: Sequence) -> None:
    for adv in advisories:
        console.print(f"[bold red]⚠ {adv.message}[/bold red]")


def print_day(result: BestDayResult, day: DayScore) -> None:
    """Detail view for one day chosen from the chart."""
    print_score_chart(result.day_scores, best=result.best_day, selected=day)
    console.print()
    print_breakdown(day, show_zero=True)
    print_flight(day)


def print_best_day(result: BestDayResult, advisories: Sequence = ()) -> None:
    """Full view: best day, breakdown, flights, chart and forecasts."""
    best = result.best_day

    console.print(
        f"\n[bold blue]❄️  → 🎰  Best day to fly {ORIGIN_AIRPORT} → {DESTINATION_AIRPORT}:[/bold blue] "
        f"[bold]{format_long_date(best.date)}[/bold]  "
        f"[{score_style(best.score)}]score {best.score:.2f}[/{score_style(best.score)}]"
    )
    print_advisories(advisories)

    print_breakdown(best, show_zero=False)
    print_flight(best)
    console.print(f"[dim]Check flights: {google_flights_link(best.date)}[/dim]")

    print_score_chart(result.day_scores, best=best)
    console.print()
    print_forecasts(result)

    console.print("[bold]What does a perfect (100) score day look like?[/bold]")
    for line in PERFECT_DAY:
        console.print(f"  • {line}")
    console.print()


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _offer_to_dict(offer: FlightOffer) -> dict:
    return {
        "price": offer.price,
        "carrier_code": offer.carrier_code,
        "carrier": offer.carrier,
        "flight_number": offer.flight_number,
        "departure": offer.departure.isoformat(),
        "arrival": offer.arrival.isoformat(),
    }


def _offer_from_dict(d: dict) -> FlightOffer:
    return FlightOffer(
        price=float(d["price"]),
        carrier_code=d["carrier_code"],
        carrier=d["carrier"],
        flight_number=d["flight_number"],
        departure=datetime.fromisoformat(d["departure"]),
        arrival=datetime.fromisoformat(d["arrival"]),
    )


def _day_to_dict(day: DayScore) -> dict:
    return {
        "date": day.date.isoformat(),
        "score": day.score,
        "flight_price": day.flight_price,
        "flight": _offer_to_dict(day.flight) if day.flight else None,
        "alternatives": [_offer_to_dict(o) for o in day.alternatives],
        "breakdown": dict(day.breakdown.items()),
    }


def _day_from_dict(d: dict) -> DayScore:
    return DayScore(
        date=date.fromisoformat(d["date"]),
        score=float(d["score"]),
        flight_price=d.get("flight_price"),
        flight=_offer_from_dict(d["flight"]) if d.get("flight") else None,
        alternatives=tuple(_offer_from_dict(o) for o in d.get("alternatives", [])),
        breakdown=ScoreBreakdown(**d.get("breakdown", {})),
    )


def _weather_to_dict(w: DayWeather) -> dict:
    return {
        "date": w.date.isoformat(),
        "temp": w.temp,
        "condition": w.condition,
        "snow": w.snow,
        "rain": w.rain,
        "wind_speed": w.wind_speed,
        "icon": w.icon,
    }


def _weather_from_dict(d: dict) -> DayWeather:
    return DayWeather(**{**d, "date": date.fromisoformat(d["date"])})


def result_to_dict(result: BestDayResult) -> dict:
    days = [_day_to_dict(d) for d in result.day_scores]
    best_index = list(result.day_scores).index(result.best_day)
    return {
        "best_day": days[best_index],
        "best_day_index": best_index,
        "day_scores": days,
        "origin_forecast": [_weather_to_dict(w) for w in result.origin_forecast],
        "destination_forecast": [_weather_to_dict(w) for w in result.destination_forecast],
    }


def result_from_dict(data: dict) -> BestDayResult:
    day_scores = tuple(_day_from_dict(d) for d in data["day_scores"])
    best_index = data.get("best_day_index")
    if best_index is None:
        best_date = data["best_day"]["date"]
        best_index = next(
            (i for i, d in enumerate(day_scores) if d.date.isoformat() == best_date), None
        )
        if best_index is None:
            raise ValueError(f"best day {best_date} is not among the day scores")
    elif not isinstance(best_index, int) or not 0 <= best_index < len(day_scores):
        raise ValueError(f"best_day_index {best_index!r} is out of range")
    return BestDayResult(
        best_day=day_scores[best_index],
        day_scores=day_scores,
        origin_forecast=tuple(_weather_from_dict(w) for w in data["origin_forecast"]),
        destination_forecast=tuple(_weather_from_dict(w) for w in data["destination_forecast"]),
    )


def result_to_json(result: BestDayResult) -> str:
    return json.dumps(result_to_dict(result), indent=2)


def load_result(path: Path) -> BestDayResult:
    with open(path) as fp:
        return result_from_dict(json.load(fp))


def day_scores_to_csv(day_scores: Sequence[DayScore]) -> str:
    """Convert the week's day scores to a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "date", "score", "flight_price", "carrier", "flight_number", "departure",
        "flight_points", "cold_points", "vegas_points", "snow_points",
        "extra_snow_points", "severe_bonus",
    ])
    for day in day_scores:
        writer.writerow([
            day.date.isoformat(),
            round(day.score, 4),
            day.flight_price if day.flight_price is not None else "",
            day.flight.carrier if day.flight else "",
            day.flight.flight_number if day.flight else "",
            day.flight.departure.isoformat() if day.flight else "",
            *(round(v, 4) for _, v in day.breakdown.items()),
        ])
    return output.getvalue()
