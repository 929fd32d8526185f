"""Snowbird CLI - find the best day to fly from Minneapolis to Las Vegas."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from . import alerts as alerts_mod
from .config import WEATHER_SOURCES, Settings
from .formatter import (
    console,
    day_scores_to_csv,
    load_result,
    print_best_day,
    print_day,
    result_to_json,
)
from .models import BestDayResult
from .planner import find_best_day
from .providers import (
    AmadeusFlightProvider,
    OpenMeteoProvider,
    OpenWeatherProvider,
    WeatherUnavailable,
)
from .scoring import ScoringWeights, windchill as windchill_f

app = typer.Typer(
    name="snowbird",
    help="❄️ → 🎰 Find the best day this week to trade Minneapolis snow for Las Vegas sun",
    rich_markup_mode="rich",
)

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _get_weather_provider(source: str, settings: Settings, timeout: float):
    """Return the weather provider for a source name.

    *timeout* is also the provider's socket timeout.
    """
    if source == "open-meteo":
        return OpenMeteoProvider(timeout=timeout)
    if source == "openweather":
        if not settings.openweather_api_key:
            console.print("[red]OPENWEATHERMAP_API_KEY is not set (or use --source open-meteo).[/red]")
            raise typer.Exit(1)
        return OpenWeatherProvider(settings.openweather_api_key, timeout=timeout)
    console.print(f"[red]Unknown weather source: {source}. Choose from: {', '.join(WEATHER_SOURCES)}[/red]")
    raise typer.Exit(1)


def _get_flight_provider(settings: Settings, timeout: float) -> AmadeusFlightProvider:
    if not settings.amadeus_configured():
        console.print("[red]AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET must be set.[/red]")
        raise typer.Exit(1)
    return AmadeusFlightProvider(
        settings.amadeus_client_id,
        settings.amadeus_client_secret,
        base_url=settings.amadeus_base_url,
        timeout=timeout,
    )


def _show_selected(result: BestDayResult, day: int) -> None:
    try:
        selected = result.day(day)
    except IndexError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    print_day(result, selected)


def _write_output(result: BestDayResult, output: str) -> None:
    if output.endswith(".csv"):
        with open(output, "w", newline="") as fp:
            fp.write(day_scores_to_csv(result.day_scores))
        console.print(f"[green]Day scores saved to {output} (CSV)[/green]")
    else:
        with open(output, "w") as fp:
            fp.write(result_to_json(result))
        console.print(f"[green]Result saved to {output} (JSON)[/green]")


@app.command()
def best_day(
    source: Annotated[Optional[str], typer.Option("--source", "-s", help="Weather source: openweather, open-meteo")] = None,
    flight_weight: Annotated[float, typer.Option(help="Weight for the airfare score")] = 1.0,
    cold_weight: Annotated[float, typer.Option(help="Weight for Minneapolis cold")] = 1.0,
    vegas_weight: Annotated[float, typer.Option(help="Weight for Las Vegas weather")] = 1.0,
    snow_weight: Annotated[float, typer.Option(help="Weight for Minneapolis snow")] = 1.0,
    severe_weight: Annotated[float, typer.Option(help="Weight for leaving before severe weather")] = 1.0,
    timeout: Annotated[Optional[float], typer.Option("--timeout", "-t", help="Seconds to wait for each API call")] = None,
    output: Annotated[Optional[str], typer.Option("-o", help="Output file path (.json or .csv)")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    day: Annotated[Optional[int], typer.Option("--day", "-d", help="Also show the breakdown for day N (1 = tomorrow)")] = None,
    webhook: Annotated[Optional[str], typer.Option("--webhook", "-w", help="Discord webhook URL")] = None,
    notify_threshold: Annotated[float, typer.Option(help="Notify when the best score reaches this")] = alerts_mod.SCORE_ALERT_THRESHOLD,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Don't actually send the notification")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
):
    """
    🏆 Score the next 7 days and pick the best one to fly MSP → LAS.

    Examples:

      snowbird best-day

      snowbird best-day --source open-meteo --flight-weight 2 -o week.json

      snowbird best-day --webhook https://discord.com/api/webhooks/... --notify-threshold 70
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = Settings.from_env()
    timeout = timeout or settings.timeout
    weather = _get_weather_provider(source or settings.weather_source, settings, timeout)
    flights = _get_flight_provider(settings, timeout)
    weights = ScoringWeights(
        flight=flight_weight,
        cold=cold_weight,
        vegas_weather=vegas_weight,
        snow=snow_weight,
        before_severe=severe_weight,
    )

    if not as_json:
        console.print(f"[dim]Checking weather ({weather.source_name}) and flights for the next 7 days...[/dim]")

    try:
        result = asyncio.run(find_best_day(
            weather,
            flights,
            weights=weights,
            timeout=timeout,
        ))
    except WeatherUnavailable as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    advisories = alerts_mod.build_advisories(result)

    if output:
        _write_output(result, output)

    if as_json:
        print(result_to_json(result))
    else:
        print_best_day(result, advisories)
        if day is not None:
            _show_selected(result, day)

    webhook = webhook or settings.discord_webhook
    if webhook and alerts_mod.should_notify(result, notify_threshold):
        sent = alerts_mod.notify(webhook, result, advisories, dry_run=dry_run)
        if dry_run:
            console.print("[dim](dry-run – notification skipped)[/dim]")
        elif sent:
            console.print("✅ Discord notification sent")
        else:
            console.print("[yellow]Discord notification failed.[/yellow]")


@app.command()
def show(
    path: Annotated[Path, typer.Argument(help="Result JSON saved with best-day -o")],
    day: Annotated[Optional[int], typer.Option("--day", "-d", help="Show the breakdown for day N (1 = tomorrow)")] = None,
):
    """
    📈 Re-render a saved result without fetching anything.

    Examples:

      snowbird show week.json

      snowbird show week.json --day 3
    """
    if not path.exists():
        console.print(f"[red]No such file: {path}[/red]")
        raise typer.Exit(1)

    try:
        result = load_result(path)
    except (ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Could not read {path}: {e}[/red]")
        raise typer.Exit(1)

    if day is None:
        print_best_day(result, alerts_mod.build_advisories(result))
    else:
        _show_selected(result, day)


@app.command()
def windchill(
    temp: Annotated[float, typer.Argument(help="Temperature in °F")],
    wind: Annotated[float, typer.Argument(help="Wind speed in mph")],
):
    """
    🌬  Compute the windchill for a temperature and wind speed.

    Example:

      snowbird windchill -- -5 20
    """
    console.print(f"{windchill_f(temp, wind):.1f}°F")


def main():
    app()


if __name__ == "__main__":
    main()
