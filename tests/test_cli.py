"""Tests for the snowbird CLI."""

import json
from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from snowbird.cli import _get_flight_provider, _get_weather_provider, app
from snowbird.config import Settings
from snowbird.formatter import result_to_json
from snowbird.planner import DESTINATION_CITY, ORIGIN_CITY
from snowbird.providers.base import WeatherUnavailable
from tests.test_planner import FakeFlights, FakeWeather, week

runner = CliRunner()


@pytest.fixture
def console_buf():
    """Route rich output to a wide in-memory console."""
    buf = StringIO()
    wide = Console(file=buf, no_color=True, width=200)
    with patch("snowbird.cli.console", wide), patch("snowbird.formatter.console", wide):
        yield buf


@pytest.fixture
def settings(monkeypatch):
    s = Settings(
        openweather_api_key="ow-key",
        amadeus_client_id="id",
        amadeus_client_secret="secret",
    )
    monkeypatch.setattr("snowbird.cli.Settings.from_env", classmethod(lambda cls: s))
    return s


@pytest.fixture
def saved_result(tmp_path, sample_result):
    path = tmp_path / "week.json"
    path.write_text(result_to_json(sample_result))
    return path


def test_windchill():
    result = runner.invoke(app, ["windchill", "51", "10"])
    assert result.exit_code == 0
    assert "51.0°F" in result.output


def test_windchill_negative():
    result = runner.invoke(app, ["windchill", "--", "-10", "20"])
    assert result.exit_code == 0
    assert "-" in result.output


class TestShow:
    def test_show_best_day(self, saved_result, console_buf):
        result = runner.invoke(app, ["show", str(saved_result)])
        assert result.exit_code == 0
        assert "January 17, 2025" in console_buf.getvalue()

    def test_show_selected_day(self, saved_result, console_buf):
        result = runner.invoke(app, ["show", str(saved_result), "--day", "4"])
        assert result.exit_code == 0
        text = console_buf.getvalue()
        assert "Score Breakdown for 01/19/2025" in text
        assert "No flights found" in text

    def test_show_day_out_of_range(self, saved_result, console_buf):
        result = runner.invoke(app, ["show", str(saved_result), "--day", "9"])
        assert result.exit_code == 1
        assert "between 1 and 7" in console_buf.getvalue()

    def test_show_missing_file(self, tmp_path, console_buf):
        result = runner.invoke(app, ["show", str(tmp_path / "nope.json")])
        assert result.exit_code == 1

    def test_show_stale_best_day_index(self, tmp_path, sample_result, console_buf):
        data = json.loads(result_to_json(sample_result))
        data["best_day_index"] = 12
        path = tmp_path / "stale.json"
        path.write_text(json.dumps(data))

        result = runner.invoke(app, ["show", str(path)])

        assert result.exit_code == 1
        assert "Could not read" in console_buf.getvalue()

    def test_show_bad_file(self, tmp_path, console_buf):
        path = tmp_path / "bad.json"
        path.write_text('{"day_scores": []}')
        result = runner.invoke(app, ["show", str(path)])
        assert result.exit_code == 1
        assert "Could not read" in console_buf.getvalue()


def fake_weather() -> FakeWeather:
    return FakeWeather({
        DESTINATION_CITY: week(temp=75.0, condition="Clear"),
        ORIGIN_CITY: week(),
    })


class TestBestDay:
    def test_json_output(self, settings, monkeypatch):
        monkeypatch.setattr("snowbird.cli._get_weather_provider", lambda source, s, timeout: fake_weather())
        monkeypatch.setattr("snowbird.cli._get_flight_provider", lambda s, timeout: FakeFlights())

        result = runner.invoke(app, ["best-day", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["day_scores"]) == 7
        assert data["best_day_index"] == 0

    def test_writes_output_file(self, settings, monkeypatch, tmp_path, console_buf):
        monkeypatch.setattr("snowbird.cli._get_weather_provider", lambda source, s, timeout: fake_weather())
        monkeypatch.setattr("snowbird.cli._get_flight_provider", lambda s, timeout: FakeFlights())
        out = tmp_path / "week.csv"

        result = runner.invoke(app, ["best-day", "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_text().startswith("date,score,flight_price")
        assert "Best day to fly MSP → LAS" in console_buf.getvalue()

    def test_weather_failure(self, settings, monkeypatch, console_buf):
        weather = FakeWeather({}, fail_for=(DESTINATION_CITY,))
        monkeypatch.setattr("snowbird.cli._get_weather_provider", lambda source, s, timeout: weather)
        monkeypatch.setattr("snowbird.cli._get_flight_provider", lambda s, timeout: FakeFlights())

        result = runner.invoke(app, ["best-day"])

        assert result.exit_code == 1
        assert "Failed to fetch weather data for Las Vegas" in console_buf.getvalue()

    def test_missing_amadeus_credentials(self, monkeypatch, console_buf):
        monkeypatch.setattr(
            "snowbird.cli.Settings.from_env",
            classmethod(lambda cls: Settings(openweather_api_key="ow-key")),
        )
        result = runner.invoke(app, ["best-day"])
        assert result.exit_code == 1
        assert "AMADEUS_CLIENT_ID" in console_buf.getvalue()

    def test_missing_openweather_key(self, monkeypatch, console_buf):
        monkeypatch.setattr(
            "snowbird.cli.Settings.from_env",
            classmethod(lambda cls: Settings(amadeus_client_id="id", amadeus_client_secret="s")),
        )
        result = runner.invoke(app, ["best-day", "--source", "openweather"])
        assert result.exit_code == 1
        assert "OPENWEATHERMAP_API_KEY" in console_buf.getvalue()

    def test_unknown_source(self, settings, console_buf):
        result = runner.invoke(app, ["best-day", "--source", "farmers-almanac"])
        assert result.exit_code == 1
        assert "Unknown weather source" in console_buf.getvalue()

    def test_webhook_dry_run(self, settings, monkeypatch, console_buf):
        monkeypatch.setattr("snowbird.cli._get_weather_provider", lambda source, s, timeout: fake_weather())
        monkeypatch.setattr("snowbird.cli._get_flight_provider", lambda s, timeout: FakeFlights())

        with patch("snowbird.alerts.urllib.request.urlopen") as urlopen:
            result = runner.invoke(app, [
                "best-day", "--webhook", "https://discord.example/hook",
                "--notify-threshold", "0", "--dry-run",
            ])

        assert result.exit_code == 0
        urlopen.assert_not_called()
        assert "dry-run" in console_buf.getvalue()

    def test_timeout_reaches_providers(self, settings, monkeypatch, console_buf):
        built = {}

        def weather_for(source, s, timeout):
            built["weather"] = timeout
            return fake_weather()

        def flights_for(s, timeout):
            built["flights"] = timeout
            return FakeFlights()

        monkeypatch.setattr("snowbird.cli._get_weather_provider", weather_for)
        monkeypatch.setattr("snowbird.cli._get_flight_provider", flights_for)

        result = runner.invoke(app, ["best-day", "--timeout", "4"])

        assert result.exit_code == 0
        assert built == {"weather": 4.0, "flights": 4.0}

        runner.invoke(app, ["best-day"])
        assert built == {"weather": settings.timeout, "flights": settings.timeout}

    def test_providers_get_timeout(self):
        s = Settings(amadeus_client_id="id", amadeus_client_secret="secret", timeout=7.5)

        assert _get_weather_provider("open-meteo", s, s.timeout).timeout == 7.5
        assert _get_weather_provider("openweather", Settings(openweather_api_key="k"), 3.0).timeout == 3.0
        assert _get_flight_provider(s, s.timeout).timeout == 7.5


def test_weather_unavailable_is_snowbird_error():
    from snowbird.providers import SnowbirdError

    assert issubclass(WeatherUnavailable, SnowbirdError)
