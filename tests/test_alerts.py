"""Tests for advisories and Discord notifications."""

import http.client
import json
import urllib.error
from unittest.mock import MagicMock, patch

from snowbird import alerts
from tests.mock_data import make_result


class TestAdvisories:
    def test_none_for_quiet_week(self):
        assert alerts.build_advisories(make_result(best_price=189.4, max_snow=5.0)) == []

    def test_heavy_snow(self):
        advisories = alerts.build_advisories(make_result(max_snow=6.5))
        assert [a.kind for a in advisories] == ["heavy_snow"]
        assert "Heavy snowfall" in advisories[0].message

    def test_six_inches_is_not_heavy(self):
        assert alerts.build_advisories(make_result(max_snow=6.0)) == []

    def test_expensive_flight(self):
        advisories = alerts.build_advisories(make_result(best_price=512.0))
        assert [a.kind for a in advisories] == ["expensive_flight"]
        assert "$500" in advisories[0].message

    def test_both(self):
        kinds = {a.kind for a in alerts.build_advisories(make_result(best_price=600.0, max_snow=9.0))}
        assert kinds == {"heavy_snow", "expensive_flight"}


def test_should_notify_threshold():
    assert alerts.should_notify(make_result(best_score=60.0))
    assert not alerts.should_notify(make_result(best_score=59.9))
    assert alerts.should_notify(make_result(best_score=45.0), threshold=40)


class TestDiscordEmbed:
    def test_embed_contents(self, sample_result):
        embed = alerts.build_discord_embed(sample_result)
        assert "MSP → LAS" in embed["title"]
        assert "Friday, January 17" in embed["title"]
        assert "Score 72.5" in embed["description"]
        assert "Delta Air Lines 1234" in embed["description"]
        assert "$189.40" in embed["description"]
        assert embed["color"] == 0x00CC44
        assert embed["timestamp"].endswith("Z")

    def test_embed_lists_advisories(self):
        result = make_result(max_snow=8.0, best_score=50.0)
        embed = alerts.build_discord_embed(result, alerts.build_advisories(result))
        assert "Heavy snowfall" in embed["description"]
        assert embed["color"] == 0xFFAA00


class TestNotify:
    def test_dry_run_sends_nothing(self, sample_result):
        with patch("snowbird.alerts.urllib.request.urlopen") as urlopen:
            assert alerts.notify("https://discord.example/hook", sample_result, dry_run=True)
        urlopen.assert_not_called()

    def test_posts_embed(self, sample_result):
        resp = MagicMock()
        resp.status = 204
        resp.__enter__.return_value = resp

        with patch("snowbird.alerts.urllib.request.urlopen", return_value=resp) as urlopen:
            assert alerts.notify("https://discord.example/hook", sample_result)

        req = urlopen.call_args[0][0]
        assert req.full_url == "https://discord.example/hook"
        assert req.get_method() == "POST"
        body = json.loads(req.data.decode("utf-8"))
        assert len(body["embeds"]) == 1

    def test_failure_returns_false(self, sample_result):
        with patch(
            "snowbird.alerts.urllib.request.urlopen",
            side_effect=urllib.error.URLError("no route"),
        ):
            assert not alerts.notify("https://discord.example/hook", sample_result)

    def test_timeout_returns_false(self, sample_result):
        with patch("snowbird.alerts.urllib.request.urlopen", side_effect=TimeoutError("timed out")):
            assert not alerts.notify("https://discord.example/hook", sample_result)

    def test_bad_status_line_returns_false(self, sample_result):
        with patch(
            "snowbird.alerts.urllib.request.urlopen",
            side_effect=http.client.BadStatusLine(""),
        ):
            assert not alerts.notify("https://discord.example/hook", sample_result)
