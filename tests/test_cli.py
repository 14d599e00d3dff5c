from __future__ import annotations

import json

from matrix_rain.__main__ import app
from matrix_rain.errors import FeedError
from matrix_rain.feed import FeedPayload


def _payloads(self, size):
    return [FeedPayload("neo", "wake_up()"), FeedPayload("trinity", "follow()")][:size]


def test_version(runner):
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "matrix-rain" in result.stdout


def test_feed_table(runner, monkeypatch):
    monkeypatch.setattr("matrix_rain.commands.feed.FeedClient.fetch_sync", _payloads)
    result = runner.invoke(app, ["feed", "--size", "2"])
    assert result.exit_code == 0, result.output
    assert "neo" in result.stdout
    assert "trinity" in result.stdout
    assert "2 of 2" in result.stdout


def test_feed_json(runner, monkeypatch):
    monkeypatch.setattr("matrix_rain.commands.feed.FeedClient.fetch_sync", _payloads)
    result = runner.invoke(app, ["feed", "-n", "1", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"user": "neo", "code": "wake_up()"}]


def test_feed_failure_exits_nonzero(runner, monkeypatch):
    def boom(self, size):
        raise FeedError("feed is down")

    monkeypatch.setattr("matrix_rain.commands.feed.FeedClient.fetch_sync", boom)
    result = runner.invoke(app, ["feed"])
    assert result.exit_code == 1


def test_invalid_config_exits_with_usage_code(runner, monkeypatch):
    monkeypatch.setenv("MATRIX_RAIN_FONT_SIZE", "0")
    result = runner.invoke(app, ["feed"])
    assert result.exit_code == 2


def test_rain_passes_options_through(runner, monkeypatch):
    seen = {}

    async def fake_run_rain(cfg, feed, *, skip_intro=False, console=None):
        seen.update(cfg=cfg, url=feed.url, skip_intro=skip_intro)

    monkeypatch.setattr("matrix_rain.commands.rain.run_rain", fake_run_rain)
    result = runner.invoke(app, ["--feed-url", "http://feed.test", "--font-size", "10", "rain", "--no-intro"])

    assert result.exit_code == 0, result.output
    assert seen["url"] == "http://feed.test"
    assert seen["cfg"].font_size == 10
    assert seen["skip_intro"] is True
