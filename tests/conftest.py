from __future__ import annotations

import asyncio
import itertools
import random
from typing import List, Optional

import pytest
from typer.testing import CliRunner

from matrix_rain.config import RainConfig
from matrix_rain.errors import FeedError
from matrix_rain.feed import FeedPayload
from matrix_rain.surface import Surface


class RecordingSurface(Surface):
    """Surface that remembers every draw call together with the state it used."""

    def __init__(self, width: int = 700, height: int = 280, font_size: int = 14) -> None:
        super().__init__(width, height, font_size)
        self.calls: list[tuple] = []

    def fill_rect(self, x, y, width, height) -> None:
        self.calls.append(("rect", x, y, width, height, self.fill_style, self.fill_alpha))

    def fill_text(self, text, x, y) -> None:
        self.calls.append(("text", text, x, y, self.fill_style, self.shadow_color, self.shadow_blur))

    @property
    def texts(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "text"]

    @property
    def rects(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "rect"]


class FakeFeed:
    """
    In-memory feed. ``batches`` lists how many payloads each call returns;
    once exhausted every call returns exactly what was asked for.
    """

    def __init__(self, batches: Optional[List[int]] = None, fail: bool = False) -> None:
        self.batches = list(batches or [])
        self.fail = fail
        self.calls: list[int] = []
        self._ids = itertools.count()

    async def fetch(self, size: int) -> list[FeedPayload]:
        self.calls.append(size)
        if self.fail:
            raise FeedError("feed is down")
        n = self.batches.pop(0) if self.batches else size
        return [self.payload() for _ in range(n)]

    def payload(self) -> FeedPayload:
        i = next(self._ids)
        return FeedPayload(user=f"user{i}", code=f"print({i})")


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


async def settle(rounds: int = 5) -> None:
    """Give freshly created tasks a chance to run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the user's config file and MATRIX_RAIN_* variables out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MATRIX_RAIN_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("MATRIX_RAIN_CONFIG", str(tmp_path / "missing.toml"))
    yield


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture()
def fake_feed() -> FakeFeed:
    return FakeFeed()


@pytest.fixture()
def config() -> RainConfig:
    # Fast timers so async tests finish quickly
    return RainConfig(
        interval_time=10,
        intro_duration=40,
        intro_interval=10,
        resize_debounce=20,
        poll_interval=3600,
        initial_pool_size=20,
    )


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()
