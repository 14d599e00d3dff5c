# matrix_rain/intro.py
from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Callable, Optional

from .config import RainConfig
from .surface import Surface
from .ui.theme import (
    BACKGROUND,
    GLOW_BLUR,
    INTRO_COLUMN_GAP,
    INTRO_FADE_ALPHA,
    INTRO_SPECIAL_CHANCE,
    INTRO_SPECIAL_GLYPH,
    INTRO_STYLE,
)

log = logging.getLogger(__name__)


class Intro:
    """
    Countdown of flickering digits shown before the rain starts.

    ``start()`` redraws the grid every ``intro_interval`` ms and finishes after
    ``intro_duration`` ms, leaving the surface black and calling the
    continuation registered with ``then()`` exactly once.
    """

    def __init__(self, surface: Surface, config: RainConfig, rng: Optional[random.Random] = None) -> None:
        self.surface = surface
        self.config = config
        self.rng = rng or random.Random()

        self.x_max = surface.width // config.font_size
        self.y_max = math.ceil(surface.height / config.font_size)

        self._continuation: Optional[Callable[[], None]] = None
        self._ticker: Optional[asyncio.Task] = None
        self._timeout: Optional[asyncio.TimerHandle] = None
        self._finished = asyncio.Event()
        self.ticks = 0

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    def then(self, fn: Callable[[], None]) -> "Intro":
        self._continuation = fn
        return self

    def start(self) -> "Intro":
        log.debug("starting intro")
        loop = asyncio.get_running_loop()
        self._ticker = loop.create_task(self._tick())
        self._timeout = loop.call_later(self.config.intro_duration / 1000, self._end)
        return self

    async def wait(self) -> None:
        await self._finished.wait()

    def cancel(self) -> None:
        """Stop without calling the continuation. Waiters are released."""
        self._stop_timers()
        self._continuation = None
        self._finished.set()

    def draw(self) -> None:
        self.ticks += 1
        self._draw_background()
        self._draw_numbers()

    def _draw_background(self) -> None:
        s = self.surface
        s.set_shadow(BACKGROUND)
        s.set_fill(BACKGROUND, INTRO_FADE_ALPHA)
        s.fill_rect(0, 0, s.width, s.height)

    def _draw_numbers(self) -> None:
        s = self.surface
        fs = self.config.font_size
        for x in range(1, self.x_max):
            if x % INTRO_COLUMN_GAP == 0:
                continue
            for y in range(1, self.y_max):
                s.set_shadow(INTRO_STYLE.glow, GLOW_BLUR)
                s.set_fill(INTRO_STYLE.fill)

                glyph = str(self.rng.randint(1, 9))
                if self.rng.random() < INTRO_SPECIAL_CHANCE:
                    glyph = INTRO_SPECIAL_GLYPH
                s.fill_text(glyph, x * fs, y * fs)

    async def _tick(self) -> None:
        interval = self.config.intro_interval / 1000
        while True:
            await asyncio.sleep(interval)
            self.draw()

    def _stop_timers(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        if self._timeout is not None:
            self._timeout.cancel()
            self._timeout = None

    def _end(self) -> None:
        if self.done:
            return
        log.debug("ending intro")
        self._stop_timers()

        s = self.surface
        s.set_fill(BACKGROUND)
        s.fill_rect(0, 0, s.width, s.height)

        self._finished.set()
        fn, self._continuation = self._continuation, None
        if fn is not None:
            fn()
