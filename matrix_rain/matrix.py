# matrix_rain/matrix.py
from __future__ import annotations

import asyncio
import enum
import logging
import random
from typing import Callable, List, Optional

from .config import RainConfig
from .drop import Drop
from .errors import SurfaceError
from .intro import Intro
from .pool import Feed, Pool
from .surface import Surface
from .ui.theme import BACKGROUND, GLOW_BLUR
from .util.debounce import Debouncer

log = logging.getLogger(__name__)


class MatrixState(enum.Enum):
    NOT_STARTED = "not-started"
    INTRO = "intro"
    INITIALIZING = "initializing"
    PLAYING = "playing"
    PAUSED = "paused"


class Column:
    """One vertical lane: a cursor in glyph rows and the drop it is showing."""

    __slots__ = ("cursor", "drop")

    def __init__(self, cursor: int) -> None:
        self.cursor = cursor
        self.drop: Optional[Drop] = None

    def __repr__(self) -> str:
        return f"Column(cursor={self.cursor}, drop={self.drop!r})"


class Matrix:
    """
    Main controller for the rain.

    ``start()`` plays the intro, then schedules the pool; once the pool is
    half full the columns are initialized and the frame timer starts. Every
    frame fades the surface a little, draws one glyph per column and moves all
    columns down by one row.
    """

    def __init__(
        self,
        surface: Optional[Surface],
        config: RainConfig,
        *,
        feed: Optional[Feed] = None,
        pool: Optional[Pool] = None,
        rng: Optional[random.Random] = None,
        skip_intro: bool = False,
        on_interactive: Optional[Callable[[], None]] = None,
    ) -> None:
        if surface is None:
            raise SurfaceError("Drawing surface not found")
        if pool is None:
            if feed is None:
                raise ValueError("Matrix needs either a feed or a pool")
            pool = Pool(feed, capacity=config.initial_pool_size, poll_interval=config.poll_interval)

        self.surface = surface
        self.config = config
        self.pool = pool
        self.rng = rng or random.Random()
        self.skip_intro = skip_intro
        self.on_interactive = on_interactive

        self.state = MatrixState.NOT_STARTED
        self.interactive = False
        self.columns: List[Column] = []
        self.intro: Optional[Intro] = None

        self._initialized = False
        self._frames: Optional[asyncio.Task] = None
        self._resize = Debouncer(self.resize, config.resize_debounce / 1000)

    # ---- startup ---------------------------------------------------------- #
    def start(self) -> None:
        if self.state is not MatrixState.NOT_STARTED:
            return
        self.state = MatrixState.INTRO
        if self.skip_intro:
            self._after_intro()
            return
        self.intro = Intro(self.surface, self.config, self.rng).start().then(self._after_intro)

    def _after_intro(self) -> None:
        self.state = MatrixState.INITIALIZING
        self.pool.schedule(self._on_pool_ready)

    def _on_pool_ready(self) -> None:
        self.initialize()
        self.play()
        self.interactive = True
        if self.on_interactive is not None:
            self.on_interactive()

    def initialize(self) -> None:
        num_columns = self.surface.width // self.config.font_size
        self.pool.set_capacity(num_columns * 2)
        # Every column starts below the bottom edge and waits for a reset
        self.columns = [Column(self.surface.height) for _ in range(num_columns)]
        self._initialized = True

    # ---- frame ------------------------------------------------------------ #
    def is_reset(self, pos_y: int) -> bool:
        return pos_y > self.surface.height and self.rng.random() > self.config.random_factor

    def draw_background(self) -> None:
        s = self.surface
        s.set_shadow(BACKGROUND)
        s.set_fill(BACKGROUND, self.config.alpha_fading)
        s.fill_rect(0, 0, s.width, s.height)

    def draw_text(self) -> None:
        s = self.surface
        fs = self.config.font_size
        s.set_shadow(BACKGROUND, GLOW_BLUR)

        for x, column in enumerate(self.columns):
            pos_x = x * fs
            pos_y = column.cursor * fs
            row = column.cursor - 1

            if column.drop is None:
                column.drop = self.pool.next()
            if column.drop is not None:
                column.drop.draw(s, pos_x, pos_y, row)

            if self.is_reset(pos_y):
                column.cursor = 0
                # Keep the old drop rather than leave the column blank when starved
                if self.pool.has_next():
                    column.drop = None

            column.cursor += 1

    def draw(self) -> None:
        self.draw_background()
        self.draw_text()

    async def _run_frames(self) -> None:
        interval = self.config.interval_time / 1000
        while True:
            await asyncio.sleep(interval)
            self.draw()

    # ---- controls --------------------------------------------------------- #
    @property
    def playing(self) -> bool:
        return self._frames is not None

    def play(self) -> None:
        if self._frames is not None or not self._initialized:
            return
        log.debug("play")
        self._frames = asyncio.get_running_loop().create_task(self._run_frames())
        self.state = MatrixState.PLAYING

    def pause(self) -> None:
        if self._frames is None:
            return
        log.debug("pause")
        self._frames.cancel()
        self._frames = None
        self.state = MatrixState.PAUSED

    def toggle(self) -> None:
        if self._frames is not None:
            self.pause()
        else:
            self.play()

    def resize(self, width: int, height: int) -> None:
        if not self._initialized:
            self.surface.resize(width, height)
            return
        self.pause()
        log.debug("re-initialize after resize")
        self.surface.resize(width, height)
        self.initialize()
        self.play()

    def request_resize(self, width: int, height: int) -> None:
        """Resize once the size has been stable for ``resize_debounce`` ms."""
        self._resize(width, height)

    def stop(self) -> None:
        if self.intro is not None:
            self.intro.cancel()
        self._resize.cancel()
        self.pause()
        self.pool.stop()
