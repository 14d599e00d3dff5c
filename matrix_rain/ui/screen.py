# matrix_rain/ui/screen.py

from __future__ import annotations

import asyncio
import threading
from typing import Optional

import click
from rich.console import Console
from rich.live import Live

from ..config import RainConfig
from ..intro import Intro
from ..matrix import Matrix, MatrixState
from ..pool import Feed
from ..surface import TerminalSurface
from .theme import STATUS_LOADING, STATUS_PAUSED, STATUS_PLAYING

QUIT_KEYS = {"q", "Q", "\x1b"}
TOGGLE_KEYS = {" "}
REFRESH_RATE = 30


def _start_key_reader(loop: asyncio.AbstractEventLoop, keys: asyncio.Queue) -> threading.Thread:
    """
    Read single key presses on a daemon thread and hand them to the loop.
    Ctrl-C and Ctrl-D are reported as a quit key. The thread ends after a
    quit key; otherwise it stays blocked in ``click.getchar()`` until the
    process exits.
    """

    def _read() -> None:
        while True:
            try:
                ch = click.getchar()
            except (KeyboardInterrupt, EOFError):
                ch = "q"
            try:
                loop.call_soon_threadsafe(keys.put_nowait, ch)
            except RuntimeError:
                return
            if ch in QUIT_KEYS:
                return

    thread = threading.Thread(target=_read, daemon=True)
    thread.start()
    return thread


def status_line(matrix: Matrix) -> str:
    if not matrix.interactive:
        return STATUS_LOADING if matrix.state is MatrixState.INITIALIZING else ""
    return STATUS_PLAYING if matrix.playing else STATUS_PAUSED


async def run_rain(
    config: RainConfig,
    feed: Feed,
    *,
    skip_intro: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Run the full effect on the alternate screen until a quit key is pressed.
    Space toggles pause once the rain is running; terminal resizes are
    forwarded to the matrix, which debounces them.
    """
    console = console or Console()
    fs = config.font_size
    surface = TerminalSurface.for_console(console, fs)
    matrix = Matrix(surface, config, feed=feed, skip_intro=skip_intro)

    loop = asyncio.get_running_loop()
    keys: asyncio.Queue = asyncio.Queue()
    size = console.size

    console.show_cursor(False)
    try:
        with Live(console=console, screen=True, auto_refresh=False, transient=True) as live:
            _start_key_reader(loop, keys)
            matrix.start()
            while True:
                live.update(surface.render(status_line(matrix)), refresh=True)
                try:
                    key = await asyncio.wait_for(keys.get(), timeout=1 / REFRESH_RATE)
                except asyncio.TimeoutError:
                    key = None

                if key in QUIT_KEYS:
                    break
                if key in TOGGLE_KEYS and matrix.interactive:
                    matrix.toggle()

                if console.size != size:
                    size = console.size
                    matrix.request_resize(size.width * fs, max(size.height - 1, 1) * fs)
    finally:
        matrix.stop()
        console.show_cursor(True)


async def run_intro(config: RainConfig, console: Optional[Console] = None) -> None:
    """Play only the countdown, then return."""
    console = console or Console()
    surface = TerminalSurface.for_console(console, config.font_size, reserved_rows=0)
    intro = Intro(surface, config)

    console.show_cursor(False)
    try:
        with Live(console=console, screen=True, auto_refresh=False, transient=True) as live:
            intro.start()
            while not intro.done:
                live.update(surface.render(), refresh=True)
                await asyncio.sleep(1 / REFRESH_RATE)
    finally:
        intro.cancel()
        console.show_cursor(True)
