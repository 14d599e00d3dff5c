# matrix_rain/commands/rain.py
from __future__ import annotations

import asyncio

import typer

from ..config import RainConfig
from ..feed import FeedClient
from ..ui.screen import run_rain
from ..util.console import success

app = typer.Typer(help="Run the digital rain", add_completion=False, no_args_is_help=False)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    no_intro: bool = typer.Option(False, "--no-intro", help="Skip the countdown."),
) -> None:
    """
    Fill the terminal with falling commits.

    Space pauses and resumes once the rain has started; q or Esc quits.
    """
    cfg: RainConfig = ctx.obj
    feed = FeedClient(cfg.feed_url, timeout=cfg.feed_timeout)
    try:
        asyncio.run(run_rain(cfg, feed, skip_intro=no_intro))
    except KeyboardInterrupt:
        pass
    finally:
        feed.close()
    success("Disconnected from the matrix.")
