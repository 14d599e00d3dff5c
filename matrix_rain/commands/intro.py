# matrix_rain/commands/intro.py
from __future__ import annotations

import asyncio

import typer

from ..config import RainConfig
from ..ui.screen import run_intro

app = typer.Typer(help="Play the countdown only", add_completion=False, no_args_is_help=False)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Play the intro countdown once and exit."""
    cfg: RainConfig = ctx.obj
    try:
        asyncio.run(run_intro(cfg))
    except KeyboardInterrupt:
        pass
