# matrix_rain/commands/feed.py
from __future__ import annotations

import json
from dataclasses import asdict

import typer
from rich.console import Console

from ..config import RainConfig
from ..drop import Drop
from ..errors import FeedError
from ..feed import FeedClient
from ..util.console import error, info
from ..util.tables import feed_table

app = typer.Typer(help="Peek at the commit feed", add_completion=False, no_args_is_help=False)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    size: int = typer.Option(10, "--size", "-n", min=1, help="How many commits to request."),
    as_json: bool = typer.Option(False, "--json", help="Print raw payloads as JSON."),
) -> None:
    """Fetch a batch of commits the same way the pool does and show them."""
    cfg: RainConfig = ctx.obj
    client = FeedClient(cfg.feed_url, timeout=cfg.feed_timeout)
    try:
        payloads = client.fetch_sync(size)
    except FeedError as exc:
        error(str(exc))
        raise typer.Exit(1)
    finally:
        client.close()

    if as_json:
        typer.echo(json.dumps([asdict(p) for p in payloads], indent=2, ensure_ascii=False))
        return

    table = feed_table()
    for i, payload in enumerate(payloads, start=1):
        table.add_row(str(i), payload.user, payload.code, str(len(Drop(payload))))
    Console().print(table)
    info(f"{len(payloads)} of {size} commit(s) received.")
