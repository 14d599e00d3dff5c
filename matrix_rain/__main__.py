from __future__ import annotations

import importlib
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional

import typer

from .config import RainConfig, load_config
from .errors import ConfigError
from .util.console import error, info, setup_logging

# Create the top-level Typer app
app = typer.Typer(
    name="matrix-rain",
    help="Matrix digital rain fed by a live stream of commits.",
    add_completion=True,
    no_args_is_help=True,
)


def _register_subapp(module_name: str, name: str) -> None:
    """
    Import a commands module that exposes `app: Typer` and attach it as the
    subcommand `name`.
    """
    mod = importlib.import_module(module_name)
    sub = getattr(mod, "app", None)
    if sub is None:  # pragma: no cover
        raise RuntimeError(f"Module {module_name} does not export `app`")
    app.add_typer(sub, name=name)


# Register command groups
_register_subapp("matrix_rain.commands.rain", "rain")
_register_subapp("matrix_rain.commands.intro", "intro")
_register_subapp("matrix_rain.commands.feed", "feed")


def _version_string() -> str:
    try:
        return metadata.version("matrix-rain")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "0.0.0"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"matrix-rain {_version_string()}")
        raise typer.Exit(code=0)


@app.callback()
def _global_options(
    ctx: typer.Context,
    feed_url: Optional[str] = typer.Option(
        None,
        "--feed-url",
        help="Override the commit feed endpoint for this run.",
        show_default=False,
    ),
    font_size: Optional[int] = typer.Option(
        None,
        "--font-size",
        help="Glyph size in pixels; also the column and row spacing.",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Write log records to this file instead of stderr.",
        show_default=False,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show matrix-rain version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Loads configuration once per process and exposes it to subcommands via ctx.obj.
    """
    setup_logging(verbose=verbose, log_file=log_file)

    try:
        cfg: RainConfig = load_config().with_overrides(feed_url=feed_url, font_size=font_size)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2)

    # Expose config to subcommands
    ctx.obj = cfg

    if verbose:
        info(f"feed={cfg.feed_url} font_size={cfg.font_size} interval={cfg.interval_time}ms")


def main() -> None:
    app()


if __name__ == "__main__":
    # When run as a module: python -m matrix_rain
    sys.exit(main())
