# matrix_rain/util/console.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def info(msg: str) -> None:
    console.print(f"[cyan]ℹ[/] {msg}")


def success(msg: str) -> None:
    console.print(f"[bold green]✓[/] {msg}")


def warn(msg: str) -> None:
    err_console.print(f"[yellow]![/] {msg}")


def error(msg: str) -> None:
    err_console.print(f"[bold red]✗ Error:[/] {msg}")


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Route library logging to stderr through rich, or to ``log_file`` when the
    full-screen effect owns the terminal.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(console=err_console, show_path=False, markup=False)

    root = logging.getLogger("matrix_rain")
    root.handlers[:] = [handler]
    root.setLevel(level)
