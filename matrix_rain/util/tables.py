# matrix_rain/util/tables.py
from __future__ import annotations

from rich.table import Table

from ..ui.theme import BODY_STYLE, HEADER_STYLE


def feed_table() -> Table:
    t = Table(title="Commit feed", show_lines=False, header_style="bold")
    t.add_column("#", justify="right", style="dim")
    t.add_column("User", style=HEADER_STYLE.fill, no_wrap=True)
    t.add_column("Code", style=BODY_STYLE.fill, overflow="ellipsis", no_wrap=True)
    t.add_column("Drop length", justify="right")
    return t
