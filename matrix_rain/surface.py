# matrix_rain/surface.py
"""
Drawing surfaces.

``Surface`` mirrors the small part of the browser canvas API the effect
needs: a fill colour with alpha, glow (shadow) state that is shared between
draw calls, ``fill_rect`` and ``fill_text``. Coordinates are in pixels and a
glyph occupies one ``font_size`` square, its baseline at ``y``.

``TerminalSurface`` maps that onto a grid of terminal cells, one cell per
glyph square, and renders itself as a ``rich`` renderable.
"""

from __future__ import annotations

import abc
import math
from functools import lru_cache
from typing import List, Optional

from rich.cells import cell_len
from rich.color import Color, ColorTriplet, blend_rgb
from rich.console import Console
from rich.style import Style
from rich.text import Text

from .ui.theme import BACKGROUND

# How much of the glow colour shows through a glyph drawn with a blur
GLOW_MIX = 0.5
# Cells fainter than this are considered fully faded
MIN_INTENSITY = 0.08


class Surface(abc.ABC):
    def __init__(self, width: int, height: int, font_size: int) -> None:
        self.width = width
        self.height = height
        self.font_size = font_size
        self.font_family = "Courier New"

        self.fill_style = BACKGROUND
        self.fill_alpha = 1.0
        self.shadow_color = BACKGROUND
        self.shadow_blur = 0
        self.shadow_offset_x = 0
        self.shadow_offset_y = 0

    def set_fill(self, color: str, alpha: float = 1.0) -> None:
        self.fill_style = color
        self.fill_alpha = alpha

    def set_shadow(self, color: str, blur: int = 0, offset_x: int = 0, offset_y: int = 0) -> None:
        self.shadow_color = color
        self.shadow_blur = blur
        self.shadow_offset_x = offset_x
        self.shadow_offset_y = offset_y

    @abc.abstractmethod
    def fill_rect(self, x: int, y: int, width: int, height: int) -> None:
        """Paint a rectangle with the current fill colour and alpha."""

    @abc.abstractmethod
    def fill_text(self, text: str, x: int, y: int) -> None:
        """Draw ``text`` with its baseline at ``(x, y)`` using the current state."""

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height


@lru_cache(maxsize=64)
def _rgb(color: str) -> ColorTriplet:
    return Color.parse(color).get_truecolor()


class Cell:
    __slots__ = ("char", "color", "intensity", "bold")

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        self.char = ""
        self.color = _rgb(BACKGROUND)
        self.intensity = 0.0
        self.bold = False


class TerminalSurface(Surface):
    def __init__(self, columns: int, rows: int, font_size: int = 14) -> None:
        super().__init__(columns * font_size, rows * font_size, font_size)
        self._grid: List[List[Cell]] = []
        self._build()

    @classmethod
    def for_console(cls, console: Console, font_size: int = 14, reserved_rows: int = 1) -> "TerminalSurface":
        """Size a surface to the console, leaving ``reserved_rows`` for chrome."""
        width, height = console.size
        return cls(width, max(height - reserved_rows, 1), font_size)

    @property
    def columns(self) -> int:
        return self.width // self.font_size

    @property
    def rows(self) -> int:
        return self.height // self.font_size

    def _build(self) -> None:
        self._grid = [[Cell() for _ in range(self.columns)] for _ in range(self.rows)]

    def resize(self, width: int, height: int) -> None:
        super().resize(width, height)
        self._build()

    def resize_cells(self, columns: int, rows: int) -> None:
        self.resize(columns * self.font_size, rows * self.font_size)

    def fill_rect(self, x: int, y: int, width: int, height: int) -> None:
        fs = self.font_size
        c0, c1 = max(x // fs, 0), min(math.ceil((x + width) / fs), self.columns)
        r0, r1 = max(y // fs, 0), min(math.ceil((y + height) / fs), self.rows)
        alpha = self.fill_alpha
        target = _rgb(self.fill_style)

        for row in self._grid[r0:r1]:
            for cell in row[c0:c1]:
                if not cell.char:
                    continue
                if alpha >= 1.0:
                    cell.clear()
                    continue
                cell.color = blend_rgb(cell.color, target, alpha)
                cell.intensity *= 1.0 - alpha
                if cell.intensity < MIN_INTENSITY:
                    cell.clear()

    def fill_text(self, text: str, x: int, y: int) -> None:
        if not text:
            return
        col = x // self.font_size
        row = y // self.font_size - 1
        if not 0 <= row < self.rows:
            return

        color = _rgb(self.fill_style)
        if self.shadow_blur > 0:
            color = blend_rgb(color, _rgb(self.shadow_color), GLOW_MIX)

        for offset, ch in enumerate(text):
            c = col + offset
            if not 0 <= c < self.columns:
                continue
            # Blank, control and double-width characters leave the cell alone
            if ch.isspace() or not ch.isprintable() or cell_len(ch) != 1:
                continue
            cell = self._grid[row][c]
            cell.char = ch
            cell.color = color
            cell.intensity = self.fill_alpha
            cell.bold = self.shadow_blur > 0

    def glyph_at(self, column: int, row: int) -> str:
        return self._grid[row][column].char

    def intensity_at(self, column: int, row: int) -> float:
        return self._grid[row][column].intensity

    def snapshot(self) -> List[str]:
        """Plain-text view of the grid, one string per row."""
        return ["".join(cell.char or " " for cell in row) for row in self._grid]

    def render(self, status: Optional[str] = None) -> Text:
        text = Text(no_wrap=True, overflow="crop")
        for index, row in enumerate(self._grid):
            if index:
                text.append("\n")
            for cell in row:
                if cell.char:
                    text.append(cell.char, Style(color=Color.from_triplet(cell.color), bold=cell.bold))
                else:
                    text.append(" ")
        if status:
            text.append("\n")
            text.append_text(Text.from_markup(status))
        return text

    def __rich__(self) -> Text:
        return self.render()
