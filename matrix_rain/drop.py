# matrix_rain/drop.py
from __future__ import annotations

from .feed import FeedPayload
from .surface import Surface
from .ui.theme import BODY_STYLE, HEADER_STYLE, GlyphStyle


class Drop:
    """
    A single falling string: ``@user`` followed by a slice of the commit's
    code. Row ``n`` of a column shows character ``n`` of the text; rows past
    the end are blank, which gives every drop a fixed-length trail.
    """

    __slots__ = ("user", "code", "text", "header_length")

    def __init__(self, payload: FeedPayload) -> None:
        self.user = payload.user
        self.code = payload.code
        self.text = "@" + payload.user + payload.code
        self.header_length = len(payload.user) + 1

    def style_for(self, row: int) -> GlyphStyle:
        return HEADER_STYLE if row < self.header_length else BODY_STYLE

    def glyph(self, row: int) -> str:
        if 0 <= row < len(self.text):
            return self.text[row]
        return ""

    def draw(self, surface: Surface, x: int, y: int, row: int) -> None:
        style = self.style_for(row)
        surface.shadow_color = style.glow
        surface.set_fill(style.fill)
        surface.fill_text(self.glyph(row), x, y)

    def __len__(self) -> int:
        return len(self.text)

    def __repr__(self) -> str:
        return f"Drop({self.text[:24]!r})"
