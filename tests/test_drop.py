from __future__ import annotations

from conftest import RecordingSurface

from matrix_rain.drop import Drop
from matrix_rain.feed import FeedPayload
from matrix_rain.ui.theme import BODY_STYLE, HEADER_STYLE


def make_drop() -> Drop:
    return Drop(FeedPayload(user="neo", code="x=1"))


def test_text_is_handle_then_code():
    drop = make_drop()
    assert drop.text == "@neox=1"
    assert drop.header_length == 4
    assert len(drop) == 7


def test_header_rows_use_header_style():
    drop = make_drop()
    for row in range(4):
        assert drop.style_for(row) is HEADER_STYLE
    for row in range(4, 10):
        assert drop.style_for(row) is BODY_STYLE


def test_rows_outside_text_are_blank():
    drop = make_drop()
    assert drop.glyph(0) == "@"
    assert drop.glyph(6) == "1"
    assert drop.glyph(7) == ""
    assert drop.glyph(100) == ""
    assert drop.glyph(-1) == ""


def test_draw_sets_style_and_issues_one_glyph():
    surface = RecordingSurface()
    drop = make_drop()

    drop.draw(surface, 28, 42, 1)
    drop.draw(surface, 28, 98, 5)
    drop.draw(surface, 28, 140, 9)

    header, body, blank = surface.texts
    assert header[1:4] == ("n", 28, 42)
    assert header[4] == HEADER_STYLE.fill and header[5] == HEADER_STYLE.glow
    assert body[1] == "="
    assert body[4] == BODY_STYLE.fill and body[5] == BODY_STYLE.glow
    assert blank[1] == ""
