# matrix_rain/ui/theme.py

from __future__ import annotations

from typing import NamedTuple

# Alternative accents that look good on black:
#   #ffbf00  #fcf805  #0f0


class GlyphStyle(NamedTuple):
    """Fill colour and glow colour used for one kind of glyph."""

    fill: str
    glow: str


BACKGROUND = "#000000"

# The "@user" part of a drop
HEADER_STYLE = GlyphStyle(fill="#7d22f4", glow="#7d22f4")
# The code that follows it
BODY_STYLE = GlyphStyle(fill="#442bff", glow="#442bff")
# Intro digits are drawn black and only their green glow shows
INTRO_STYLE = GlyphStyle(fill=BACKGROUND, glow="#00ff00")

GLOW_BLUR = 3
INTRO_FADE_ALPHA = 0.75
INTRO_SPECIAL_GLYPH = "π"
INTRO_SPECIAL_CHANCE = 0.01
INTRO_COLUMN_GAP = 16

STATUS_PLAYING = "[dim][bold]space[/bold] pause · [bold]q[/bold] quit[/]"
STATUS_PAUSED = "[dim][bold]space[/bold] play · [bold]q[/bold] quit[/]"
STATUS_LOADING = "[dim]waiting for commits…[/]"
