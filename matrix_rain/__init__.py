"""Matrix digital rain driven by a live feed of commits."""

__version__ = "0.1.0"
