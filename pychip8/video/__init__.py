"""Display buffer and rendering helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, DisplayBuffer
from .font import FONT_ADDRESS, FONT_SPRITES, GLYPH_BYTES, glyph_address
from .palette import CHARCOAL, MONOCHROME, RGBColor, parse_color, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "DisplayBuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "CHARCOAL",
    "RGBColor",
    "parse_color",
    "validate_palette",
    "glyph_address",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "FONT_ADDRESS",
    "FONT_SPRITES",
    "GLYPH_BYTES",
]
