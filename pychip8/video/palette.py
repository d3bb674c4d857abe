"""Two-colour palettes for the CHIP-8 display."""

from __future__ import annotations

from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]
Palette = Tuple[RGBColor, RGBColor]

# (background, foreground)
MONOCHROME: Palette = ((0, 0, 0), (255, 255, 255))
CHARCOAL: Palette = ((18, 18, 18), (255, 255, 255))


def _channel(value: int) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"colour component {value} outside 0-255")
    return value


def validate_palette(palette: Sequence[RGBColor]) -> Palette:
    """Return ``palette`` as a (background, foreground) pair of RGB tuples."""

    if len(palette) != 2:
        raise ValueError("palette needs a background and a foreground colour")
    background, foreground = (tuple(_channel(c) for c in color) for color in palette)
    if len(background) != 3 or len(foreground) != 3:
        raise ValueError("palette colours must have three components")
    return background, foreground  # type: ignore[return-value]


def parse_color(text: str) -> RGBColor:
    """Parse ``#rrggbb``, ``rrggbb`` or ``r,g,b`` into an RGB tuple."""

    value = text.strip()
    if "," in value:
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 3:
            raise ValueError(f"colour '{text}' must have three components")
        channels = [int(part, 10) for part in parts]
        if any(not 0 <= channel <= 0xFF for channel in channels):
            raise ValueError(f"colour '{text}' has a component outside 0-255")
        return channels[0], channels[1], channels[2]
    if value.startswith("#"):
        value = value[1:]
    if len(value) != 6:
        raise ValueError(f"colour '{text}' must be #rrggbb or r,g,b")
    raw = int(value, 16)
    return (raw >> 16) & 0xFF, (raw >> 8) & 0xFF, raw & 0xFF
