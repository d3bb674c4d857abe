"""Monochrome 64x32 display buffer mutated by CLS and DRW."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


@dataclass
class DisplayBuffer:
    """Fixed-size grid of on/off cells stored row-major.

    Only :meth:`clear` and :meth:`draw_sprite` are used by the interpreter;
    :meth:`set_pixel` exists for hosts and tests that need to prepare a frame.
    """

    width: int = DISPLAY_WIDTH
    height: int = DISPLAY_HEIGHT
    _cells: bytearray = field(default_factory=bytearray, init=False, repr=False)
    revision: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("display dimensions must be positive")
        self._cells = bytearray(self.width * self.height)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return y * self.width + x

    def get_pixel(self, x: int, y: int) -> bool:
        return self._cells[self._offset(x, y)] != 0

    def set_pixel(self, x: int, y: int, on: bool) -> None:
        self._cells[self._offset(x, y)] = 1 if on else 0
        self.revision += 1

    def fill(self, on: bool) -> None:
        self._cells[:] = (b"\x01" if on else b"\x00") * len(self._cells)
        self.revision += 1

    def clear(self) -> None:
        self.fill(False)

    def draw_sprite(self, x: int, y: int, sprite: Iterable[int], *, wrap: bool = False) -> bool:
        """XOR ``sprite`` onto the grid and report whether any pixel turned off.

        The start coordinate always wraps modulo the display size. Pixels that
        run past the right or bottom edge are clipped unless ``wrap`` is set.
        """

        origin_x = x % self.width
        origin_y = y % self.height
        collision = False
        cells = self._cells
        for row, line in enumerate(sprite):
            py = origin_y + row
            if py >= self.height:
                if not wrap:
                    break
                py %= self.height
            base = py * self.width
            for column in range(8):
                if not (line >> (7 - column)) & 0x01:
                    continue
                px = origin_x + column
                if px >= self.width:
                    if not wrap:
                        break
                    px %= self.width
                index = base + px
                if cells[index]:
                    collision = True
                cells[index] ^= 1
        self.revision += 1
        return collision

    def is_blank(self) -> bool:
        return not any(self._cells)

    def rows(self) -> Iterator[bytes]:
        for y in range(self.height):
            start = y * self.width
            yield bytes(self._cells[start : start + self.width])

    def snapshot(self) -> bytes:
        return bytes(self._cells)
