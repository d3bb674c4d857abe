"""Raw CHIP-8 program images.

A CHIP-8 ROM has no header or metadata: every byte is code or data placed
verbatim from 0x200 onwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import PROGRAM_CAPACITY, PROGRAM_START, CapacityError


@dataclass(frozen=True)
class ProgramImage:
    """Program bytes plus where they came from."""

    data: bytes
    name: str = ""

    @property
    def start(self) -> int:
        return PROGRAM_START

    @property
    def end(self) -> int:
        return PROGRAM_START + len(self.data) - 1

    def __len__(self) -> int:
        return len(self.data)


def check_capacity(data: bytes) -> None:
    if len(data) > PROGRAM_CAPACITY:
        raise CapacityError(len(data))


def read_rom(stream: BinaryIO, name: str = "") -> ProgramImage:
    """Read a program image from ``stream``.

    At most one byte past the capacity is read, which is enough to detect an
    oversized image without pulling an arbitrarily large file into memory.
    """

    data = stream.read(PROGRAM_CAPACITY + 1)
    check_capacity(data)
    return ProgramImage(bytes(data), name)


def read_rom_from_path(path: Path) -> ProgramImage:
    """Read a program image from the filesystem."""

    size = path.stat().st_size
    if size > PROGRAM_CAPACITY:
        raise CapacityError(size)
    with path.open("rb") as handle:
        return read_rom(handle, path.name)
