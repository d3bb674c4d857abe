"""Tests for reading raw program images."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from pychip8.bus import PROGRAM_CAPACITY, PROGRAM_START, CapacityError
from pychip8.loader import ProgramImage, read_rom, read_rom_from_path


def test_read_rom_from_stream() -> None:
    image = read_rom(io.BytesIO(b"\x60\x05\x12\x00"), "demo.ch8")

    assert isinstance(image, ProgramImage)
    assert image.data == b"\x60\x05\x12\x00"
    assert image.name == "demo.ch8"
    assert len(image) == 4
    assert image.start == PROGRAM_START
    assert image.end == 0x203


def test_read_rom_accepts_exact_capacity() -> None:
    image = read_rom(io.BytesIO(bytes(PROGRAM_CAPACITY)))

    assert len(image) == 3584


def test_read_rom_rejects_oversized_stream() -> None:
    with pytest.raises(CapacityError) as info:
        read_rom(io.BytesIO(bytes(PROGRAM_CAPACITY + 100)))

    # Only one byte past capacity is pulled from the stream.
    assert info.value.size == PROGRAM_CAPACITY + 1


def test_read_rom_from_path(tmp_path: Path) -> None:
    rom = tmp_path / "maze.ch8"
    rom.write_bytes(b"\xA2\x1E")

    image = read_rom_from_path(rom)

    assert image.data == b"\xA2\x1E"
    assert image.name == "maze.ch8"


def test_read_rom_from_path_checks_size_first(tmp_path: Path) -> None:
    rom = tmp_path / "huge.ch8"
    rom.write_bytes(bytes(PROGRAM_CAPACITY + 1))

    with pytest.raises(CapacityError) as info:
        read_rom_from_path(rom)
    assert info.value.size == 3585


def test_empty_image_is_allowed() -> None:
    image = read_rom(io.BytesIO(b""))

    assert len(image) == 0
