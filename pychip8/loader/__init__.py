"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .rom import ProgramImage, check_capacity, read_rom, read_rom_from_path

__all__ = [
    "ProgramImage",
    "check_capacity",
    "read_rom",
    "read_rom_from_path",
]
