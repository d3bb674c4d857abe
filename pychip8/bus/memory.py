"""CHIP-8 address space.

The interpreter sees a flat 4 KiB byte arena. Every accessor is bounds-checked:
a conformant program never leaves 0x000-0xFFF, so an out-of-range access means
either a malformed ROM or an interpreter defect and is reported instead of
being wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START


class MemoryAccessError(Exception):
    """Base class for memory and loading failures."""


class OutOfBoundsError(MemoryAccessError):
    """Raised when an address falls outside 0x000-0xFFF."""

    def __init__(self, address: int, length: int = 1) -> None:
        if length > 1:
            message = f"access {address:#05x}+{length} outside 0x000-0xfff"
        else:
            message = f"address {address:#05x} outside 0x000-0xfff"
        super().__init__(message)
        self.address = address
        self.length = length


class CapacityError(MemoryAccessError):
    """Raised when a program image does not fit the program area."""

    def __init__(self, size: int, capacity: int = PROGRAM_CAPACITY) -> None:
        super().__init__(f"program of {size} bytes exceeds capacity of {capacity} bytes")
        self.size = size
        self.capacity = capacity


@dataclass
class Memory:
    """Byte-addressable RAM covering the whole CHIP-8 address space."""

    length: int = MEMORY_SIZE

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("memory must have a positive length")
        self._data = bytearray(self.length)

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > self.length:
            raise OutOfBoundsError(address, length)

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word at ``address`` and ``address + 1``."""

        self._check(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address : address + length])

    def load_image(self, address: int, data: bytes) -> None:
        """Copy ``data`` verbatim starting at ``address``."""

        self._check(address, len(data))
        self._data[address : address + len(data)] = data

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)
