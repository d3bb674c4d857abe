"""Unit tests for the CHIP-8 memory arena."""

import pytest

from pychip8.bus import MEMORY_SIZE, Memory, OutOfBoundsError


def test_store_and_load_bytes() -> None:
    memory = Memory()

    memory.store8(0x000, 0x12)
    memory.store8(0xFFF, 0x1FF)

    assert memory.load8(0x000) == 0x12
    assert memory.load8(0xFFF) == 0xFF


def test_load16_is_big_endian() -> None:
    memory = Memory()
    memory.load_image(0x300, b"\xAB\xCD")

    assert memory.load16(0x300) == 0xABCD


@pytest.mark.parametrize("address", [-1, MEMORY_SIZE, 0x1234])
def test_byte_access_out_of_range(address: int) -> None:
    memory = Memory()

    with pytest.raises(OutOfBoundsError) as info:
        memory.load8(address)
    assert info.value.address == address

    with pytest.raises(OutOfBoundsError):
        memory.store8(address, 0)


def test_word_fetch_at_last_byte_fails() -> None:
    memory = Memory()

    assert memory.load16(0xFFE) == 0
    with pytest.raises(OutOfBoundsError):
        memory.load16(0xFFF)


def test_block_access_checks_whole_range() -> None:
    memory = Memory()

    with pytest.raises(OutOfBoundsError):
        memory.load_image(0xFFE, b"\x01\x02\x03")
    # Nothing was written before the range check failed.
    assert memory.read_block(0xFFE, 2) == b"\x00\x00"

    with pytest.raises(OutOfBoundsError):
        memory.read_block(0xFF0, 0x11)


def test_clear_and_snapshot() -> None:
    memory = Memory()
    memory.load_image(0x200, b"\x60\x05")

    assert memory.snapshot()[0x200:0x202] == b"\x60\x05"

    memory.clear()
    assert memory.snapshot() == bytes(MEMORY_SIZE)
