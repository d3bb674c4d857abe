"""Machine assembly, reset and program loading."""

from __future__ import annotations

import pytest

from pychip8.bus import MEMORY_SIZE, PROGRAM_CAPACITY, PROGRAM_START, CapacityError
from pychip8.cpu import Quirks
from pychip8.io import Keypad
from pychip8.system import MachineConfig, create_machine
from pychip8.video import FONT_ADDRESS, FONT_SPRITES


def test_reset_state() -> None:
    machine = create_machine()
    state = machine.cpu.state

    assert state.pc == PROGRAM_START
    assert state.i == 0
    assert state.stack == []
    assert bytes(state.v) == bytes(16)
    assert not state.awaiting_key
    assert (machine.timers.delay, machine.timers.sound) == (0, 0)
    assert machine.display.is_blank()
    assert not machine.keypad.any_pressed()


def test_font_installed_at_fixed_address() -> None:
    machine = create_machine()

    assert machine.memory.read_block(FONT_ADDRESS, len(FONT_SPRITES)) == FONT_SPRITES
    assert machine.memory.read_block(FONT_ADDRESS, 5) == b"\xF0\x90\x90\x90\xF0"


def test_load_places_program_verbatim() -> None:
    program = bytes(range(256)) * 3
    machine = create_machine(MachineConfig(program=program))

    assert machine.memory.read_block(PROGRAM_START, len(program)) == program
    assert machine.memory.load8(PROGRAM_START + len(program)) == 0


def test_load_fills_entire_program_area() -> None:
    program = b"\xAA" * PROGRAM_CAPACITY
    machine = create_machine(MachineConfig(program=program))

    assert machine.memory.load8(MEMORY_SIZE - 1) == 0xAA


def test_oversized_program_leaves_memory_untouched() -> None:
    machine = create_machine()
    before = machine.memory.snapshot()

    with pytest.raises(CapacityError):
        machine.load(bytes(PROGRAM_CAPACITY + 1))

    assert machine.memory.snapshot() == before


def test_reset_after_run_restores_power_on_state() -> None:
    machine = create_machine(MachineConfig(program=b"\x60\x05\x00\xE0"))
    machine.step()
    machine.timers.set_sound(9)
    machine.keypad.press(0x3)
    machine.display.fill(True)

    machine.reset()

    assert machine.cpu.state.pc == PROGRAM_START
    assert machine.cpu.state.v[0] == 0
    assert machine.cpu.instruction_count == 0
    assert not machine.is_sound_active()
    assert machine.display.is_blank()
    assert not machine.keypad.is_pressed(0x3)
    # Reset wipes the program area; only the font survives.
    assert machine.memory.load8(PROGRAM_START) == 0


def test_config_supplies_quirks_and_keypad() -> None:
    keypad = Keypad()
    quirks = Quirks.superchip()

    machine = create_machine(MachineConfig(quirks=quirks, keypad=keypad))

    assert machine.keypad is keypad
    assert machine.cpu.keypad is keypad
    assert machine.cpu.quirks is quirks


def test_tick_timers_and_sound_state() -> None:
    machine = create_machine()
    machine.timers.set_sound(2)

    assert machine.is_sound_active()
    machine.tick_timers()
    machine.tick_timers()
    assert not machine.is_sound_active()
