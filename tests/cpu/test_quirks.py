"""Behaviour switched by the compatibility flags."""

from __future__ import annotations

import dataclasses

import pytest

from pychip8.cpu import PRESETS, Quirks
from pychip8.system import Machine, MachineConfig, create_machine


def make_machine(quirks: Quirks, *words: int) -> Machine:
    program = b"".join(word.to_bytes(2, "big") for word in words)
    return create_machine(MachineConfig(quirks=quirks, program=program))


def test_default_flags() -> None:
    quirks = Quirks()

    assert quirks.shift_uses_vy
    assert not quirks.index_overflow_sets_vf
    assert not quirks.load_store_increments_i
    assert not quirks.jump_uses_vx
    assert not quirks.logic_resets_vf
    assert not quirks.wrap_sprites


def test_presets_build_quirks() -> None:
    assert set(PRESETS) == {"default", "cosmac-vip", "superchip"}
    for factory in PRESETS.values():
        assert isinstance(factory(), Quirks)
    assert PRESETS["superchip"]().jump_uses_vx
    assert PRESETS["cosmac-vip"]().load_store_increments_i


def test_names_lists_every_flag() -> None:
    assert Quirks.names() == (
        "shift_uses_vy",
        "index_overflow_sets_vf",
        "load_store_increments_i",
        "jump_uses_vx",
        "logic_resets_vf",
        "wrap_sprites",
    )


def test_quirks_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        Quirks().wrap_sprites = True  # type: ignore[misc]


def test_shift_in_place() -> None:
    machine = make_machine(Quirks(shift_uses_vy=False), 0x8126)
    machine.cpu.state.v[1] = 0b0000_0101
    machine.cpu.state.v[2] = 0b1111_0000

    machine.step()

    assert machine.cpu.state.v[1] == 0b0000_0010
    assert machine.cpu.state.v[0xF] == 1


def test_index_overflow_flag() -> None:
    machine = make_machine(Quirks(index_overflow_sets_vf=True), 0xF01E, 0xF01E)
    machine.cpu.state.i = 0xFFE
    machine.cpu.state.v[0] = 0x01

    machine.step()
    assert machine.cpu.state.i == 0xFFF
    assert machine.cpu.state.v[0xF] == 0

    machine.step()
    assert machine.cpu.state.i == 0x1000
    assert machine.cpu.state.v[0xF] == 1


def test_load_store_increments_index() -> None:
    machine = make_machine(Quirks(load_store_increments_i=True), 0xF255, 0xF165)
    machine.cpu.state.i = 0x400

    machine.step()
    assert machine.cpu.state.i == 0x403

    machine.step()
    assert machine.cpu.state.i == 0x405


def test_jump_with_vx() -> None:
    machine = make_machine(Quirks(jump_uses_vx=True), 0xB320)
    machine.cpu.state.v[0] = 0x01
    machine.cpu.state.v[3] = 0x10

    machine.step()

    assert machine.cpu.state.pc == 0x330


def test_logic_resets_flag() -> None:
    machine = make_machine(Quirks(logic_resets_vf=True), 0x8121)
    machine.cpu.state.v[0xF] = 0x05

    machine.step()

    assert machine.cpu.state.v[0xF] == 0


def test_wrapped_sprite() -> None:
    machine = make_machine(Quirks(wrap_sprites=True), 0xD012)
    machine.cpu.state.v[0] = 62
    machine.cpu.state.v[1] = 31
    machine.cpu.state.i = 0x300
    machine.memory.load_image(0x300, b"\xF0\xF0")

    machine.step()

    for column in (62, 63, 0, 1):
        assert machine.display.get_pixel(column, 31)
        assert machine.display.get_pixel(column, 0)
    assert sum(machine.display.snapshot()) == 8
