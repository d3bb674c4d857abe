"""Baseline tests ensuring the package layout imports correctly."""

import pychip8


def test_package_exports() -> None:
    for name in ("cpu", "bus", "video", "audio", "io", "system", "loader", "ui", "utils"):
        assert hasattr(pychip8, name), f"missing submodule: {name}"


def test_engine_exports() -> None:
    from pychip8 import bus, cpu, system

    for name in ("Memory", "Timers", "OutOfBoundsError", "CapacityError"):
        assert hasattr(bus, name), f"bus missing symbol: {name}"
    for name in ("Chip8CPU", "decode", "Quirks", "UnknownOpcodeError", "StackOverflowError", "StackUnderflowError"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"
    for name in ("Machine", "CycleDriver", "create_machine"):
        assert hasattr(system, name), f"system missing symbol: {name}"
