"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from pychip8.bus import PROGRAM_START, Memory, Timers
from pychip8.cpu import Chip8CPU, Quirks
from pychip8.io import Keypad
from pychip8.loader import check_capacity
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FONT_ADDRESS, FONT_SPRITES, DisplayBuffer


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    quirks: Quirks = field(default_factory=Quirks)
    program: Optional[bytes] = None
    seed: Optional[int] = None
    keypad: Keypad | None = None


@dataclass
class Machine:
    """Aggregates the core components of one emulation session."""

    memory: Memory
    cpu: Chip8CPU
    display: DisplayBuffer
    keypad: Keypad
    timers: Timers

    def reset(self) -> None:
        """Re-initialise every component and reinstall the font."""

        self.memory.clear()
        self.memory.load_image(FONT_ADDRESS, FONT_SPRITES)
        self.cpu.reset()
        self.timers.reset()
        self.display.clear()
        self.keypad.reset()

    def load(self, program: bytes) -> None:
        """Write ``program`` verbatim at 0x200.

        Raises :class:`~pychip8.bus.CapacityError` before touching memory when
        the image does not fit.
        """

        check_capacity(program)
        self.memory.load_image(PROGRAM_START, bytes(program))
        if debug_enabled("loader"):
            debug_log("loader", "loaded %d bytes at %03x", len(program), PROGRAM_START)

    def step(self) -> int:
        return self.cpu.step()

    def tick_timers(self) -> None:
        self.timers.tick()

    def is_sound_active(self) -> bool:
        return self.timers.is_sound_active()


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a machine, reset it and load ``config.program`` if given."""

    config = config or MachineConfig()

    memory = Memory()
    display = DisplayBuffer()
    keypad = config.keypad or Keypad()
    timers = Timers()
    rng = random.Random(config.seed)

    cpu = Chip8CPU(memory, display, keypad, timers, quirks=config.quirks, rng=rng)

    machine = Machine(
        memory=memory,
        cpu=cpu,
        display=display,
        keypad=keypad,
        timers=timers,
    )
    machine.reset()
    if config.program is not None:
        machine.load(config.program)
    return machine
