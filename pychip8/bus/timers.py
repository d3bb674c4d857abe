"""Delay and sound countdown timers."""

from __future__ import annotations

from dataclasses import dataclass

TIMER_FREQUENCY = 60  # Hz


@dataclass
class Timers:
    """Two independent 8-bit counters that decay at 60 Hz.

    The counters are decremented by :meth:`tick`, which the cycle driver calls
    once per elapsed 1/60 s regardless of how many instructions ran in that
    interval.
    """

    delay: int = 0
    sound: int = 0

    def tick(self) -> None:
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    def is_sound_active(self) -> bool:
        return self.sound > 0

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def set_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
