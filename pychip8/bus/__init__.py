"""Memory and timer state shared by the CHIP-8 CPU."""

from .memory import (
    MEMORY_SIZE,
    PROGRAM_CAPACITY,
    PROGRAM_START,
    CapacityError,
    Memory,
    MemoryAccessError,
    OutOfBoundsError,
)
from .timers import TIMER_FREQUENCY, Timers

__all__ = [
    "MEMORY_SIZE",
    "PROGRAM_CAPACITY",
    "PROGRAM_START",
    "TIMER_FREQUENCY",
    "CapacityError",
    "Memory",
    "MemoryAccessError",
    "OutOfBoundsError",
    "Timers",
]
