"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .driver import DEFAULT_INSTRUCTIONS_PER_SECOND, CycleDriver, FrameResult
from .machine import Machine, MachineConfig, create_machine

__all__ = [
    "DEFAULT_INSTRUCTIONS_PER_SECOND",
    "CycleDriver",
    "FrameResult",
    "MachineConfig",
    "Machine",
    "create_machine",
]
