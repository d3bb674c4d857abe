"""Execution trace kept in memory and dumped when something goes wrong."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

from .debug import debug_log


@dataclass(frozen=True)
class TraceEntry:
    """Registers and timers as they were before one CPU step."""

    pc: int
    opcode: Optional[int]
    mnemonic: str
    i: int
    v: tuple[int, ...]
    stack_depth: int
    delay: int
    sound: int
    waiting: bool
    halted: bool
    note: str = ""

    def flags(self) -> str:
        labels = []
        if self.waiting:
            labels.append("KEY")
        if self.halted:
            labels.append("HALT")
        if self.note:
            labels.append(self.note)
        return ",".join(labels) or "-"

    def format(self) -> str:
        opcode = "----" if self.opcode is None else f"{self.opcode:04X}"
        registers = " ".join(f"{value:02X}" for value in self.v)
        return (
            f"pc={self.pc:03X} opcode={opcode} {self.mnemonic or '?':<16} I={self.i:03X} "
            f"V=[{registers}] SP={self.stack_depth:X} DT={self.delay:02X} ST={self.sound:02X} "
            f"flags={self.flags()}"
        )


class TraceRecorder:
    """Bounded history of :class:`TraceEntry`; the oldest entry drops first."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._history: Deque[TraceEntry] = deque(maxlen=capacity)

    def record_step(
        self,
        cpu_state,
        opcode: Optional[int],
        timers,
        *,
        waiting: bool,
        halted: bool,
        mnemonic: str = "",
        note: str = "",
    ) -> None:
        self._history.append(
            TraceEntry(
                pc=cpu_state.pc & 0xFFFF,
                opcode=None if opcode is None else opcode & 0xFFFF,
                mnemonic=mnemonic,
                i=cpu_state.i & 0xFFFF,
                v=tuple(cpu_state.v),
                stack_depth=len(cpu_state.stack),
                delay=timers.delay,
                sound=timers.sound,
                waiting=waiting,
                halted=halted,
                note=note,
            )
        )

    def entries(self, limit: Optional[int] = None) -> Iterator[TraceEntry]:
        """Yield the newest ``limit`` entries (all by default), oldest first."""

        history = list(self._history)
        if limit is not None:
            history = history[len(history) - max(limit, 0) :] if limit > 0 else []
        return iter(history)

    def last_entry(self) -> Optional[TraceEntry]:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()

    def format_entries(self, limit: Optional[int] = None) -> List[str]:
        return [entry.format() for entry in self.entries(limit)]

    def dump(self, category: str, limit: Optional[int] = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)
