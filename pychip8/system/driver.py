"""Real-time cycle driver.

The driver turns elapsed wall-clock time into two independent amounts of
work: instruction slots at the configured rate, and timer ticks at a fixed
60 Hz. The accumulators never share state, so changing the instruction rate
leaves timer decay untouched.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from pychip8.bus import TIMER_FREQUENCY, MemoryAccessError
from pychip8.cpu import CPUError
from pychip8.utils import TraceRecorder, debug_enabled, debug_log

from .machine import Machine

DEFAULT_INSTRUCTIONS_PER_SECOND = 700
DEFAULT_MAX_FRAME_SECONDS = 0.25

# Absorbs float error so that n slices of 1/n second add up to a whole unit.
_EPSILON = 1e-9


@dataclass(frozen=True)
class FrameResult:
    """Work performed by one :meth:`CycleDriver.advance` call."""

    steps: int
    timer_ticks: int
    executed: int


class CycleDriver:
    """Issue ``step()`` and ``tick_timers()`` calls paced by real time."""

    def __init__(
        self,
        machine: Machine,
        instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND,
        *,
        clock: Callable[[], float] = time.perf_counter,
        max_frame_seconds: float = DEFAULT_MAX_FRAME_SECONDS,
        trace: TraceRecorder | None = None,
    ) -> None:
        if instructions_per_second <= 0:
            raise ValueError("instructions_per_second must be positive")
        if max_frame_seconds <= 0:
            raise ValueError("max_frame_seconds must be positive")
        self._machine = machine
        self._ips = instructions_per_second
        self._clock = clock
        self._max_frame_seconds = max_frame_seconds
        self._step_budget = 0.0
        self._timer_budget = 0.0
        self._last_time: float | None = None
        self._paused = False
        self._trace = trace
        self._last_idle_pc: int | None = None

    @property
    def machine(self) -> Machine:
        return self._machine

    @property
    def instructions_per_second(self) -> int:
        return self._ips

    @instructions_per_second.setter
    def instructions_per_second(self, value: int) -> None:
        if value <= 0:
            raise ValueError("instructions_per_second must be positive")
        self._ips = value

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        # The paused interval is dropped rather than replayed.
        self._paused = False
        self._last_time = None

    def toggle_pause(self) -> bool:
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused

    def run_frame(self) -> FrameResult:
        """Advance by the real time elapsed since the previous call."""

        now = self._clock()
        if self._last_time is None:
            self._last_time = now
            return FrameResult(0, 0, 0)
        elapsed = now - self._last_time
        self._last_time = now
        return self.advance(elapsed)

    def advance(self, elapsed_seconds: float) -> FrameResult:
        """Run the instructions and timer ticks owed for ``elapsed_seconds``.

        A machine error raised by ``step()`` propagates; the CPU is halted by
        then, so later frames retire no instructions.
        """

        if self._paused or elapsed_seconds <= 0:
            return FrameResult(0, 0, 0)
        elapsed = min(elapsed_seconds, self._max_frame_seconds)

        self._step_budget += elapsed * self._ips
        steps = int(self._step_budget + _EPSILON)
        self._step_budget -= steps

        self._timer_budget += elapsed * TIMER_FREQUENCY
        ticks = int(self._timer_budget + _EPSILON)
        self._timer_budget -= ticks

        machine = self._machine
        step = machine.step if self._trace is None else self._traced_step
        executed = 0
        for _ in range(steps):
            executed += step()
        for _ in range(ticks):
            machine.tick_timers()

        if debug_enabled("driver"):
            debug_log(
                "driver",
                "elapsed_ms=%.3f steps=%d executed=%d ticks=%d",
                elapsed * 1000.0,
                steps,
                executed,
                ticks,
            )
        return FrameResult(steps, ticks, executed)

    def _traced_step(self) -> int:
        machine = self._machine
        cpu = machine.cpu
        trace = self._trace
        assert trace is not None
        state_before = cpu.state.clone()
        waiting_before = state_before.awaiting_key
        try:
            executed = machine.step()
        except (CPUError, MemoryAccessError) as exc:
            trace.record_step(
                state_before,
                getattr(exc, "instruction", None),
                machine.timers,
                waiting=waiting_before,
                halted=True,
                note=type(exc).__name__,
            )
            raise
        if executed == 0 and (cpu.halted or waiting_before):
            # Idle polling: only the first idle step at a given PC is kept.
            if self._last_idle_pc == state_before.pc:
                return executed
            self._last_idle_pc = state_before.pc
            trace.record_step(
                state_before,
                None,
                machine.timers,
                waiting=waiting_before,
                halted=cpu.halted,
                note="idle",
            )
            return executed
        self._last_idle_pc = None
        instruction = None if waiting_before else cpu.last_instruction
        trace.record_step(
            state_before,
            None if instruction is None else instruction.raw,
            machine.timers,
            waiting=waiting_before,
            halted=cpu.halted,
            mnemonic="" if instruction is None else instruction.disassemble(),
            note="key" if waiting_before else "",
        )
        return executed
