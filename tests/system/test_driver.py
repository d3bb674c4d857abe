"""Real-time pacing of instruction steps and timer ticks."""

from __future__ import annotations

import pytest

from pychip8.cpu import UnknownOpcodeError
from pychip8.system import CycleDriver, FrameResult, Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder

# 0x200: JP 0x200
LOOP = b"\x12\x00"


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def make_machine(program: bytes = LOOP) -> Machine:
    return create_machine(MachineConfig(program=program))


@pytest.mark.parametrize("ips", [1, 700, 5000])
def test_timers_drain_at_sixty_hertz_regardless_of_rate(ips: int) -> None:
    machine = make_machine()
    machine.timers.set_delay(60)
    machine.timers.set_sound(60)
    driver = CycleDriver(machine, ips)

    ticks = 0
    for _ in range(60):
        ticks += driver.advance(1 / 60).timer_ticks

    assert ticks == 60
    assert machine.timers.delay == 0
    assert machine.timers.sound == 0


def test_steps_follow_instruction_rate() -> None:
    machine = make_machine()
    driver = CycleDriver(machine, 700)

    steps = sum(driver.advance(1 / 60).steps for _ in range(60))

    assert steps == 700
    assert machine.cpu.instruction_count == 700


def test_fractional_budget_carries_over() -> None:
    driver = CycleDriver(make_machine(), 90)

    first = driver.advance(0.01)
    second = driver.advance(0.01)

    assert (first.steps, second.steps) == (0, 1)
    assert (first.timer_ticks, second.timer_ticks) == (0, 1)


def test_changing_rate_keeps_timer_budget() -> None:
    driver = CycleDriver(make_machine(), 100)
    driver.advance(0.01)

    driver.instructions_per_second = 1000
    result = driver.advance(0.01)

    assert result.steps == 10
    assert result.timer_ticks == 1
    with pytest.raises(ValueError):
        driver.instructions_per_second = 0


def test_long_gaps_are_capped() -> None:
    driver = CycleDriver(make_machine(), 100)

    result = driver.advance(10.0)

    assert result == FrameResult(steps=25, timer_ticks=15, executed=25)


def test_zero_or_negative_elapsed_does_nothing() -> None:
    driver = CycleDriver(make_machine(), 100)

    assert driver.advance(0.0) == FrameResult(0, 0, 0)
    assert driver.advance(-1.0) == FrameResult(0, 0, 0)


def test_pause_and_resume() -> None:
    machine = make_machine()
    machine.timers.set_delay(10)
    driver = CycleDriver(machine, 100)

    assert driver.toggle_pause() is True
    assert driver.paused
    assert driver.advance(0.1) == FrameResult(0, 0, 0)
    assert machine.timers.delay == 10

    assert driver.toggle_pause() is False
    assert driver.advance(0.1).steps == 10


def test_run_frame_uses_clock() -> None:
    clock = FakeClock(1.0)
    driver = CycleDriver(make_machine(), 80, clock=clock)

    assert driver.run_frame() == FrameResult(0, 0, 0)

    clock.now = 1.125
    assert driver.run_frame() == FrameResult(steps=10, timer_ticks=7, executed=10)

    clock.now = 1.25
    assert driver.run_frame().timer_ticks == 8


def test_resume_discards_paused_interval() -> None:
    clock = FakeClock(0.0)
    driver = CycleDriver(make_machine(), 80, clock=clock)
    driver.run_frame()

    driver.pause()
    clock.now = 100.0
    assert driver.run_frame() == FrameResult(0, 0, 0)

    driver.resume()
    assert driver.run_frame() == FrameResult(0, 0, 0)
    clock.now = 100.125
    assert driver.run_frame().steps == 10


def test_fault_propagates_and_halts() -> None:
    machine = make_machine(b"\x60\x01\x00\x00")
    driver = CycleDriver(machine, 100)

    with pytest.raises(UnknownOpcodeError):
        driver.advance(0.05)
    assert machine.cpu.halted

    result = driver.advance(0.05)
    assert result.executed == 0
    assert result.timer_ticks == 3


def test_key_wait_blocks_without_stopping_timers() -> None:
    machine = make_machine(b"\xF3\x0A\x12\x02")
    machine.timers.set_delay(5)
    driver = CycleDriver(machine, 100)

    result = driver.advance(0.05)
    assert result.steps == 5
    assert result.executed == 1
    assert machine.timers.delay == 2

    machine.keypad.press(0x9)
    driver.advance(0.01)
    assert machine.cpu.state.v[3] == 0x9
    assert machine.cpu.state.pc == 0x202


def test_rejects_non_positive_settings() -> None:
    with pytest.raises(ValueError):
        CycleDriver(make_machine(), 0)
    with pytest.raises(ValueError):
        CycleDriver(make_machine(), 100, max_frame_seconds=0)


def test_trace_records_executed_instructions() -> None:
    trace = TraceRecorder(16)
    driver = CycleDriver(make_machine(b"\x60\x05\x12\x02"), 100, trace=trace)

    driver.advance(0.03)

    entries = list(trace.entries())
    assert [entry.pc for entry in entries] == [0x200, 0x202, 0x202]
    assert entries[0].opcode == 0x6005
    assert entries[0].mnemonic == "LD V0, 0x05"
    assert entries[1].mnemonic == "JP 0x202"


def test_trace_keeps_one_entry_per_idle_wait() -> None:
    trace = TraceRecorder(16)
    machine = make_machine(b"\xF0\x0A")
    driver = CycleDriver(machine, 100, trace=trace)

    driver.advance(0.05)
    entries = list(trace.entries())
    assert len(entries) == 2
    assert entries[0].opcode == 0xF00A
    assert entries[1].waiting
    assert entries[1].note == "idle"

    machine.keypad.press(0x1)
    driver.advance(0.01)
    last = trace.last_entry()
    assert last is not None
    assert last.note == "key"
    assert last.opcode is None


def test_trace_records_fault() -> None:
    trace = TraceRecorder(4)
    driver = CycleDriver(make_machine(b"\x00\x00"), 100, trace=trace)

    with pytest.raises(UnknownOpcodeError):
        driver.advance(0.01)

    last = trace.last_entry()
    assert last is not None
    assert last.halted
    assert last.opcode == 0x0000
    assert last.note == "UnknownOpcodeError"
