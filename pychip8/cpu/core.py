"""CHIP-8 CPU: register file, fetch/decode/execute loop and opcode handlers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from pychip8.bus import PROGRAM_START, Memory, MemoryAccessError, Timers
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import DisplayBuffer, glyph_address

from .errors import CPUError, StackOverflowError, StackUnderflowError, UnknownOpcodeError
from .opcodes import Instruction, decode
from .quirks import Quirks

STACK_DEPTH = 16
VF = 0xF


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: bytearray = field(default_factory=lambda: bytearray(16))
    i: int = 0x000
    pc: int = PROGRAM_START
    stack: list[int] = field(default_factory=list)
    waiting_register: int | None = None

    def clone(self) -> "CPUState":
        return CPUState(bytearray(self.v), self.i, self.pc, list(self.stack), self.waiting_register)

    @property
    def awaiting_key(self) -> bool:
        return self.waiting_register is not None


@dataclass
class Chip8CPU:
    """Interpreter core operating on shared memory, display, keypad and timers."""

    memory: Memory
    display: DisplayBuffer
    keypad: Keypad
    timers: Timers
    quirks: Quirks = field(default_factory=Quirks)
    rng: random.Random = field(default_factory=random.Random)

    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0
    halted: bool = False
    fault: Exception | None = None
    last_instruction: Instruction | None = None

    def reset(self) -> None:
        """Reset registers, stack and execution status."""

        self.state = CPUState()
        self.instruction_count = 0
        self.halted = False
        self.fault = None
        self.last_instruction = None

    def step(self) -> int:
        """Execute a single instruction and return the number retired (0 or 1).

        While an FX0A key wait is pending no instruction is fetched; the call
        returns 0 until the keypad reports a pressed key. A halted CPU also
        returns 0. Errors halt the CPU and propagate to the caller.
        """

        if self.halted:
            return 0

        if self.state.waiting_register is not None:
            return self._poll_key_wait()

        pc_before = self.state.pc
        try:
            raw = self.memory.load16(pc_before)
            self.state.pc = pc_before + 2
            try:
                instruction = decode(raw)
            except UnknownOpcodeError:
                raise UnknownOpcodeError(raw, pc_before) from None
            if debug_enabled("cpu"):
                debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, raw, instruction.disassemble())
            handler = getattr(self, instruction.handler, None)
            if handler is None:
                raise CPUError(f"handler '{instruction.handler}' not implemented")
            handler(instruction)
        except (CPUError, MemoryAccessError) as exc:
            self.halted = True
            self.fault = exc
            if debug_enabled("cpu"):
                debug_log("cpu", "halted pc=%03x error=%s", pc_before, exc)
            raise

        self.last_instruction = instruction
        self.instruction_count += 1
        return 1

    def _poll_key_wait(self) -> int:
        key = self.keypad.first_pressed()
        if key is None:
            return 0
        register = self.state.waiting_register
        assert register is not None
        self.state.v[register] = key
        self.state.waiting_register = None
        self.state.pc += 2
        self.instruction_count += 1
        if debug_enabled("cpu"):
            debug_log("cpu", "key wait resolved V%X=%X pc=%03x", register, key, self.state.pc)
        return 1

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: Instruction) -> None:
        self.display.clear()

    def op_ret(self, _: Instruction) -> None:
        if not self.state.stack:
            raise StackUnderflowError(f"return with empty stack at {self.state.pc - 2:#05x}")
        self.state.pc = self.state.stack.pop()

    def op_sys(self, instruction: Instruction) -> None:
        # Machine-code routines cannot run here; treat as an ordinary call.
        if debug_enabled("cpu"):
            debug_log("cpu", "SYS %03x treated as CALL", instruction.nnn)
        self._call(instruction.nnn)

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        self._call(instruction.nnn)

    def op_jp_v0(self, instruction: Instruction) -> None:
        v = self.state.v
        if self.quirks.jump_uses_vx:
            self.state.pc = instruction.nnn + v[instruction.x]
        else:
            self.state.pc = instruction.nnn + v[0]

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_imm(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] == instruction.nn:
            self._skip()

    def op_sne_imm(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] != instruction.nn:
            self._skip()

    def op_se_reg(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] == self.state.v[instruction.y]:
            self._skip()

    def op_sne_reg(self, instruction: Instruction) -> None:
        if self.state.v[instruction.x] != self.state.v[instruction.y]:
            self._skip()

    def op_skp(self, instruction: Instruction) -> None:
        if self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F):
            self._skip()

    def op_sknp(self, instruction: Instruction) -> None:
        if not self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F):
            self._skip()

    # ------------------------------------------------------------------
    # Register arithmetic and logic

    def op_ld_imm(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.nn

    def op_add_imm(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.nn) & 0xFF

    def op_ld_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] |= v[instruction.y]
        self._logic_flag()

    def op_and(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] &= v[instruction.y]
        self._logic_flag()

    def op_xor(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] ^= v[instruction.y]
        self._logic_flag()

    def op_add_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        v[instruction.x] = total & 0xFF
        v[VF] = 1 if total > 0xFF else 0

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        v[instruction.x] = (x - y) & 0xFF
        v[VF] = 1 if x >= y else 0

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        v[instruction.x] = (y - x) & 0xFF
        v[VF] = 1 if y >= x else 0

    def op_shr(self, instruction: Instruction) -> None:
        v = self.state.v
        source = v[instruction.y] if self.quirks.shift_uses_vy else v[instruction.x]
        v[instruction.x] = source >> 1
        v[VF] = source & 0x01

    def op_shl(self, instruction: Instruction) -> None:
        v = self.state.v
        source = v[instruction.y] if self.quirks.shift_uses_vy else v[instruction.x]
        v[instruction.x] = (source << 1) & 0xFF
        v[VF] = (source >> 7) & 0x01

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.rng.getrandbits(8) & instruction.nn

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.i = instruction.nnn

    def op_add_i_vx(self, instruction: Instruction) -> None:
        total = self.state.i + self.state.v[instruction.x]
        self.state.i = total & 0xFFFF
        if self.quirks.index_overflow_sets_vf:
            self.state.v[VF] = 1 if total > 0x0FFF else 0

    def op_ld_f_vx(self, instruction: Instruction) -> None:
        self.state.i = glyph_address(self.state.v[instruction.x])

    def op_ld_b_vx(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        digits = bytes((value // 100, (value // 10) % 10, value % 10))
        self.memory.load_image(self.state.i, digits)

    def op_store_regs(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.memory.load_image(self.state.i, bytes(self.state.v[:count]))
        if self.quirks.load_store_increments_i:
            self.state.i = (self.state.i + count) & 0xFFFF

    def op_load_regs(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.state.v[:count] = self.memory.read_block(self.state.i, count)
        if self.quirks.load_store_increments_i:
            self.state.i = (self.state.i + count) & 0xFFFF

    # ------------------------------------------------------------------
    # Display, timers and input

    def op_drw(self, instruction: Instruction) -> None:
        v = self.state.v
        sprite = self.memory.read_block(self.state.i, instruction.n)
        collision = self.display.draw_sprite(
            v[instruction.x],
            v[instruction.y],
            sprite,
            wrap=self.quirks.wrap_sprites,
        )
        v[VF] = 1 if collision else 0

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.timers.delay

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.timers.set_delay(self.state.v[instruction.x])

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.timers.set_sound(self.state.v[instruction.x])

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        # Park PC on the FX0A itself; _poll_key_wait moves past it.
        self.state.pc -= 2
        self.state.waiting_register = instruction.x
        if debug_enabled("cpu"):
            debug_log("cpu", "waiting for key into V%X", instruction.x)

    # ------------------------------------------------------------------
    # Helpers

    def _skip(self) -> None:
        self.state.pc += 2

    def _call(self, address: int) -> None:
        if len(self.state.stack) >= STACK_DEPTH:
            raise StackOverflowError(f"call to {address:#05x} exceeds stack depth {STACK_DEPTH}")
        self.state.stack.append(self.state.pc)
        self.state.pc = address

    def _logic_flag(self) -> None:
        if self.quirks.logic_resets_vf:
            self.state.v[VF] = 0
