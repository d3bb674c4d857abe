"""Opcode table and decoder for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Final, Iterable, List, Sequence, Tuple

from .errors import UnknownOpcodeError


class Operation(Enum):
    """Closed set of CHIP-8 operations."""

    CLS = auto()
    RET = auto()
    SYS = auto()
    JP = auto()
    CALL = auto()
    SE_IMM = auto()
    SNE_IMM = auto()
    SE_REG = auto()
    LD_IMM = auto()
    ADD_IMM = auto()
    LD_REG = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB = auto()
    SHR = auto()
    SUBN = auto()
    SHL = auto()
    SNE_REG = auto()
    LD_I = auto()
    JP_V0 = auto()
    RND = auto()
    DRW = auto()
    SKP = auto()
    SKNP = auto()
    LD_VX_DT = auto()
    LD_VX_K = auto()
    LD_DT_VX = auto()
    LD_ST_VX = auto()
    ADD_I_VX = auto()
    LD_F_VX = auto()
    LD_B_VX = auto()
    STORE_REGS = auto()
    LOAD_REGS = auto()


@dataclass(frozen=True)
class OpcodePattern:
    """Bit pattern, operand layout and handler for one operation."""

    mask: int
    match: int
    operation: Operation
    template: str
    handler: str
    operands: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.match & ~self.mask:
            raise ValueError(f"pattern {self.match:04X} has bits outside mask {self.mask:04X}")

    def matches(self, raw: int) -> bool:
        return (raw & self.mask) == self.match


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction carrying only the operands it uses."""

    raw: int
    operation: Operation
    x: int = 0
    y: int = 0
    n: int = 0
    nn: int = 0
    nnn: int = 0

    @property
    def pattern(self) -> OpcodePattern:
        return PATTERNS_BY_OPERATION[self.operation]

    @property
    def handler(self) -> str:
        return self.pattern.handler

    def disassemble(self) -> str:
        return self.pattern.template.format(x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn)


def _p(mask: int, match: int, operation: Operation, template: str, *operands: str) -> OpcodePattern:
    handler = "op_" + operation.name.lower()
    return OpcodePattern(mask, match, operation, template, handler, operands)


DEFAULT_PATTERNS: Sequence[OpcodePattern] = (
    _p(0xFFFF, 0x00E0, Operation.CLS, "CLS"),
    _p(0xFFFF, 0x00EE, Operation.RET, "RET"),
    _p(0xF000, 0x0000, Operation.SYS, "SYS {nnn:#05x}", "nnn"),
    _p(0xF000, 0x1000, Operation.JP, "JP {nnn:#05x}", "nnn"),
    _p(0xF000, 0x2000, Operation.CALL, "CALL {nnn:#05x}", "nnn"),
    _p(0xF000, 0x3000, Operation.SE_IMM, "SE V{x:X}, {nn:#04x}", "x", "nn"),
    _p(0xF000, 0x4000, Operation.SNE_IMM, "SNE V{x:X}, {nn:#04x}", "x", "nn"),
    _p(0xF00F, 0x5000, Operation.SE_REG, "SE V{x:X}, V{y:X}", "x", "y"),
    _p(0xF000, 0x6000, Operation.LD_IMM, "LD V{x:X}, {nn:#04x}", "x", "nn"),
    _p(0xF000, 0x7000, Operation.ADD_IMM, "ADD V{x:X}, {nn:#04x}", "x", "nn"),
    _p(0xF00F, 0x8000, Operation.LD_REG, "LD V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8001, Operation.OR, "OR V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8002, Operation.AND, "AND V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8003, Operation.XOR, "XOR V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8004, Operation.ADD_REG, "ADD V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8005, Operation.SUB, "SUB V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8006, Operation.SHR, "SHR V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x8007, Operation.SUBN, "SUBN V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x800E, Operation.SHL, "SHL V{x:X}, V{y:X}", "x", "y"),
    _p(0xF00F, 0x9000, Operation.SNE_REG, "SNE V{x:X}, V{y:X}", "x", "y"),
    _p(0xF000, 0xA000, Operation.LD_I, "LD I, {nnn:#05x}", "nnn"),
    _p(0xF000, 0xB000, Operation.JP_V0, "JP V0, {nnn:#05x}", "x", "nn", "nnn"),
    _p(0xF000, 0xC000, Operation.RND, "RND V{x:X}, {nn:#04x}", "x", "nn"),
    _p(0xF000, 0xD000, Operation.DRW, "DRW V{x:X}, V{y:X}, {n}", "x", "y", "n"),
    _p(0xF0FF, 0xE09E, Operation.SKP, "SKP V{x:X}", "x"),
    _p(0xF0FF, 0xE0A1, Operation.SKNP, "SKNP V{x:X}", "x"),
    _p(0xF0FF, 0xF007, Operation.LD_VX_DT, "LD V{x:X}, DT", "x"),
    _p(0xF0FF, 0xF00A, Operation.LD_VX_K, "LD V{x:X}, K", "x"),
    _p(0xF0FF, 0xF015, Operation.LD_DT_VX, "LD DT, V{x:X}", "x"),
    _p(0xF0FF, 0xF018, Operation.LD_ST_VX, "LD ST, V{x:X}", "x"),
    _p(0xF0FF, 0xF01E, Operation.ADD_I_VX, "ADD I, V{x:X}", "x"),
    _p(0xF0FF, 0xF029, Operation.LD_F_VX, "LD F, V{x:X}", "x"),
    _p(0xF0FF, 0xF033, Operation.LD_B_VX, "LD B, V{x:X}", "x"),
    _p(0xF0FF, 0xF055, Operation.STORE_REGS, "LD [I], V{x:X}", "x"),
    _p(0xF0FF, 0xF065, Operation.LOAD_REGS, "LD V{x:X}, [I]", "x"),
)


class OpcodeTable:
    """Patterns grouped by high nibble, checked in registration order."""

    _GROUPS: Final[int] = 0x10

    def __init__(self) -> None:
        self._groups: List[List[OpcodePattern]] = [[] for _ in range(self._GROUPS)]
        self._by_operation: Dict[Operation, OpcodePattern] = {}

    def register(self, pattern: OpcodePattern) -> None:
        if pattern.operation in self._by_operation:
            raise ValueError(f"operation {pattern.operation.name} already registered")
        self._groups[(pattern.match >> 12) & 0xF].append(pattern)
        self._by_operation[pattern.operation] = pattern

    def register_all(self, patterns: Iterable[OpcodePattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def lookup(self, raw: int) -> OpcodePattern | None:
        for pattern in self._groups[(raw >> 12) & 0xF]:
            if pattern.matches(raw):
                return pattern
        return None

    def by_operation(self) -> Dict[Operation, OpcodePattern]:
        return dict(self._by_operation)


def build_opcode_table(patterns: Iterable[OpcodePattern]) -> OpcodeTable:
    table = OpcodeTable()
    table.register_all(patterns)
    return table


OPCODE_TABLE = build_opcode_table(DEFAULT_PATTERNS)
PATTERNS_BY_OPERATION = OPCODE_TABLE.by_operation()


def decode(raw: int, table: OpcodeTable = OPCODE_TABLE) -> Instruction:
    """Decode a 16-bit word into an :class:`Instruction`.

    ``0x0000`` is rejected even though it fits the SYS pattern: it only shows
    up when the program counter has run into zeroed memory.
    """

    raw &= 0xFFFF
    pattern = table.lookup(raw) if raw != 0x0000 else None
    if pattern is None:
        raise UnknownOpcodeError(raw)

    fields = {
        "x": (raw >> 8) & 0x0F,
        "y": (raw >> 4) & 0x0F,
        "n": raw & 0x000F,
        "nn": raw & 0x00FF,
        "nnn": raw & 0x0FFF,
    }
    operands = {name: fields[name] for name in pattern.operands}
    return Instruction(raw, pattern.operation, **operands)
