"""CPU package for the CHIP-8 interpreter."""

from .core import STACK_DEPTH, Chip8CPU, CPUState
from .errors import CPUError, StackOverflowError, StackUnderflowError, UnknownOpcodeError
from .opcodes import Instruction, Operation, decode
from .quirks import PRESETS, Quirks
from . import opcodes

__all__ = [
    "STACK_DEPTH",
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "Instruction",
    "Operation",
    "decode",
    "PRESETS",
    "Quirks",
    "opcodes",
]
