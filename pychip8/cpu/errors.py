"""Exceptions raised by the CHIP-8 decoder and executor."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for CPU-related failures."""


class UnknownOpcodeError(CPUError):
    """Raised when a 16-bit word does not decode to a CHIP-8 instruction."""

    def __init__(self, instruction: int, address: int | None = None) -> None:
        location = "" if address is None else f" at {address:#05x}"
        super().__init__(f"unknown opcode {instruction & 0xFFFF:04X}{location}")
        self.instruction = instruction & 0xFFFF
        self.address = address


class StackOverflowError(CPUError):
    """Raised when CALL would nest deeper than the 16-entry stack."""


class StackUnderflowError(CPUError):
    """Raised when RET executes with an empty stack."""
