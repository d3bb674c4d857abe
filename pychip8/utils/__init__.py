"""Utility helpers for the CHIP-8 interpreter."""

from .debug import debug_enabled, debug_log, enable_debug, reset_debug
from .trace import TraceEntry, TraceRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "enable_debug",
    "reset_debug",
    "TraceEntry",
    "TraceRecorder",
]
