"""CHIP-8 interpreter.

The engine (``bus``, ``cpu``, ``video``, ``io``, ``system``) has no dependency
on pygame; ``ui`` and ``audio`` import it lazily when a window is opened.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
