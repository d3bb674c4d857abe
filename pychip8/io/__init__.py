"""Keypad state and host key translation."""

from .keymap import DEFAULT_LAYOUT, KeyMap
from .keypad import KEY_COUNT, Keypad

__all__ = [
    "DEFAULT_LAYOUT",
    "KEY_COUNT",
    "KeyMap",
    "Keypad",
]
