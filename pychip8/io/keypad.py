"""Sixteen-key hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


def _check_key(key: int) -> int:
    if not 0 <= key < KEY_COUNT:
        raise ValueError(f"key {key!r} outside 0x0-0xF")
    return key


@dataclass
class Keypad:
    """Current pressed/released flag for each logical key 0x0-0xF.

    The host writes the state from real input events; the interpreter only
    reads it. Multiple host keys may be bound to one logical key, so presses
    are reference counted the same way the matrix keyboard counts them.
    """

    _pressed: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _counts: list[int] = field(default_factory=lambda: [0] * KEY_COUNT)

    def press(self, key: int) -> None:
        _check_key(key)
        self._counts[key] += 1
        self._pressed[key] = True
        if debug_enabled("input"):
            debug_log("input", "keypad_press key=%X count=%d", key, self._counts[key])

    def release(self, key: int) -> None:
        _check_key(key)
        count = self._counts[key]
        if count <= 1:
            self._counts[key] = 0
            self._pressed[key] = False
        else:
            self._counts[key] = count - 1
        if debug_enabled("input"):
            debug_log("input", "keypad_release key=%X count=%d", key, self._counts[key])

    def set(self, key: int, pressed: bool) -> None:
        """Force ``key`` into the given state, ignoring press counts."""

        _check_key(key)
        self._pressed[key] = pressed
        self._counts[key] = 1 if pressed else 0

    def is_pressed(self, key: int) -> bool:
        return self._pressed[key & 0x0F]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key index, or ``None``."""

        for key, pressed in enumerate(self._pressed):
            if pressed:
                return key
        return None

    def any_pressed(self) -> bool:
        return any(self._pressed)

    def reset(self) -> None:
        self._pressed[:] = [False] * KEY_COUNT
        self._counts[:] = [0] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._pressed)
