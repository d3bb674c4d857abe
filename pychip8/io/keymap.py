"""Host key name to CHIP-8 keypad translation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence

from .keypad import KEY_COUNT

# Host key for each logical key 0x0-0xF. Lays the 4x4 hex pad
#   1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
# over the left-hand block of a QWERTY keyboard.
DEFAULT_LAYOUT: Sequence[str] = (
    "x", "1", "2", "3",
    "q", "w", "e", "a",
    "s", "d", "z", "c",
    "4", "r", "f", "v",
)


ALIAS_TABLE: Mapping[str, str] = {
    "keypad 0": "0",
    "keypad 1": "1",
    "keypad 2": "2",
    "keypad 3": "3",
    "keypad 4": "4",
    "keypad 5": "5",
    "keypad 6": "6",
    "keypad 7": "7",
    "keypad 8": "8",
    "keypad 9": "9",
    "[0]": "0",
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
    "[5]": "5",
    "[6]": "6",
    "[7]": "7",
    "[8]": "8",
    "[9]": "9",
}


@dataclass
class KeyMap:
    """Translate host key names (as reported by pygame) to logical keys."""

    _bindings: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_layout(cls, layout: Sequence[str] = DEFAULT_LAYOUT) -> "KeyMap":
        """Build a map from one host key name per logical key, in key order."""

        if len(layout) != KEY_COUNT:
            raise ValueError(f"key layout must name {KEY_COUNT} keys, got {len(layout)}")
        bindings: Dict[str, int] = {}
        for logical, name in enumerate(layout):
            canonical = name.strip().lower()
            if not canonical:
                raise ValueError(f"empty host key for logical key {logical:X}")
            if canonical in bindings:
                raise ValueError(f"host key '{canonical}' bound twice")
            bindings[canonical] = logical
        return cls(bindings)

    @classmethod
    def parse(cls, text: str) -> "KeyMap":
        """Parse a CLI layout: 16 characters, or 16 comma-separated names."""

        if "," in text:
            names = [part.strip() for part in text.split(",")]
        else:
            names = list(text.strip())
        return cls.from_layout(names)

    def bind(self, name: str, logical: int) -> None:
        if not 0 <= logical < KEY_COUNT:
            raise ValueError(f"logical key {logical!r} outside 0x0-0xF")
        self._bindings[name.strip().lower()] = logical

    def translate(self, name: str) -> int | None:
        lowered = name.lower()
        lowered = ALIAS_TABLE.get(lowered, lowered)
        return self._bindings.get(lowered)

    def layout(self) -> tuple[str, ...]:
        names = [""] * KEY_COUNT
        for name, logical in self._bindings.items():
            if not names[logical]:
                names[logical] = name
        return tuple(names)
