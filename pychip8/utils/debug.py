"""Category-based debug logging for the CHIP-8 interpreter.

Categories are enabled through the ``CHIP8_DEBUG`` environment variable, e.g.
``CHIP8_DEBUG=cpu,input`` or ``CHIP8_DEBUG=all``.
"""

from __future__ import annotations

import os
from typing import Optional, Set

ENV_VARIABLE = "CHIP8_DEBUG"

_enabled: Optional[Set[str]] = None


def _categories() -> Set[str]:
    global _enabled
    if _enabled is None:
        raw = os.environ.get(ENV_VARIABLE, "")
        _enabled = {name.strip().lower() for name in raw.split(",") if name.strip()}
    return _enabled


def enable_debug(*categories: str) -> None:
    """Turn on extra categories at runtime (used by ``run.py --verbose``)."""

    _categories().update(name.lower() for name in categories if name)


def reset_debug() -> None:
    """Forget cached categories so the environment is read again."""

    global _enabled
    _enabled = None


def debug_enabled(category: Optional[str] = None) -> bool:
    """Return True when ``category`` (or, without one, anything) is enabled."""

    enabled = _categories()
    if category is None or "all" in enabled:
        return bool(enabled)
    return category.lower() in enabled


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
