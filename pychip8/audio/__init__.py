"""Audio output for the CHIP-8 sound timer."""

from .beeper import DEFAULT_TONE_HZ, SquareWaveBeeper

__all__ = ["DEFAULT_TONE_HZ", "SquareWaveBeeper"]
