"""Square-wave tone gated by the CHIP-8 sound timer."""

from __future__ import annotations

from array import array
from typing import Optional

DEFAULT_TONE_HZ = 440.0
_AMPLITUDE = 12_000


class SquareWaveBeeper:
    """Single fixed-pitch tone played on one pygame mixer channel.

    The frontend calls :meth:`set_active` once per frame with the result of
    ``Machine.is_sound_active()``. Very short beeps are stretched to
    ``min_play_ms`` with a fade so that a sound timer of 1 is still audible.
    """

    def __init__(
        self,
        *,
        frequency: float = DEFAULT_TONE_HZ,
        sample_rate: int = 44_100,
        volume: float = 0.25,
        min_play_ms: int = 35,
    ) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if frequency <= 0.0:
            raise ValueError("tone frequency must be positive")
        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            raise RuntimeError("pygame mixer is not initialised")

        self._pygame = pygame
        self.frequency = frequency
        self.volume = min(1.0, max(0.0, volume))
        self.min_play_ms = max(0, min_play_ms)
        self._sound = pygame.mixer.Sound(
            buffer=_square_wave(frequency, max(1, sample_rate), mixer_state[2]).tobytes()
        )
        self._channel = None
        self._active = False
        self._started_at = 0

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, enabled: bool) -> None:
        """Start or stop the tone; repeated calls with the same state do nothing."""

        if enabled == self._active:
            return
        if enabled:
            self._start()
        else:
            self._stop()

    def shutdown(self) -> None:
        self._stop()
        self._channel = None

    def _start(self) -> None:
        if self._channel is None:
            self._channel = self._pygame.mixer.find_channel(True)
            if self._channel is None:
                return
        self._channel.play(self._sound, loops=-1)
        self._channel.set_volume(self.volume)
        self._started_at = self._pygame.time.get_ticks()
        self._active = True

    def _stop(self) -> None:
        self._active = False
        if self._channel is None:
            return
        played = self._pygame.time.get_ticks() - self._started_at
        if played < self.min_play_ms:
            self._channel.fadeout(max(10, self.min_play_ms - played))
        else:
            self._channel.stop()


def _square_wave(frequency: float, sample_rate: int, channels: int) -> array:
    """One period of signed 16-bit samples, repeated per mixer channel."""

    period = max(2, round(sample_rate / frequency))
    samples = array("h")
    for index in range(period):
        value = _AMPLITUDE if index < period // 2 else -_AMPLITUDE
        samples.extend([value] * max(1, channels))
    return samples


__all__ = ["DEFAULT_TONE_HZ", "SquareWaveBeeper"]
