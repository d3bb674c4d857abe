"""Compatibility switches for behaviour that differs between interpreters."""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class Quirks:
    """Named toggles for historically ambiguous instruction semantics.

    - ``shift_uses_vy``: 8XY6/8XYE shift VY into VX (COSMAC VIP). When off the
      shift works on VX in place (CHIP-48, SUPER-CHIP).
    - ``index_overflow_sets_vf``: FX1E sets VF to 1 when I + VX passes 0xFFF
      and to 0 otherwise (Amiga interpreter; required by Spacefight 2091!).
    - ``load_store_increments_i``: FX55/FX65 leave I pointing past the last
      register copied (COSMAC VIP).
    - ``jump_uses_vx``: BXNN jumps to XNN + VX instead of NNN + V0 (CHIP-48,
      SUPER-CHIP).
    - ``logic_resets_vf``: 8XY1/8XY2/8XY3 clear VF (COSMAC VIP).
    - ``wrap_sprites``: DXYN wraps pixels past the right/bottom edge instead of
      clipping them.
    """

    shift_uses_vy: bool = True
    index_overflow_sets_vf: bool = False
    load_store_increments_i: bool = False
    jump_uses_vx: bool = False
    logic_resets_vf: bool = False
    wrap_sprites: bool = False

    @classmethod
    def cosmac_vip(cls) -> "Quirks":
        return cls(
            shift_uses_vy=True,
            load_store_increments_i=True,
            logic_resets_vf=True,
        )

    @classmethod
    def superchip(cls) -> "Quirks":
        return cls(
            shift_uses_vy=False,
            jump_uses_vx=True,
        )

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))


PRESETS = {
    "default": Quirks,
    "cosmac-vip": Quirks.cosmac_vip,
    "superchip": Quirks.superchip,
}
