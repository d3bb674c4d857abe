"""Command-line entry point for the CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from pychip8.cpu import PRESETS, Quirks
from pychip8.io import KeyMap
from pychip8.system import DEFAULT_INSTRUCTIONS_PER_SECOND
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.utils import enable_debug
from pychip8.video import CHARCOAL, parse_color

_QUIRK_HELP = {
    "shift_uses_vy": "8XY6/8XYE shift VY into VX",
    "index_overflow_sets_vf": "FX1E sets VF when I passes 0xFFF",
    "load_store_increments_i": "FX55/FX65 advance I",
    "jump_uses_vx": "BXNN jumps to XNN + VX",
    "logic_resets_vf": "8XY1/8XY2/8XY3 clear VF",
    "wrap_sprites": "sprites wrap at the screen edge instead of clipping",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter",
    )
    parser.add_argument(
        "rom",
        type=Path,
        help="Path to the CHIP-8 program image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the interpreter in fullscreen mode",
    )
    parser.add_argument(
        "--ips",
        type=int,
        default=DEFAULT_INSTRUCTIONS_PER_SECOND,
        help=f"Instructions executed per second (default: {DEFAULT_INSTRUCTIONS_PER_SECOND})",
    )
    parser.add_argument(
        "--foreground",
        default="#{:02x}{:02x}{:02x}".format(*CHARCOAL[1]),
        help="Colour of lit pixels, #rrggbb or r,g,b",
    )
    parser.add_argument(
        "--background",
        default="#{:02x}{:02x}{:02x}".format(*CHARCOAL[0]),
        help="Colour of unlit pixels, #rrggbb or r,g,b",
    )
    parser.add_argument(
        "--key-map",
        help="Host keys for logical keys 0-F, as 16 characters or 16 comma-separated names",
    )
    parser.add_argument(
        "--quirks",
        choices=sorted(PRESETS),
        default="default",
        help="Compatibility preset (default: default)",
    )
    for name in Quirks.names():
        parser.add_argument(
            "--" + name.replace("_", "-"),
            dest=name,
            action=argparse.BooleanOptionalAction,
            default=None,
            help=f"Override quirk: {_QUIRK_HELP[name]}",
        )
    parser.add_argument(
        "--tone",
        type=float,
        default=440.0,
        help="Beeper frequency in Hz (default: 440)",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable audio output",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the CXNN random number generator",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every executed instruction",
    )
    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    """Turn parsed arguments into an :class:`AppConfig` (raises ``ValueError``)."""

    if args.ips <= 0:
        raise ValueError("--ips must be positive")
    if args.scale <= 0:
        raise ValueError("--scale must be positive")
    if args.tone <= 0:
        raise ValueError("--tone must be positive")

    quirks = PRESETS[args.quirks]()
    overrides = {name: getattr(args, name) for name in Quirks.names() if getattr(args, name) is not None}
    if overrides:
        quirks = dataclasses.replace(quirks, **overrides)

    key_map = KeyMap.parse(args.key_map) if args.key_map else KeyMap.from_layout()

    return AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        fullscreen=args.fullscreen,
        instructions_per_second=args.ips,
        foreground_color=parse_color(args.foreground),
        background_color=parse_color(args.background),
        key_map=key_map,
        quirks=quirks,
        tone_frequency=args.tone,
        enable_audio=not args.mute,
        seed=args.seed,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")

    try:
        config = build_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    if args.verbose:
        enable_debug("cpu")

    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
