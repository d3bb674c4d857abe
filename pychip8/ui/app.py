"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pychip8.audio import DEFAULT_TONE_HZ, SquareWaveBeeper
from pychip8.bus import CapacityError, MemoryAccessError
from pychip8.cpu import CPUError, Quirks
from pychip8.io import KeyMap
from pychip8.loader import read_rom_from_path
from pychip8.system import (
    DEFAULT_INSTRUCTIONS_PER_SECOND,
    CycleDriver,
    Machine,
    MachineConfig,
    create_machine,
)
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import CHARCOAL, RGBColor, Renderer, validate_palette


@dataclass
class AppConfig:
    """Configuration surface for the pygame frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    background_color: RGBColor = CHARCOAL[0]
    foreground_color: RGBColor = CHARCOAL[1]
    key_map: KeyMap = field(default_factory=KeyMap.from_layout)
    quirks: Quirks = field(default_factory=Quirks)
    tone_frequency: float = DEFAULT_TONE_HZ
    enable_audio: bool = True
    seed: Optional[int] = None


class Chip8App:
    """Window, input, audio and frame pacing around a :class:`Machine`."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        self._config = config
        self._palette = validate_palette((config.background_color, config.foreground_color))
        self._running = False
        self._machine: Machine | None = None
        self._driver: CycleDriver | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._fault: Exception | None = None
        self._pygame = None
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass a ROM path")
        machine = self.load_rom(self._config.rom_path)
        driver = CycleDriver(
            machine,
            self._config.instructions_per_second,
            trace=self._trace_recorder,
        )
        self._driver = driver

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        self._pygame = pygame
        self._set_caption()
        if self._config.enable_audio:
            self._initialise_audio(pygame)

        renderer = Renderer(self._palette)
        scale = self._config.scale
        size = (machine.display.width * scale, machine.display.height * scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(size, flags)

        clock = pygame.time.Clock()
        self._running = True
        last_revision = -1

        while self._running:
            for event in pygame.event.get():
                self._handle_event(pygame, event)

            if self._fault is None:
                frame_start = time.perf_counter()
                try:
                    result = driver.run_frame()
                except (CPUError, MemoryAccessError) as exc:
                    self._handle_fault(exc)
                else:
                    if self._perf_enabled:
                        self._report_perf(result.executed, time.perf_counter() - frame_start)

            if self._beeper is not None:
                self._beeper.set_active(self._fault is None and machine.is_sound_active())

            if machine.display.revision != last_revision:
                last_revision = machine.display.revision
                frame = renderer.render(machine.display, scale=scale)
                screen.blit(frame.to_surface(), (0, 0))
                pygame.display.flip()

            clock.tick(_FRAME_RATE)

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

        if self._fault is not None:
            raise RuntimeError(f"CHIP-8 halted: {self._fault}") from self._fault

    def load_rom(self, rom_path: Path) -> Machine:
        """Read ``rom_path`` and build a freshly reset machine around it."""

        try:
            image = read_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except CapacityError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

        machine = create_machine(
            MachineConfig(
                quirks=self._config.quirks,
                program=image.data,
                seed=self._config.seed,
            )
        )
        self._machine = machine
        self._fault = None
        if debug_enabled("loader"):
            debug_log("loader", "rom=%s bytes=%d end=%03x", image.name, len(image), image.end)
        return machine

    # ------------------------------------------------------------------
    # Input

    def _handle_event(self, pygame, event) -> None:
        if event.type == pygame.QUIT:
            self._running = False
        elif event.type == pygame.KEYUP:
            self._handle_key_event(pygame, event.key, pressed=False)
        elif event.type != pygame.KEYDOWN:
            return
        elif event.key == pygame.K_ESCAPE:
            self._running = False
        elif event.key == pygame.K_p and self._driver is not None:
            paused = self._driver.toggle_pause()
            self._set_caption()
            if debug_enabled("input"):
                debug_log("input", "paused=%s", paused)
        elif event.key == pygame.K_F12 and self._machine is not None:
            self._enter_debug_shell(self._machine)
            if self._driver is not None and not self._driver.paused:
                # Time spent in the console is not replayed.
                self._driver.resume()
        else:
            self._handle_key_event(pygame, event.key, pressed=True)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        logical = self._config.key_map.translate(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s logical=%s pressed=%s", name, logical, pressed)
        if logical is None:
            return
        if pressed:
            machine.keypad.press(logical)
        else:
            machine.keypad.release(logical)

    # ------------------------------------------------------------------
    # Audio

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - hardware dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return
        try:
            self._beeper = SquareWaveBeeper(frequency=self._config.tone_frequency)
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    # ------------------------------------------------------------------
    # Faults and diagnostics

    def _handle_fault(self, exc: Exception) -> None:
        # The last frame stays on screen until the window is closed.
        self._fault = exc
        self._set_caption()
        debug_log("cpu", "fault=%s", exc)
        if self._trace_recorder is not None:
            self._trace_recorder.dump("trace", limit=32)
        print(f"chip8 runtime exception: {exc}")

    def _set_caption(self) -> None:
        pygame = self._pygame
        if pygame is None:
            return
        title = "CHIP-8"
        if self._config.rom_path is not None:
            title = f"CHIP-8 - {self._config.rom_path.name}"
        if self._fault is not None:
            title += " [halted]"
        elif self._driver is not None and self._driver.paused:
            title += " [paused]"
        pygame.display.set_caption(title)

    def _report_perf(self, executed: int, duration: float) -> None:
        self._perf_frame += 1
        effective_ips = executed / duration if duration > 0 else 0.0
        debug_log(
            "perf",
            "frame=%d executed=%d frame_ms=%.3f effective_ips=%.1f",
            self._perf_frame,
            executed,
            duration * 1000.0,
            effective_ips,
        )

    def _enter_debug_shell(self, machine: Machine) -> None:
        """Blocking console menu; the emulator is frozen until it returns."""

        commands = {
            "c": lambda arg: self._dump_cpu(machine),
            "d": lambda arg: self._dump_display(machine),
            "t": lambda arg: self._dump_trace(),
            "m": lambda arg: self._dump_memory(machine, arg or None),
        }
        usage = "debug: [c]pu  [m]em [start [len]]  [d]isplay  [t]race  [q]uit  <Enter> resume"
        print(f"\n{usage}")

        while self._running:
            try:
                line = input("chip8> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                break
            if not line:
                break
            name, _, arg = line.partition(" ")
            if name in {"q", "quit"}:
                self._running = False
                break
            handler = commands.get(name[:1])
            if handler is None:
                print(usage)
            else:
                handler(arg.strip())

        print("Resuming." if self._running else "Exiting.")
        if self._pygame is not None:
            self._pygame.event.clear()

    def _dump_cpu(self, machine: Machine) -> None:
        state = machine.cpu.state
        registers = " ".join(f"V{index:X}={value:02X}" for index, value in enumerate(state.v))
        print(f"PC={state.pc:03X} I={state.i:03X} DT={machine.timers.delay:02X} ST={machine.timers.sound:02X}")
        print(registers)
        stack = " ".join(f"{address:03X}" for address in state.stack) or "-"
        print(f"Stack ({len(state.stack)}): {stack}")
        if state.waiting_register is not None:
            print(f"Waiting for key into V{state.waiting_register:X}")
        if machine.cpu.fault is not None:
            print(f"Fault: {machine.cpu.fault}")

    def _dump_display(self, machine: Machine) -> None:
        for row in machine.display.rows():
            print("".join("#" if cell else "." for cell in row))

    def _dump_trace(self, limit: int = 64) -> None:
        recorder = self._trace_recorder
        if recorder is None:
            print("Trace recorder is disabled. Set CHIP8_DEBUG=trace to enable it.")
            return
        for line in recorder.format_entries(limit) or ["(no entries)"]:
            print(f"  {line}")

    def _dump_memory(self, machine: Machine, where: str | None = None) -> None:
        """Hex dump ``where`` = ``"<start hex> [length]"``, default 0x200+0x80."""

        try:
            words = (where or "").split()
            start = int(words[0], 16) if words else 0x200
            length = int(words[1], 0) if len(words) > 1 else 0x80
        except ValueError:
            print("usage: m [start_hex] [length]")
            return
        end = min(start + length, machine.memory.length)
        if not 0 <= start < end:
            print(f"nothing to show at {start:#05x}+{length}")
            return
        data = machine.memory.read_block(start, end - start)
        for offset in range(0, len(data), 16):
            row = " ".join(f"{value:02X}" for value in data[offset : offset + 16])
            print(f"{start + offset:03X}: {row}")


_FRAME_RATE = 60
