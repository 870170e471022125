"""
CHIP-8 VM - Main Orchestrator
=============================

This module provides the `Emulator` class that wires memory, registers,
framebuffer, keypad, timers and CPU together behind a small API:

- Program loading from a .ch8 file or raw bytes
- Execution control (step, run with PC breakpoints)
- Keypad input, including completion of a pending LD Vx, K
- Framebuffer snapshots for an external renderer
- Disassembly and register dumps for debugging

Example usage:
    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("pong.ch8")
    >>> event = emu.run(10_000)
    >>> pixels = emu.read_framebuffer()

Copyright (c) 2026 chip8-vm Contributors
"""

import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from chip8_vm.disassembler import disassemble_memory
from chip8_vm.errors import (
    RomInvalidFormatError,
    RomNotFoundError,
    RomTooLargeError,
    StackOverflowError,
    StackUnderflowError,
)

from .breakpoints import BreakEvent, BreakpointManager, BreakReason
from .cpu import Chip8CPU
from .display import Display
from .keyboard import Keypad
from .memory import Memory
from .registers import Registers
from .timers import TimerSubsystem

logger = logging.getLogger(__name__)

ROM_EXTENSION = ".ch8"


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        load_address: Where program images are loaded (default $200)
        sprite_wrap: Wrap sprites around screen edges instead of clipping
        seed: Seed for the RND instruction's random source (None = unseeded)

    Example:
        >>> config = EmulatorConfig(sprite_wrap=True, seed=42)
    """
    load_address: int = Memory.PROGRAM_START
    sprite_wrap: bool = False
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables:
            CHIP8_LOAD_ADDRESS: Load address (decimal or 0x-prefixed hex)
            CHIP8_SPRITE_WRAP: 1/true/yes/on to wrap sprites
            CHIP8_SEED: Integer seed for RND

        Returns:
            EmulatorConfig with values from environment variables
        """
        kwargs = {}

        if load_address := os.environ.get("CHIP8_LOAD_ADDRESS"):
            kwargs["load_address"] = int(load_address, 0)

        if sprite_wrap := os.environ.get("CHIP8_SPRITE_WRAP"):
            kwargs["sprite_wrap"] = _env_flag(sprite_wrap)

        if seed := os.environ.get("CHIP8_SEED"):
            kwargs["seed"] = int(seed)

        return cls(**kwargs)


class Emulator:
    """
    CHIP-8 virtual machine.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        memory: 4 KiB memory
        register_file: Register file
        display: Framebuffer
        keypad: Input latch
        timers: 60 Hz timer subsystem
        cpu: The interpreter core
        breakpoints: PC breakpoint manager

    Args:
        config: EmulatorConfig (defaults apply when None)
        clock: Time source for the timers (default: time.perf_counter)
        on_beep: Called when the sound timer expires
        logger: Logger handed to the CPU
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        on_beep: Optional[Callable[[], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config or EmulatorConfig()

        self.memory = Memory()
        self.register_file = Registers()
        self.display = Display()
        self.keypad = Keypad()
        self.timers = TimerSubsystem(self.register_file, clock=clock, on_beep=on_beep)
        self.cpu = Chip8CPU(
            self.memory,
            self.register_file,
            self.display,
            self.keypad,
            self.timers,
            rng=random.Random(self.config.seed),
            logger=logger,
            sprite_wrap=self.config.sprite_wrap,
        )
        self.breakpoints = BreakpointManager()

        self._total_steps = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load(self, data: bytes, offset: Optional[int] = None) -> None:
        """
        Install a program image.

        Args:
            data: Raw program bytes
            offset: Load address (default: config.load_address)

        Raises:
            ValueError: If the load address is negative
            RomTooLargeError: If the image does not fit in memory
        """
        if offset is None:
            offset = self.config.load_address
        self.memory.load(data, offset)
        logger.info(f"Loaded {len(data)} bytes at ${offset:03X}")

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Load a .ch8 program file.

        All checks happen before memory is touched.

        Args:
            path: Path to the .ch8 file

        Raises:
            RomInvalidFormatError: If the file does not have a .ch8 extension
            RomNotFoundError: If the file doesn't exist
            RomTooLargeError: If the image does not fit in memory
        """
        path = Path(path)

        if path.suffix.lower() != ROM_EXTENSION:
            raise RomInvalidFormatError(f"ROM file must end with {ROM_EXTENSION}", path=str(path))

        if not path.is_file():
            raise RomNotFoundError(str(path))

        data = path.read_bytes()
        try:
            self.load(data)
        except RomTooLargeError as e:
            raise RomTooLargeError(e.size, e.offset, e.capacity, path=str(path)) from e

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset to power-on state.

        Registers, memory (with the font table reloaded), framebuffer,
        keypad and timers are reinitialized. A loaded program is erased.
        """
        self.register_file.reset()
        self.memory.reset()
        self.display.reset()
        self.keypad.reset()
        self.timers.reset()
        self.breakpoints.clear_last_event()
        self._total_steps = 0

    def step(self) -> BreakEvent:
        """
        Execute a single instruction (or a timer-only tick while waiting).

        Returns:
            BreakEvent with reason STEP, or WAITING_FOR_KEY when the CPU is
            blocked on LD Vx, K

        Raises:
            StackOverflowError: CALL with a full call stack
            StackUnderflowError: RET with an empty call stack
        """
        self.cpu.step()
        self._total_steps += 1

        if self.keypad.waiting_for_key:
            return BreakEvent(BreakReason.WAITING_FOR_KEY, address=self.register_file.pc, steps=1)
        return BreakEvent(
            BreakReason.STEP,
            address=self.register_file.pc,
            steps=1,
            message=f"Step to ${self.register_file.pc:03X}",
        )

    def run(self, max_steps: int = 100_000) -> BreakEvent:
        """
        Run until a breakpoint, a key wait, a stack fault or max_steps.

        A breakpoint at the current PC is skipped for the first step, so
        calling run() again after a breakpoint hit makes progress.

        Args:
            max_steps: Maximum number of steps to execute

        Returns:
            BreakEvent describing why execution stopped. Stack faults are
            reported with reason ERROR and the exception in `error`.
        """
        self.breakpoints.clear_last_event()
        steps = 0

        while steps < max_steps:
            pc = self.register_file.pc
            if steps > 0 and not self.breakpoints.check_instruction(pc):
                event = self.breakpoints.last_event
                event.steps = steps
                return event

            try:
                self.cpu.step()
            except (StackOverflowError, StackUnderflowError) as e:
                logger.error(f"Execution stopped: {e}")
                return BreakEvent(BreakReason.ERROR, address=pc, steps=steps, error=e)

            steps += 1
            self._total_steps += 1

            if self.keypad.waiting_for_key:
                return BreakEvent(BreakReason.WAITING_FOR_KEY, address=self.register_file.pc, steps=steps)

        return BreakEvent(
            BreakReason.MAX_STEPS,
            address=self.register_file.pc,
            steps=steps,
            message=f"Reached max steps ({max_steps})",
        )

    def run_until_pc(self, address: int, max_steps: int = 100_000) -> bool:
        """
        Run until PC reaches a specific address.

        Returns:
            True if address was reached, False otherwise
        """
        was_set = self.breakpoints.has_breakpoint(address)
        if not was_set:
            self.breakpoints.add_breakpoint(address)

        try:
            event = self.run(max_steps)
            return event.reason == BreakReason.PC_BREAKPOINT and event.address == address
        finally:
            if not was_set:
                self.breakpoints.remove_breakpoint(address)

    def add_breakpoint(self, address: int) -> None:
        self.breakpoints.add_breakpoint(address)

    def remove_breakpoint(self, address: int) -> None:
        self.breakpoints.remove_breakpoint(address)

    def clear_breakpoints(self) -> None:
        self.breakpoints.clear_breakpoints()

    # =========================================================================
    # Keypad Input
    # =========================================================================

    def key_down(self, key: int) -> None:
        """
        Press a key (0-15).

        If the CPU is waiting on LD Vx, K, the key completes it.

        Raises:
            ValueError: If key is not 0-15
        """
        self.keypad.key_down(key)
        if self.keypad.waiting_for_key:
            self.cpu.resolve_key_press(key)

    def key_up(self, key: int) -> None:
        """Release a key (0-15)."""
        self.keypad.key_up(key)

    # =========================================================================
    # State Inspection
    # =========================================================================

    def read_framebuffer(self) -> Tuple[bool, ...]:
        """Immutable snapshot of the 64x32 framebuffer, row-major."""
        return self.display.snapshot()

    def disassemble(self, start: int, end: int) -> List[Tuple[int, str]]:
        """
        Disassemble memory from `start` to `end` inclusive.

        Returns:
            (address, mnemonic) pairs in address order
        """
        return list(disassemble_memory(self.memory, start, end).items())

    @property
    def registers(self) -> dict:
        """Register values as a dictionary (v, i, pc, stack, dt, st)."""
        return self.register_file.to_dict()

    @property
    def waiting_for_key(self) -> bool:
        return self.keypad.waiting_for_key

    @property
    def total_steps(self) -> int:
        """Steps executed since the last reset."""
        return self._total_steps

    def dump_state(self) -> str:
        """
        Text dump of the machine state for debugging.

        Shows the pending opcode and its disassembly, then PC, stack, I,
        timers and the V registers.
        """
        pc = self.register_file.pc
        opcode = self.memory.read_short(pc)
        listing = disassemble_memory(self.memory, pc, pc)
        return (
            f"Opcode: {opcode:04X}\n"
            f"{listing.get(pc, '')}\n"
            f"CPU Info:\n"
            f"{self.register_file.format_state()}\n"
            f"{self.register_file.format_v()}"
        )

    def __repr__(self) -> str:
        return (
            f"Emulator(pc=${self.register_file.pc:03X}, "
            f"steps={self._total_steps}, "
            f"waiting={self.keypad.waiting_for_key})"
        )
