"""
CHIP-8 Virtual Machine
======================

An interpreter for the CHIP-8 virtual machine, independent of any
renderer, audio or input backend:

- **CPU**: All 35 classic instructions, fetch-decode-execute per step
- **Memory**: 4 KiB with the hex font table at $000
- **Display**: 64x32 monochrome framebuffer with XOR sprite drawing
- **Keypad**: 16-key input latch with LD Vx, K suspension
- **Timers**: Delay and sound timers at 60 Hz of wall-clock time
- **Debugging**: PC breakpoints, register dumps, disassembly

Quick Start
-----------

Basic usage::

    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("maze.ch8")
    >>> event = emu.run(max_steps=5_000)
    >>> frame = emu.read_framebuffer()

With debugging::

    >>> emu.add_breakpoint(0x220)
    >>> event = emu.run()
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(emu.dump_state())

The host drives the machine: it calls `step()` or `run()` at whatever
rate it likes, pushes key transitions with `key_down()` / `key_up()`, and
polls `read_framebuffer()` when `display.needs_refresh` is set.

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Instruction execution
- `memory.py`: 4 KiB store and font table
- `registers.py`: V0-VF, I, PC, timers and call stack
- `display.py`: Framebuffer
- `keyboard.py`: Keypad latch
- `timers.py`: 60 Hz timer subsystem
- `breakpoints.py`: Debugging support

Copyright (c) 2026 chip8-vm Contributors
"""

# Main emulator class
from .emulator import Emulator, EmulatorConfig

# CPU
from .cpu import Chip8CPU

# Machine state
from .memory import Memory, FONT_SET, FONT_ADDRESS
from .registers import Registers, CallStack

# I/O
from .display import Display
from .keyboard import Keypad
from .timers import TimerSubsystem

# Debugging support
from .breakpoints import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
)

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "Chip8CPU",

    # Machine state
    "Memory",
    "FONT_SET",
    "FONT_ADDRESS",
    "Registers",
    "CallStack",

    # I/O
    "Display",
    "Keypad",
    "TimerSubsystem",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
]
