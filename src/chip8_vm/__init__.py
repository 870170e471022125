"""
chip8-vm - A CHIP-8 Virtual Machine
===================================

This package implements the CHIP-8 virtual machine: a 4 KiB address
space, sixteen 8-bit registers, a 64x32 monochrome display, a 16-key
hexadecimal keypad and two 60 Hz timers, driven by a 35-instruction
interpreter.

Main Components
---------------
- **emulator**: The virtual machine (memory, registers, CPU, timers)
    Load a .ch8 program, step or run it, feed it key presses and read
    back the framebuffer

- **disassembler**: CHIP-8 disassembler (chip8-disasm)
    Converts program bytes to assembly listings

- **opcodes**: Instruction decoding shared by the CPU and disassembler

Quick Start
-----------
Run a program:
    >>> from chip8_vm import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("maze.ch8")
    >>> emu.run(max_steps=2_000)
    >>> print("\\n".join(emu.display.get_rows()))

Disassemble a program:
    >>> from chip8_vm import Chip8Disassembler
    >>> with open("maze.ch8", "rb") as f:
    ...     print(Chip8Disassembler().disassemble_to_text(f.read()))

Or use the command-line tools:
    $ chip8-disasm maze.ch8
    $ chip8-run maze.ch8 --steps 2000

Version History
---------------
1.0.0 - Initial release with interpreter, disassembler and CLI tools
"""

__version__ = "1.0.0"
__author__ = "chip8-vm Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_vm.errors import (
    Chip8Error,
    RomError,
    RomNotFoundError,
    RomInvalidFormatError,
    RomTooLargeError,
    ExecutionError,
    UnknownOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from chip8_vm.opcodes import Instruction, Op, decode, format_instruction
from chip8_vm.disassembler import Chip8Disassembler, DisassembledInstruction, disassemble_memory
from chip8_vm.emulator import Emulator, EmulatorConfig, BreakEvent, BreakReason

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Errors
    "Chip8Error",
    "RomError",
    "RomNotFoundError",
    "RomInvalidFormatError",
    "RomTooLargeError",
    "ExecutionError",
    "UnknownOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    # Instruction set
    "Instruction",
    "Op",
    "decode",
    "format_instruction",
    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
    "disassemble_memory",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "BreakEvent",
    "BreakReason",
]
