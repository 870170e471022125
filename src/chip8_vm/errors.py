"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
VM-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── RomError (program loading)
│   ├── RomNotFoundError - ROM file does not exist
│   ├── RomInvalidFormatError - ROM file is not a .ch8 image
│   └── RomTooLargeError - image does not fit in memory
└── ExecutionError (raised while executing an instruction)
    ├── UnknownOpcodeError - opcode not in the instruction table
    ├── StackOverflowError - CALL with a full call stack
    └── StackUnderflowError - RET with an empty call stack

Propagation
-----------
Loading errors abort startup before any instruction runs. UnknownOpcodeError
is recovered inside the CPU (logged, treated as a no-op). Stack errors
propagate to the caller with the machine left in its pre-instruction state.

Copyright (c) 2026 chip8-vm Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

        try:
            emu.load_rom("pong.ch8")
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Loading Exceptions
# =============================================================================

class RomError(Chip8Error):
    """
    Base exception for program loading errors.

    Attributes:
        message: The error description
        path: The ROM path involved (optional)
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class RomNotFoundError(RomError, FileNotFoundError):
    """ROM file does not exist."""

    def __init__(self, path: str):
        super().__init__("ROM file not found", path=path)


class RomInvalidFormatError(RomError):
    """
    ROM file is not a CHIP-8 program image.

    Program images carry no header, so the only check available is the
    conventional .ch8 extension.
    """
    pass


class RomTooLargeError(RomError):
    """
    Program image does not fit in memory at the requested offset.

    Attributes:
        size: Image size in bytes
        offset: Requested load address
        capacity: Total memory size
    """

    def __init__(self, size: int, offset: int, capacity: int, path: Optional[str] = None):
        self.size = size
        self.offset = offset
        self.capacity = capacity
        super().__init__(
            f"image of {size} bytes at ${offset:03X} exceeds memory "
            f"({capacity - offset} bytes available)",
            path=path,
        )


# =============================================================================
# Execution Exceptions
# =============================================================================

class ExecutionError(Chip8Error):
    """
    Base exception for errors raised while executing an instruction.

    Attributes:
        address: Address of the faulting instruction
        opcode: The 16-bit opcode being executed
    """

    def __init__(self, message: str, address: Optional[int] = None, opcode: Optional[int] = None):
        self.message = message
        self.address = address
        self.opcode = opcode
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.address is not None:
            parts.append(f"${self.address:04X}")
        if self.opcode is not None:
            parts.append(f"[{self.opcode:04X}]")
        if parts:
            return f"{' '.join(parts)}: {self.message}"
        return self.message


class UnknownOpcodeError(ExecutionError):
    """
    Opcode not present in the instruction table.

    The CPU recovers from this locally: the word is skipped and a warning
    is logged.
    """

    def __init__(self, opcode: int, address: Optional[int] = None):
        super().__init__(f"unknown opcode ${opcode:04X}", address=address, opcode=opcode)


class StackOverflowError(ExecutionError):
    """CALL attempted with all call stack entries in use."""
    pass


class StackUnderflowError(ExecutionError):
    """RET attempted with an empty call stack."""
    pass
