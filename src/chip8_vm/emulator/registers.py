"""
CHIP-8 Register File
====================

Registers:
- V0-VF: 8-bit general purpose (VF doubles as carry/borrow/collision flag)
- I: 16-bit index register (holds a 12-bit address in practice)
- PC: 16-bit program counter, starts at $200
- Call stack: up to 16 return addresses
- DT, ST: 8-bit delay and sound timers

All setters mask values to their register width, so arithmetic in the CPU
can be written without explicit wraparound.

Copyright (c) 2026 chip8-vm Contributors
"""

from typing import List

from chip8_vm.errors import StackOverflowError, StackUnderflowError


class CallStack:
    """
    Bounded stack of 16-bit return addresses.

    Push and pop never mutate the stack when they raise.
    """

    DEPTH = 16

    def __init__(self):
        self._entries: List[int] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def push(self, address: int) -> None:
        """
        Push a return address.

        Raises:
            StackOverflowError: If all DEPTH entries are in use
        """
        if len(self._entries) >= self.DEPTH:
            raise StackOverflowError(f"call stack overflow (depth {self.DEPTH})")
        self._entries.append(address & 0xFFFF)

    def pop(self) -> int:
        """
        Pop the most recent return address.

        Raises:
            StackUnderflowError: If the stack is empty
        """
        if not self._entries:
            raise StackUnderflowError("return with empty call stack")
        return self._entries.pop()

    def peek(self) -> int:
        """Return the top entry without removing it."""
        if not self._entries:
            raise StackUnderflowError("peek at empty call stack")
        return self._entries[-1]

    def clear(self) -> None:
        self._entries.clear()

    def to_list(self) -> List[int]:
        """Entries from bottom to top."""
        return list(self._entries)


class Registers:
    """
    CHIP-8 register file.

    Only the CPU mutates registers during execution; `reset()` is the one
    other mutation path.

    Example:
        >>> regs = Registers()
        >>> regs.vf = 0x1FF
        >>> regs.vf
        255
    """

    NUM_V = 16
    PC_START = 0x200

    def __init__(self):
        self.v = bytearray(self.NUM_V)
        self.stack = CallStack()
        self._i = 0
        self._pc = self.PC_START
        self._delay_timer = 0
        self._sound_timer = 0

    def reset(self) -> None:
        """Zero all registers, set PC to $200 and empty the stack."""
        self.v = bytearray(self.NUM_V)
        self.stack.clear()
        self._i = 0
        self._pc = self.PC_START
        self._delay_timer = 0
        self._sound_timer = 0

    # ========================================
    # Register Properties
    # ========================================

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self._i

    @i.setter
    def i(self, value: int) -> None:
        self._i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self._pc

    @pc.setter
    def pc(self, value: int) -> None:
        self._pc = value & 0xFFFF

    @property
    def delay_timer(self) -> int:
        """Delay timer (8-bit)."""
        return self._delay_timer

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self._delay_timer = value & 0xFF

    @property
    def sound_timer(self) -> int:
        """Sound timer (8-bit)."""
        return self._sound_timer

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self._sound_timer = value & 0xFF

    @property
    def vf(self) -> int:
        """Flag register VF."""
        return self.v[0xF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[0xF] = value & 0xFF

    # ========================================
    # Debug Formatting
    # ========================================

    def format_stack(self) -> str:
        """Stack entries from top to bottom, or NONE when empty."""
        if not len(self.stack):
            return "NONE"
        return " ".join(f"{addr:04X}" for addr in reversed(self.stack.to_list()))

    def format_state(self) -> str:
        """PC, stack, I and timers, one per line."""
        return (
            f"PC: {self.pc:03X}\n"
            f"Stack: {self.format_stack()}\n"
            f"I: {self.i:03X}\n"
            f"DT: {self.delay_timer}\n"
            f"ST: {self.sound_timer}"
        )

    def format_v(self) -> str:
        """V registers, one per line."""
        return "\n".join(f"V[{n:X}]: {value:02X}" for n, value in enumerate(self.v))

    def to_dict(self) -> dict:
        """Register values as a plain dictionary."""
        return {
            'v': list(self.v),
            'i': self.i,
            'pc': self.pc,
            'stack': self.stack.to_list(),
            'dt': self.delay_timer,
            'st': self.sound_timer,
        }
