"""
Memory Subsystem for CHIP-8 VM
==============================

Memory Map:
    $000-$1FF  Reserved for the interpreter (font table at $000-$04F)
    $200-$FFF  Program / data space

All accesses are bounds-checked: reads outside $000-$FFF return 0 and
writes outside that range are dropped with a warning.

Copyright (c) 2026 chip8-vm Contributors
"""

import logging

from chip8_vm.errors import RomTooLargeError

logger = logging.getLogger(__name__)


# =============================================================================
# FONT TABLE
# =============================================================================
# 5-byte glyphs for hex digits 0-F. Only the high nibble of each row is used.

FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5


class Memory:
    """
    Flat 4 KiB byte store.

    Example:
        >>> mem = Memory()
        >>> mem.load(bytes([0x60, 0x0A]), 0x200)
        >>> hex(mem.read_short(0x200))
        '0x600a'
    """

    SIZE = 0x1000
    PROGRAM_START = 0x200

    def __init__(self):
        self._data = bytearray(self.SIZE)
        self.reset()

    def __len__(self) -> int:
        return self.SIZE

    def reset(self) -> None:
        """Zero the store and reload the font table."""
        self._data = bytearray(self.SIZE)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_SET)] = FONT_SET

    def load(self, data: bytes, offset: int = 0) -> None:
        """
        Copy a byte sequence into memory, overwriting existing contents.

        Args:
            data: Bytes to copy
            offset: Address of the first byte

        Raises:
            ValueError: If offset is negative
            RomTooLargeError: If the data would run past the end of memory.
                Memory is left untouched in that case.
        """
        if offset < 0:
            raise ValueError(f"Load offset must not be negative: {offset}")
        if offset + len(data) > self.SIZE:
            raise RomTooLargeError(len(data), offset, self.SIZE)
        self._data[offset:offset + len(data)] = data

    def read_byte(self, address: int) -> int:
        """
        Read byte from memory.

        Returns:
            Byte value at address, or 0 if outside memory
        """
        if 0 <= address < self.SIZE:
            return self._data[address]
        logger.debug(f"Read outside memory at ${address:04X}")
        return 0

    def write_byte(self, address: int, value: int) -> None:
        """Write byte to memory. Out-of-range writes are dropped."""
        if 0 <= address < self.SIZE:
            self._data[address] = value & 0xFF
        else:
            logger.warning(f"Memory write outside $000-$FFF dropped: ${address:04X}")

    def read_short(self, address: int) -> int:
        """Read 16-bit word (big-endian: first byte is the high byte)."""
        hi = self.read_byte(address)
        lo = self.read_byte(address + 1)
        return (hi << 8) | lo

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read `count` consecutive bytes; bytes outside memory read as 0."""
        return bytes(self.read_byte(address + i) for i in range(count))

    def dump(self) -> bytes:
        """Return an immutable copy of the whole store."""
        return bytes(self._data)
