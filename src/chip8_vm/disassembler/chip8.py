"""
CHIP-8 Disassembler
===================

Disassembles CHIP-8 program bytes into conventional assembly syntax.

Every CHIP-8 instruction is exactly two bytes, stored big-endian. Words
that match no instruction are shown as ``.WORD $XXXX`` data, and a single
trailing byte at the end of an odd-length buffer as ``.BYTE $XX``.

Usage:
    disasm = Chip8Disassembler()

    # Disassemble a program image loaded at $200
    for instr in disasm.disassemble(rom_bytes, start_address=0x200):
        print(instr)

    # Single instruction
    instr = disasm.disassemble_one(rom_bytes, address=0x200)
    print(f"{instr.address:03X}: {instr.mnemonic} {instr.operand_str}")

Copyright (c) 2026 chip8-vm Contributors
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from chip8_vm.errors import UnknownOpcodeError
from chip8_vm.opcodes import Instruction, Op, decode, format_instruction

INSTRUCTION_SIZE = 2


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled CHIP-8 instruction.

    Attributes:
        address: Memory address of the instruction
        opcode: The 16-bit instruction word (or the lone byte for .BYTE)
        mnemonic: The instruction mnemonic (e.g., "LD", "DRW", ".WORD")
        operand_str: Formatted operand string for display
        raw_bytes: All bytes comprising this instruction
        comment: Optional comment (e.g., symbol names, font glyphs)
    """
    address: int
    opcode: int
    mnemonic: str
    operand_str: str
    raw_bytes: bytes
    comment: str = ""

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    @property
    def text(self) -> str:
        """Mnemonic and operands, e.g. ``DRW V1, V2, 5``."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: BYTES  MNEMONIC OPERAND"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes).ljust(5)

        if self.comment:
            return f"${self.address:03X}: {hex_bytes}  {self.text:<16} ; {self.comment}"
        return f"${self.address:03X}: {hex_bytes}  {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "opcode": f"${self.opcode:04X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "text": self.text,
            "size": self.size,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "comment": self.comment,
        }


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Disassembler for CHIP-8 programs.

    Decoding is shared with the CPU through `chip8_vm.opcodes`, so the
    listing always agrees with what the interpreter executes.

    Attributes:
        _symbol_table: Optional address -> name map used to annotate
            jump, call and index targets
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        self._symbol_table = symbol_table or {}

    def disassemble_one(
        self,
        data: bytes,
        address: int = 0x200,
        offset: int = 0
    ) -> DisassembledInstruction:
        """
        Disassemble a single instruction.

        Args:
            data: Byte buffer containing the instruction
            address: Memory address of the instruction (for display)
            offset: Offset into data buffer where instruction starts

        Returns:
            DisassembledInstruction with decoded information

        Raises:
            ValueError: If offset is beyond the end of data
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        if offset + INSTRUCTION_SIZE > len(data):
            value = data[offset]
            return DisassembledInstruction(
                address=address,
                opcode=value,
                mnemonic=".BYTE",
                operand_str=f"${value:02X}",
                raw_bytes=bytes([value]),
                comment="incomplete instruction",
            )

        raw_bytes = bytes(data[offset:offset + INSTRUCTION_SIZE])
        opcode = (raw_bytes[0] << 8) | raw_bytes[1]

        try:
            instr = decode(opcode)
        except UnknownOpcodeError:
            return DisassembledInstruction(
                address=address,
                opcode=opcode,
                mnemonic=".WORD",
                operand_str=f"${opcode:04X}",
                raw_bytes=raw_bytes,
                comment="unknown opcode",
            )

        mnemonic, _, operand_str = format_instruction(instr).partition(" ")
        return DisassembledInstruction(
            address=address,
            opcode=opcode,
            mnemonic=mnemonic,
            operand_str=operand_str,
            raw_bytes=raw_bytes,
            comment=self._comment_for(instr),
        )

    def _comment_for(self, instr: Instruction) -> str:
        if instr.op in (Op.JP, Op.CALL, Op.LD_I, Op.SYS):
            return self._symbol_table.get(instr.nnn, "")
        if instr.op == Op.LD_F:
            return f"I = glyph for V{instr.x:X}"
        if instr.op == Op.LD_VX_K:
            return "wait for key"
        return ""

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None
    ) -> List[DisassembledInstruction]:
        """
        Disassemble multiple instructions.

        Args:
            data: Byte buffer containing the program
            start_address: Memory address of first byte
            count: Maximum number of instructions to disassemble (None = all)

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        offset = 0
        address = start_address

        while offset < len(data):
            if count is not None and len(result) >= count:
                break

            instr = self.disassemble_one(data, address, offset)
            result.append(instr)

            offset += instr.size
            address += instr.size

        return result

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None,
        show_bytes: bool = True
    ) -> str:
        """
        Disassemble and return a formatted listing.

        Args:
            data: Byte buffer containing the program
            start_address: Memory address of first byte
            count: Maximum number of instructions
            show_bytes: Include the address and raw bytes columns

        Returns:
            Multi-line string with disassembly listing
        """
        instructions = self.disassemble(data, start_address, count)
        if show_bytes:
            return "\n".join(str(instr) for instr in instructions)
        return "\n".join(instr.text for instr in instructions)

    def add_symbol(self, address: int, name: str) -> None:
        """Name an address for annotation of JP/CALL/LD I targets."""
        self._symbol_table[address] = name

    def add_symbols(self, symbols: Dict[int, str]) -> None:
        self._symbol_table.update(symbols)


def disassemble_memory(memory, start: int, end: int) -> Dict[int, str]:
    """
    Map addresses to mnemonics over a range of emulator memory.

    Walks two bytes at a time from `start`, including the word at `end`.
    A word that would extend past the end of memory is not read. Memory is
    only read, never written.

    Args:
        memory: Object with `read_short(addr)` and `len()` (e.g. `Memory`)
        start: First address
        end: Last address to include

    Returns:
        Ordered dict of address -> assembly text
    """
    listing: Dict[int, str] = {}
    size = len(memory)
    address = start

    while address <= end and address + 1 < size:
        opcode = memory.read_short(address)
        try:
            listing[address] = format_instruction(decode(opcode))
        except UnknownOpcodeError:
            listing[address] = f".WORD ${opcode:04X}"
        address += INSTRUCTION_SIZE

    return listing
