"""
CHIP-8 VM Disassembler Module
=============================

Turns CHIP-8 program bytes into assembly text. Disassembly is pure: it
reads bytes and never touches machine state, so it is safe to call on a
running emulator's memory.

Usage:
    from chip8_vm.disassembler import Chip8Disassembler, disassemble_memory

    # Disassemble a program image
    disasm = Chip8Disassembler()
    instructions = disasm.disassemble(rom_bytes, start_address=0x200)

    # Address -> mnemonic map over live memory
    listing = disassemble_memory(emulator.memory, 0x200, 0x220)

Copyright (c) 2026 chip8-vm Contributors
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction, disassemble_memory

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
    "disassemble_memory",
]
