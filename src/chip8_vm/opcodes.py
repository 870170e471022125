"""
CHIP-8 Instruction Set Definitions
==================================

This module contains the instruction set shared by the CPU and the
disassembler. Decoding is kept separate from execution: `decode()` turns a
16-bit opcode word into an `Instruction` value tagged with an `Op`, and the
CPU and disassembler each switch on that tag.

Opcode Layout
-------------
Every instruction is one big-endian 16-bit word::

    15   12 11    8 7     4 3     0
    +------+-------+-------+-------+
    | group|   X   |   Y   |   N   |
    +------+-------+-------+-------+
            \\_________ NNN ________/
                    \\____ NN _____/

The top nibble selects the instruction group. Groups 0, 8, E and F are
further selected by the low byte or low nibble.

Copyright (c) 2026 chip8-vm Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict

from chip8_vm.errors import UnknownOpcodeError


class Op(Enum):
    """
    Instruction tags, one per opcode pattern.

    Mnemonic text lives in `format_instruction`.
    """
    SYS = auto()  # 0NNN
    CLS = auto()  # 00E0
    RET = auto()  # 00EE
    JP = auto()  # 1NNN
    CALL = auto()  # 2NNN
    SE_BYTE = auto()  # 3XNN
    SNE_BYTE = auto()  # 4XNN
    SE_REG = auto()  # 5XY0
    LD_BYTE = auto()  # 6XNN
    ADD_BYTE = auto()  # 7XNN
    LD_REG = auto()  # 8XY0
    OR = auto()  # 8XY1
    AND = auto()  # 8XY2
    XOR = auto()  # 8XY3
    ADD_REG = auto()  # 8XY4
    SUB = auto()  # 8XY5
    SHR = auto()  # 8XY6
    SUBN = auto()  # 8XY7
    SHL = auto()  # 8XYE
    SNE_REG = auto()  # 9XY0
    LD_I = auto()  # ANNN
    JP_V0 = auto()  # BNNN
    RND = auto()  # CXNN
    DRW = auto()  # DXYN
    SKP = auto()  # EX9E
    SKNP = auto()  # EXA1
    LD_VX_DT = auto()  # FX07
    LD_VX_K = auto()  # FX0A
    LD_DT_VX = auto()  # FX15
    LD_ST_VX = auto()  # FX18
    ADD_I = auto()  # FX1E
    LD_F = auto()  # FX29
    LD_B = auto()  # FX33
    LD_MEM_VX = auto()  # FX55
    LD_VX_MEM = auto()  # FX65


# Sub-tables for the groups selected by more than the top nibble.
GROUP_8: Dict[int, Op] = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

GROUP_E: Dict[int, Op] = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

GROUP_F: Dict[int, Op] = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}

# Groups fully determined by the top nibble.
SIMPLE_GROUPS: Dict[int, Op] = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x5: Op.SE_REG,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}


@dataclass(frozen=True)
class Instruction:
    """
    A decoded CHIP-8 instruction.

    All operand fields are extracted for every instruction; each `Op` only
    uses the ones it needs.

    Attributes:
        op: Instruction tag
        opcode: The raw 16-bit word
        nnn: Low 12 bits (address)
        nn: Low 8 bits (byte constant)
        n: Low nibble
        x: Bits 8-11 (register index)
        y: Bits 4-7 (register index)
    """
    op: Op
    opcode: int
    nnn: int
    nn: int
    n: int
    x: int
    y: int

    @property
    def mnemonic(self) -> str:
        """Assembly text for this instruction (e.g. ``LD V1, 0A``)."""
        return format_instruction(self)


def decode(opcode: int) -> Instruction:
    """
    Decode a 16-bit opcode word.

    Args:
        opcode: Big-endian instruction word (0x0000-0xFFFF)

    Returns:
        The decoded Instruction

    Raises:
        UnknownOpcodeError: If the word matches no instruction. This can only
            happen in groups 8, E and F.

    Every group-0 word other than 00E0 and 00EE decodes as SYS, which the
    CPU ignores with a warning.
    """
    opcode &= 0xFFFF
    group = opcode >> 12

    if group == 0x0:
        if opcode == 0x00E0:
            op = Op.CLS
        elif opcode == 0x00EE:
            op = Op.RET
        else:
            op = Op.SYS
    elif group == 0x8:
        op = GROUP_8.get(opcode & 0x000F)
    elif group == 0xE:
        op = GROUP_E.get(opcode & 0x00FF)
    elif group == 0xF:
        op = GROUP_F.get(opcode & 0x00FF)
    else:
        op = SIMPLE_GROUPS[group]

    if op is None:
        raise UnknownOpcodeError(opcode)

    return Instruction(
        op=op,
        opcode=opcode,
        nnn=opcode & 0x0FFF,
        nn=opcode & 0x00FF,
        n=opcode & 0x000F,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
    )


def format_instruction(instr: Instruction) -> str:
    """
    Render an instruction in conventional CHIP-8 assembly syntax.

    Addresses are three hex digits, byte constants two, nibbles one.
    """
    x, y = instr.x, instr.y
    match instr.op:
        case Op.SYS:
            return f"SYS {instr.nnn:03X}"
        case Op.CLS:
            return "CLS"
        case Op.RET:
            return "RET"
        case Op.JP:
            return f"JP {instr.nnn:03X}"
        case Op.CALL:
            return f"CALL {instr.nnn:03X}"
        case Op.SE_BYTE:
            return f"SE V{x:X}, {instr.nn:02X}"
        case Op.SNE_BYTE:
            return f"SNE V{x:X}, {instr.nn:02X}"
        case Op.SE_REG:
            return f"SE V{x:X}, V{y:X}"
        case Op.LD_BYTE:
            return f"LD V{x:X}, {instr.nn:02X}"
        case Op.ADD_BYTE:
            return f"ADD V{x:X}, {instr.nn:02X}"
        case Op.LD_REG:
            return f"LD V{x:X}, V{y:X}"
        case Op.OR:
            return f"OR V{x:X}, V{y:X}"
        case Op.AND:
            return f"AND V{x:X}, V{y:X}"
        case Op.XOR:
            return f"XOR V{x:X}, V{y:X}"
        case Op.ADD_REG:
            return f"ADD V{x:X}, V{y:X}"
        case Op.SUB:
            return f"SUB V{x:X}, V{y:X}"
        case Op.SHR:
            return f"SHR V{x:X}"
        case Op.SUBN:
            return f"SUBN V{x:X}, V{y:X}"
        case Op.SHL:
            return f"SHL V{x:X}"
        case Op.SNE_REG:
            return f"SNE V{x:X}, V{y:X}"
        case Op.LD_I:
            return f"LD I, {instr.nnn:03X}"
        case Op.JP_V0:
            return f"JP V0, {instr.nnn:03X}"
        case Op.RND:
            return f"RND V{x:X}, {instr.nn:02X}"
        case Op.DRW:
            return f"DRW V{x:X}, V{y:X}, {instr.n:X}"
        case Op.SKP:
            return f"SKP V{x:X}"
        case Op.SKNP:
            return f"SKNP V{x:X}"
        case Op.LD_VX_DT:
            return f"LD V{x:X}, DT"
        case Op.LD_VX_K:
            return f"LD V{x:X}, K"
        case Op.LD_DT_VX:
            return f"LD DT, V{x:X}"
        case Op.LD_ST_VX:
            return f"LD ST, V{x:X}"
        case Op.ADD_I:
            return f"ADD I, V{x:X}"
        case Op.LD_F:
            return f"LD F, V{x:X}"
        case Op.LD_B:
            return f"LD B, V{x:X}"
        case Op.LD_MEM_VX:
            return f"LD [I], V{x:X}"
        case Op.LD_VX_MEM:
            return f"LD V{x:X}, [I]"
    raise AssertionError(f"unhandled op {instr.op!r}")
