"""
CHIP-8 CPU
==========

Fetch-decode-execute engine for the 35-instruction CHIP-8 set.

Each `step()`:
1. ticks the 60 Hz timers (also while waiting for a key)
2. returns immediately if LD Vx, K is waiting for input
3. fetches the big-endian word at PC and decodes it
4. advances PC by 2 *before* executing, so jump and call targets are
   absolute and CALL pushes the address of the following instruction
5. executes the instruction

Quirks
------
- SHR/SHL shift VX in place and ignore VY (legacy CHIP-8 behaviour).
- VF is written after the result, so with X == F the flag wins.
- DRW clips pixels past the end of the framebuffer unless `sprite_wrap`
  is enabled.
- LD [I], Vx / LD Vx, [I] leave I unchanged.

Copyright (c) 2026 chip8-vm Contributors
"""

import logging
import random
from typing import Optional

from chip8_vm.errors import StackOverflowError, StackUnderflowError, UnknownOpcodeError
from chip8_vm.opcodes import Instruction, Op, decode

from .display import Display
from .keyboard import Keypad
from .memory import FONT_ADDRESS, FONT_GLYPH_SIZE, Memory
from .registers import Registers
from .timers import TimerSubsystem


class Chip8CPU:
    """
    CHIP-8 interpreter core.

    The CPU owns no state of its own beyond its collaborators: memory,
    registers, framebuffer, keypad and timers are passed in and mutated
    exclusively through `step()` and `resolve_key_press()`.

    Args:
        memory: 4 KiB memory
        registers: Register file
        display: Framebuffer
        keypad: Input latch
        timers: Timer subsystem (ticked on every step)
        rng: Random source for RND (default: unseeded random.Random)
        logger: Logger for opcode tracing and warnings (default: module logger)
        sprite_wrap: Wrap sprites around the screen edges instead of clipping

    Example:
        >>> cpu = Chip8CPU(memory, registers, display, keypad, timers,
        ...                rng=random.Random(1))
        >>> memory.load(bytes([0x60, 0x2A]), 0x200)   # LD V0, 2A
        >>> cpu.step().mnemonic
        'LD V0, 2A'
        >>> registers.v[0]
        42
    """

    def __init__(
        self,
        memory: Memory,
        registers: Registers,
        display: Display,
        keypad: Keypad,
        timers: TimerSubsystem,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
        sprite_wrap: bool = False,
    ):
        self.memory = memory
        self.registers = registers
        self.display = display
        self.keypad = keypad
        self.timers = timers
        self.rng = rng or random.Random()
        self.log = logger or logging.getLogger(__name__)
        self.sprite_wrap = sprite_wrap

    # ========================================
    # Convenience Accessors
    # ========================================

    @property
    def pc(self) -> int:
        return self.registers.pc

    @property
    def waiting_for_key(self) -> bool:
        return self.keypad.waiting_for_key

    # ========================================
    # Main Execution
    # ========================================

    def step(self) -> Optional[Instruction]:
        """
        Execute exactly one instruction.

        Returns:
            The executed Instruction, or None if the CPU is waiting for a
            key press or the opcode was unknown

        Raises:
            StackOverflowError: CALL with a full call stack
            StackUnderflowError: RET with an empty call stack
        """
        self.timers.tick()

        if self.keypad.waiting_for_key:
            return None

        regs = self.registers
        address = regs.pc
        opcode = self.memory.read_short(address)
        regs.pc += 2

        try:
            instr = decode(opcode)
        except UnknownOpcodeError:
            self.log.warning(f"Unknown opcode ${opcode:04X} at ${address:04X}, skipped")
            return None

        self.log.debug(f"${address:04X}: {opcode:04X}  {instr.mnemonic}")

        try:
            self._execute_instruction(instr)
        except (StackOverflowError, StackUnderflowError) as e:
            # Leave the machine exactly as it was before this instruction
            regs.pc = address
            raise type(e)(e.message, address=address, opcode=opcode) from e

        return instr

    def execute(self, max_steps: int) -> int:
        """
        Execute up to `max_steps` steps.

        Stops early when the CPU starts waiting for a key.

        Returns:
            Number of steps taken
        """
        steps = 0
        while steps < max_steps:
            self.step()
            steps += 1
            if self.keypad.waiting_for_key:
                break
        return steps

    def resolve_key_press(self, key: int) -> None:
        """
        Complete a pending LD Vx, K with the given key.

        The pending instruction is still at PC, so X is recovered from it.
        Does nothing if the CPU is not waiting.
        """
        if not self.keypad.waiting_for_key:
            return
        key = Keypad.validate_key(key)
        opcode = self.memory.read_short(self.registers.pc)
        self.registers.v[(opcode & 0x0F00) >> 8] = key
        self.keypad.waiting_for_key = False
        self.registers.pc += 2

    # ========================================
    # Instruction Execution
    # ========================================

    def _execute_instruction(self, instr: Instruction) -> None:
        """
        Execute a decoded instruction.

        PC already points at the following instruction, so skips add 2 and
        CALL pushes the current PC.
        """
        regs = self.registers
        v = regs.v
        x, y = instr.x, instr.y

        match instr.op:
            # ============================================
            # Flow Control
            # ============================================
            case Op.SYS:
                # Machine code routines are not supported
                self.log.warning(f"SYS {instr.nnn:03X} at ${regs.pc - 2:04X} ignored")
            case Op.CLS:
                self.display.clear()
            case Op.RET:
                regs.pc = regs.stack.pop()
            case Op.JP:
                regs.pc = instr.nnn
            case Op.CALL:
                regs.stack.push(regs.pc)
                regs.pc = instr.nnn
            case Op.JP_V0:
                regs.pc = v[0] + instr.nnn

            # ============================================
            # Conditional Skips
            # ============================================
            case Op.SE_BYTE:
                self._skip_if(v[x] == instr.nn)
            case Op.SNE_BYTE:
                self._skip_if(v[x] != instr.nn)
            case Op.SE_REG:
                self._skip_if(v[x] == v[y])
            case Op.SNE_REG:
                self._skip_if(v[x] != v[y])
            case Op.SKP:
                self._skip_if(self.keypad.is_pressed(v[x] & 0x0F))
            case Op.SKNP:
                self._skip_if(not self.keypad.is_pressed(v[x] & 0x0F))

            # ============================================
            # Register Loads and ALU
            # ============================================
            case Op.LD_BYTE:
                v[x] = instr.nn
            case Op.ADD_BYTE:
                v[x] = (v[x] + instr.nn) & 0xFF
            case Op.LD_REG:
                v[x] = v[y]
            case Op.OR:
                v[x] |= v[y]
            case Op.AND:
                v[x] &= v[y]
            case Op.XOR:
                v[x] ^= v[y]
            case Op.ADD_REG:
                result = v[x] + v[y]
                v[x] = result & 0xFF
                v[0xF] = 1 if result > 0xFF else 0
            case Op.SUB:
                a, b = v[x], v[y]
                v[x] = (a - b) & 0xFF
                v[0xF] = 1 if a > b else 0
            case Op.SUBN:
                a, b = v[x], v[y]
                v[x] = (b - a) & 0xFF
                v[0xF] = 1 if b > a else 0
            case Op.SHR:
                value = v[x]
                v[x] = value >> 1
                v[0xF] = value & 0x01
            case Op.SHL:
                value = v[x]
                v[x] = (value << 1) & 0xFF
                v[0xF] = value >> 7
            case Op.RND:
                v[x] = self.rng.randint(0, 0xFF) & instr.nn

            # ============================================
            # Index Register and Memory
            # ============================================
            case Op.LD_I:
                regs.i = instr.nnn
            case Op.ADD_I:
                regs.i += v[x]
            case Op.LD_F:
                regs.i = FONT_ADDRESS + v[x] * FONT_GLYPH_SIZE
            case Op.LD_B:
                self._store_bcd(v[x])
            case Op.LD_MEM_VX:
                for n in range(x + 1):
                    self.memory.write_byte(regs.i + n, v[n])
            case Op.LD_VX_MEM:
                for n in range(x + 1):
                    v[n] = self.memory.read_byte(regs.i + n)

            # ============================================
            # Display
            # ============================================
            case Op.DRW:
                sprite = self.memory.read_bytes(regs.i, instr.n)
                collision = self.display.draw_sprite(v[x], v[y], sprite, wrap=self.sprite_wrap)
                v[0xF] = 1 if collision else 0

            # ============================================
            # Timers and Input
            # ============================================
            case Op.LD_VX_DT:
                v[x] = regs.delay_timer
            case Op.LD_DT_VX:
                regs.delay_timer = v[x]
            case Op.LD_ST_VX:
                regs.sound_timer = v[x]
            case Op.LD_VX_K:
                # Rewind so the instruction stays pending until resolve_key_press()
                self.keypad.waiting_for_key = True
                regs.pc -= 2

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.registers.pc += 2

    def _store_bcd(self, value: int) -> None:
        """Hundreds, tens and ones digits of value at I, I+1, I+2."""
        i = self.registers.i
        self.memory.write_byte(i, value // 100)
        self.memory.write_byte(i + 1, (value // 10) % 10)
        self.memory.write_byte(i + 2, value % 10)
