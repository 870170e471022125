"""
Emulator Integration Tests
==========================

End-to-end tests of the `Emulator` API: program loading, execution
control, breakpoints, keypad input, framebuffer reads and configuration.

Copyright (c) 2026 chip8-vm Contributors
"""

import pytest

from chip8_vm.emulator import BreakReason, Emulator, EmulatorConfig, TimerSubsystem
from chip8_vm.errors import (
    Chip8Error,
    RomInvalidFormatError,
    RomNotFoundError,
    RomTooLargeError,
    StackOverflowError,
    StackUnderflowError,
)


def words(*opcodes: int) -> bytes:
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


# Draws the "0" glyph at (0, 0), then spins on JP 20A.
GLYPH_PROGRAM = words(
    0x6000,  # 200: LD V0, 00
    0xF029,  # 202: LD F, V0
    0x6100,  # 204: LD V1, 00
    0x6200,  # 206: LD V2, 00
    0xD125,  # 208: DRW V1, V2, 5
    0x120A,  # 20A: JP 20A
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# =============================================================================
# Initialization
# =============================================================================

class TestEmulatorInit:
    """Test emulator construction and reset."""

    def test_default_state(self):
        emu = Emulator()
        regs = emu.registers
        assert regs["pc"] == 0x200
        assert regs["i"] == 0
        assert regs["v"] == [0] * 16
        assert regs["stack"] == []
        assert not emu.waiting_for_key

    def test_repr(self):
        assert repr(Emulator()) == "Emulator(pc=$200, steps=0, waiting=False)"

    def test_reset(self):
        emu = Emulator()
        emu.load(GLYPH_PROGRAM)
        emu.run(10)
        emu.key_down(3)
        emu.reset()
        assert emu.registers["pc"] == 0x200
        assert emu.registers["v"] == [0] * 16
        assert not any(emu.read_framebuffer())
        assert emu.memory.read_byte(0x200) == 0
        assert emu.memory.read_byte(0x000) == 0xF0
        assert emu.keypad.pressed_keys() == []
        assert emu.total_steps == 0


# =============================================================================
# Program Loading
# =============================================================================

class TestLoading:
    """Test load() and load_rom()."""

    def test_load_default_address(self):
        emu = Emulator()
        emu.load(GLYPH_PROGRAM)
        assert emu.memory.read_bytes(0x200, len(GLYPH_PROGRAM)) == GLYPH_PROGRAM

    def test_load_explicit_offset(self):
        emu = Emulator()
        emu.load(b"\x12\x34", 0x300)
        assert emu.memory.read_short(0x300) == 0x1234

    def test_load_address_from_config(self):
        emu = Emulator(EmulatorConfig(load_address=0x600))
        emu.load(b"\x00\xE0")
        assert emu.memory.read_short(0x600) == 0x00E0

    def test_load_rom(self, tmp_path):
        rom = tmp_path / "glyph.ch8"
        rom.write_bytes(GLYPH_PROGRAM)
        emu = Emulator()
        emu.load_rom(rom)
        assert emu.memory.read_bytes(0x200, len(GLYPH_PROGRAM)) == GLYPH_PROGRAM

    def test_load_rom_str_path_and_uppercase_suffix(self, tmp_path):
        rom = tmp_path / "GLYPH.CH8"
        rom.write_bytes(GLYPH_PROGRAM)
        emu = Emulator()
        emu.load_rom(str(rom))
        assert emu.memory.read_short(0x200) == 0x6000

    def test_load_rom_logs(self, tmp_path, caplog):
        rom = tmp_path / "glyph.ch8"
        rom.write_bytes(GLYPH_PROGRAM)
        with caplog.at_level("INFO", logger="chip8_vm.emulator.emulator"):
            Emulator().load_rom(rom)
        assert "Loaded 12 bytes at $200" in caplog.text

    def test_wrong_extension(self, tmp_path):
        rom = tmp_path / "game.bin"
        rom.write_bytes(GLYPH_PROGRAM)
        emu = Emulator()
        with pytest.raises(RomInvalidFormatError):
            emu.load_rom(rom)
        assert emu.memory.read_byte(0x200) == 0

    def test_extension_checked_before_existence(self, tmp_path):
        with pytest.raises(RomInvalidFormatError):
            Emulator().load_rom(tmp_path / "missing.txt")

    def test_missing_file(self, tmp_path):
        with pytest.raises(RomNotFoundError) as exc_info:
            Emulator().load_rom(tmp_path / "missing.ch8")
        assert isinstance(exc_info.value, FileNotFoundError)
        assert isinstance(exc_info.value, Chip8Error)
        assert "missing.ch8" in str(exc_info.value)

    def test_directory_is_not_a_rom(self, tmp_path):
        folder = tmp_path / "folder.ch8"
        folder.mkdir()
        with pytest.raises(RomNotFoundError):
            Emulator().load_rom(folder)

    def test_too_large(self, tmp_path):
        rom = tmp_path / "huge.ch8"
        rom.write_bytes(bytes([0xAA]) * (0x1000 - 0x200 + 1))
        emu = Emulator()
        with pytest.raises(RomTooLargeError) as exc_info:
            emu.load_rom(rom)
        assert "huge.ch8" in str(exc_info.value)
        assert emu.memory.read_byte(0x200) == 0

    def test_largest_rom_fits(self, tmp_path):
        rom = tmp_path / "full.ch8"
        rom.write_bytes(bytes([0xAA]) * (0x1000 - 0x200))
        emu = Emulator()
        emu.load_rom(rom)
        assert emu.memory.read_byte(0xFFF) == 0xAA


# =============================================================================
# Execution Control
# =============================================================================

class TestExecution:
    """Test step() and run()."""

    @pytest.fixture
    def emu(self):
        emu = Emulator()
        emu.load(GLYPH_PROGRAM)
        return emu

    def test_step_event(self, emu):
        event = emu.step()
        assert event.reason == BreakReason.STEP
        assert event.address == 0x202
        assert event.steps == 1
        assert emu.total_steps == 1

    def test_run_max_steps(self, emu):
        event = emu.run(100)
        assert event.reason == BreakReason.MAX_STEPS
        assert event.steps == 100
        assert emu.registers["pc"] == 0x20A

    def test_program_draws_glyph(self, emu):
        emu.run(10)
        rows = emu.display.get_rows()
        assert rows[0][:5] == "####."
        assert rows[1][:5] == "#..#."
        assert rows[4][:5] == "####."
        assert sum(emu.read_framebuffer()) == 14

    def test_framebuffer_snapshot(self, emu):
        frame = emu.read_framebuffer()
        assert isinstance(frame, tuple)
        assert len(frame) == 2048
        emu.run(10)
        assert not any(frame)
        assert emu.read_framebuffer()[0] is True

    def test_breakpoint(self, emu):
        emu.add_breakpoint(0x208)
        event = emu.run(100)
        assert event.reason == BreakReason.PC_BREAKPOINT
        assert event.address == 0x208
        assert event.steps == 4
        assert emu.display.count_lit() == 0

    def test_run_resumes_past_breakpoint(self, emu):
        emu.add_breakpoint(0x208)
        emu.run(100)
        event = emu.run(5)
        assert event.reason == BreakReason.MAX_STEPS
        assert emu.display.count_lit() == 14

    def test_remove_and_clear_breakpoints(self, emu):
        emu.add_breakpoint(0x204)
        emu.add_breakpoint(0x206)
        emu.remove_breakpoint(0x204)
        assert emu.run(100).address == 0x206
        emu.clear_breakpoints()
        assert emu.run(100).reason == BreakReason.MAX_STEPS

    def test_run_until_pc(self, emu):
        assert emu.run_until_pc(0x20A) is True
        assert emu.registers["pc"] == 0x20A
        assert not emu.breakpoints.has_breakpoint(0x20A)

    def test_run_until_pc_not_reached(self, emu):
        assert emu.run_until_pc(0x400, max_steps=20) is False

    def test_stack_underflow_propagates_from_step(self):
        emu = Emulator()
        emu.load(words(0x00EE))
        with pytest.raises(StackUnderflowError):
            emu.step()
        assert emu.registers["pc"] == 0x200

    def test_stack_fault_reported_by_run(self):
        emu = Emulator()
        emu.load(words(0x6001, 0x00EE))
        event = emu.run(10)
        assert event.reason == BreakReason.ERROR
        assert isinstance(event.error, StackUnderflowError)
        assert event.address == 0x202
        assert event.steps == 1
        assert emu.registers["pc"] == 0x202

    def test_stack_overflow_reported_by_run(self):
        emu = Emulator()
        emu.load(words(0x2200))
        event = emu.run(100)
        assert event.reason == BreakReason.ERROR
        assert isinstance(event.error, StackOverflowError)
        assert event.steps == 16
        assert len(emu.registers["stack"]) == 16


# =============================================================================
# Keypad Input
# =============================================================================

class TestKeypadIntegration:
    """Test key_down/key_up and LD Vx, K completion."""

    @pytest.fixture
    def emu(self):
        emu = Emulator()
        emu.load(words(
            0xF70A,  # 200: LD V7, K
            0x6101,  # 202: LD V1, 01
            0x1204,  # 204: JP 204
        ))
        return emu

    def test_run_stops_waiting(self, emu):
        event = emu.run(100)
        assert event.reason == BreakReason.WAITING_FOR_KEY
        assert event.steps == 1
        assert emu.waiting_for_key
        assert emu.registers["pc"] == 0x200

    def test_step_reports_waiting(self, emu):
        assert emu.step().reason == BreakReason.WAITING_FOR_KEY
        assert emu.step().reason == BreakReason.WAITING_FOR_KEY
        assert emu.registers["pc"] == 0x200

    def test_key_down_resolves_wait(self, emu):
        emu.run(100)
        emu.key_down(0xE)
        assert not emu.waiting_for_key
        assert emu.registers["v"][7] == 0xE
        assert emu.registers["pc"] == 0x202
        emu.run(5)
        assert emu.registers["v"][1] == 1

    def test_key_down_without_wait(self, emu):
        emu.key_down(0x2)
        assert emu.keypad.is_pressed(0x2)
        assert emu.registers["pc"] == 0x200
        emu.key_up(0x2)
        assert not emu.keypad.is_pressed(0x2)

    @pytest.mark.parametrize("key", [-1, 16])
    def test_invalid_key(self, emu, key):
        emu.run(100)
        with pytest.raises(ValueError):
            emu.key_down(key)
        with pytest.raises(ValueError):
            emu.key_up(key)
        assert emu.waiting_for_key

    def test_skp_sees_held_key(self):
        emu = Emulator()
        emu.load(words(
            0x6005,  # LD V0, 05
            0xE09E,  # SKP V0
            0x6101,  # LD V1, 01 (skipped)
            0x1206,  # JP 206
        ))
        emu.key_down(5)
        emu.run(10)
        assert emu.registers["v"][1] == 0


# =============================================================================
# Timers
# =============================================================================

class TestTimerIntegration:
    """Test wall-clock timers through the emulator."""

    def test_delay_timer_counts_down(self):
        clock = FakeClock()
        emu = Emulator(clock=clock)
        emu.load(words(0x603C, 0xF015, 0x1204))  # DT = 60
        emu.run(3)
        for _ in range(10):
            clock.now += 0.02
            emu.step()
        assert emu.registers["dt"] == 50

    def test_exact_periods_through_step(self):
        clock = FakeClock()
        emu = Emulator(clock=clock)
        emu.load(words(0x600A, 0xF015, 0x1204))  # DT = 10
        emu.run(3)
        assert emu.registers["dt"] == 10

        for n in range(1, 11):
            clock.now = n * TimerSubsystem.PERIOD
            emu.step()
        assert emu.registers["dt"] == 0

        for n in range(11, 15):
            clock.now = n * TimerSubsystem.PERIOD
            emu.step()
        assert emu.registers["dt"] == 0

    def test_beep_callback(self):
        clock = FakeClock()
        beeps = []
        emu = Emulator(clock=clock, on_beep=lambda: beeps.append(clock.now))
        emu.load(words(0x6002, 0xF018, 0x1204))  # ST = 2
        emu.run(3)
        for _ in range(5):
            clock.now += 0.02
            emu.step()
        assert len(beeps) == 1
        assert emu.registers["st"] == 0

    def test_timers_run_while_waiting(self):
        clock = FakeClock()
        emu = Emulator(clock=clock)
        emu.load(words(0x6005, 0xF015, 0xF00A))
        emu.run(10)
        assert emu.waiting_for_key
        clock.now += 0.02
        emu.step()
        assert emu.registers["dt"] == 4


# =============================================================================
# Configuration
# =============================================================================

class TestConfiguration:
    """Test EmulatorConfig and environment overrides."""

    def test_defaults(self):
        config = EmulatorConfig()
        assert config.load_address == 0x200
        assert config.sprite_wrap is False
        assert config.seed is None

    def test_frozen(self):
        with pytest.raises(AttributeError):
            EmulatorConfig().seed = 3

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHIP8_LOAD_ADDRESS", "0x600")
        monkeypatch.setenv("CHIP8_SPRITE_WRAP", "yes")
        monkeypatch.setenv("CHIP8_SEED", "42")
        config = EmulatorConfig.from_env()
        assert config == EmulatorConfig(load_address=0x600, sprite_wrap=True, seed=42)

    def test_from_env_empty(self, monkeypatch):
        for name in ("CHIP8_LOAD_ADDRESS", "CHIP8_SPRITE_WRAP", "CHIP8_SEED"):
            monkeypatch.delenv(name, raising=False)
        assert EmulatorConfig.from_env() == EmulatorConfig()

    def test_from_env_false_flag(self, monkeypatch):
        monkeypatch.setenv("CHIP8_SPRITE_WRAP", "0")
        assert EmulatorConfig.from_env().sprite_wrap is False

    def test_seed_is_deterministic(self):
        program = words(*([0xC0FF, 0x8104] * 8))  # RND V0, FF; ADD V1, V0
        results = []
        for _ in range(2):
            emu = Emulator(EmulatorConfig(seed=7))
            emu.load(program)
            emu.run(16)
            results.append(emu.registers["v"])
        assert results[0] == results[1]

    def test_sprite_wrap_config(self):
        emu = Emulator(EmulatorConfig(sprite_wrap=True))
        emu.load(words(
            0x603E,  # LD V0, 3E (x = 62)
            0x6100,  # LD V1, 00
            0xA000,  # LD I, 000 (glyph 0, top row F0)
            0xD011,  # DRW V0, V1, 1
        ))
        emu.run(4)
        assert emu.display.get_pixel(0, 0)
        assert emu.display.get_pixel(1, 0)
        assert not emu.display.get_pixel(0, 1)


# =============================================================================
# Debugging Output
# =============================================================================

class TestDebugOutput:
    """Test disassembly and state dumps through the emulator."""

    def test_disassemble(self):
        emu = Emulator()
        emu.load(GLYPH_PROGRAM)
        assert emu.disassemble(0x200, 0x20A) == [
            (0x200, "LD V0, 00"),
            (0x202, "LD F, V0"),
            (0x204, "LD V1, 00"),
            (0x206, "LD V2, 00"),
            (0x208, "DRW V1, V2, 5"),
            (0x20A, "JP 20A"),
        ]

    def test_dump_state(self):
        emu = Emulator()
        emu.load(words(0x2300))
        emu.load(words(0x6A3C), 0x300)
        emu.step()
        dump = emu.dump_state()
        assert "Opcode: 6A3C" in dump
        assert "LD VA, 3C" in dump
        assert "PC: 300" in dump
        assert "Stack: 0202" in dump
        assert "V[A]: 00" in dump
        assert "V[F]: 00" in dump
