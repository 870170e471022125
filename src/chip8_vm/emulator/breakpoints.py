"""
Breakpoints for CHIP-8 VM
=========================

PC breakpoints and the `BreakEvent` record returned by the emulator's
execution methods.

Example usage:

    >>> emu = Emulator()
    >>> emu.load_rom("game.ch8")
    >>> emu.breakpoints.add_breakpoint(0x2A0)
    >>> event = emu.run(100_000)
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Hit breakpoint at ${event.address:03X}")

Copyright (c) 2026 chip8-vm Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set


class BreakReason(Enum):
    """Why execution stopped."""
    NONE = auto()             # No specific reason
    PC_BREAKPOINT = auto()    # PC reached a breakpoint address
    STEP = auto()             # Single step completed
    WAITING_FOR_KEY = auto()  # LD Vx, K is waiting for input
    MAX_STEPS = auto()        # Step budget exhausted
    ERROR = auto()            # Stack fault during execution


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC at the time of the stop
        steps: Number of steps executed by the call that produced the event
        error: The exception for ERROR events
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    steps: int = 0
    error: Optional[Exception] = None
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at ${self.address:03X}"
            case BreakReason.STEP:
                return "Single step"
            case BreakReason.WAITING_FOR_KEY:
                return "Waiting for key press"
            case BreakReason.MAX_STEPS:
                return "Maximum steps reached"
            case BreakReason.ERROR:
                return f"Runtime error: {self.error}"
            case _:
                return "Unknown"


class BreakpointManager:
    """
    Set of PC breakpoint addresses.

    The emulator checks `check_instruction()` before each step; a hit is
    recorded in `last_event`.
    """

    def __init__(self):
        self._breakpoints: Set[int] = set()
        self._last_event: Optional[BreakEvent] = None

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """The most recent breakpoint hit, if any."""
        return self._last_event

    @property
    def breakpoint_count(self) -> int:
        return len(self._breakpoints)

    def add_breakpoint(self, address: int) -> None:
        """Break when PC reaches `address`."""
        self._breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        self._breakpoints.discard(address & 0xFFFF)

    def has_breakpoint(self, address: int) -> bool:
        return (address & 0xFFFF) in self._breakpoints

    def clear_breakpoints(self) -> None:
        self._breakpoints.clear()

    def list_breakpoints(self) -> List[int]:
        """Breakpoint addresses in ascending order."""
        return sorted(self._breakpoints)

    def clear_last_event(self) -> None:
        self._last_event = None

    def check_instruction(self, pc: int) -> bool:
        """
        Check the instruction about to execute.

        Returns:
            True to continue, False if a breakpoint was hit
        """
        if pc in self._breakpoints:
            self._last_event = BreakEvent(BreakReason.PC_BREAKPOINT, address=pc)
            return False
        return True
