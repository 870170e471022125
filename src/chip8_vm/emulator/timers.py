"""
Delay and Sound Timers
======================

Both timers count down at 60 Hz of wall-clock time, independent of how
many instructions the CPU executes. The CPU calls `tick()` on every
step; a tick decrements once when the time accumulated since the last
decrement passes the 16 ms threshold. The accumulator keeps the remainder
of each period, so a clock advancing exactly one period per step
decrements on every step, and backlog is capped at one period. While both timers are
zero the accumulator stays empty, so a freshly loaded timer waits a full
period before its first decrement.

The clock is injectable so tests can drive time explicitly.

Copyright (c) 2026 chip8-vm Contributors
"""

import time
from typing import Callable, Optional

from .registers import Registers


class TimerSubsystem:
    """
    60 Hz countdown for DT and ST.

    Args:
        registers: Register file holding the timer values
        clock: Monotonic time source in seconds (default: time.perf_counter)
        on_beep: Called once when ST is decremented from 1 to 0

    Example:
        >>> now = [0.0]
        >>> timers = TimerSubsystem(regs, clock=lambda: now[0])
        >>> regs.delay_timer = 2
        >>> timers.tick()           # starts the clock
        >>> now[0] += 0.02; timers.tick()
        >>> regs.delay_timer
        1
    """

    FREQUENCY = 60
    PERIOD = 1.0 / FREQUENCY
    THRESHOLD = 0.016

    def __init__(
        self,
        registers: Registers,
        clock: Optional[Callable[[], float]] = None,
        on_beep: Optional[Callable[[], None]] = None,
    ):
        self.registers = registers
        self.clock = clock or time.perf_counter
        self.on_beep = on_beep
        self._last_tick: Optional[float] = None

    def reset(self) -> None:
        """Restart the period measurement on the next tick."""
        self._last_tick = None

    @property
    def active(self) -> bool:
        """True while either timer is non-zero."""
        return self.registers.delay_timer > 0 or self.registers.sound_timer > 0

    def tick(self) -> bool:
        """
        Decrement the timers if a 60 Hz period has elapsed.

        Returns:
            True if the timers were decremented
        """
        now = self.clock()
        if self._last_tick is None or not self.active:
            self._last_tick = now
            return False

        if now - self._last_tick <= self.THRESHOLD:
            return False

        regs = self.registers
        if regs.sound_timer == 1 and self.on_beep:
            self.on_beep()
        if regs.delay_timer > 0:
            regs.delay_timer -= 1
        if regs.sound_timer > 0:
            regs.sound_timer -= 1

        self._last_tick += self.PERIOD
        if now - self._last_tick > self.PERIOD:
            self._last_tick = now
        return True
