"""
Keypad for CHIP-8 VM
====================

The CHIP-8 has a 16-key hexadecimal keypad::

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

The keypad only latches key state. The host's input pump calls
`key_down()` / `key_up()`; the CPU reads the latch for SKP/SKNP and sets
`waiting_for_key` when it executes LD Vx, K.

Copyright (c) 2026 chip8-vm Contributors
"""

from typing import List


class Keypad:
    """
    16-key input latch plus the wait-for-key flag.

    Example:
        >>> pad = Keypad()
        >>> pad.key_down(0xA)
        >>> pad.is_pressed(0xA)
        True
    """

    NUM_KEYS = 16

    def __init__(self):
        self._keys: List[bool] = [False] * self.NUM_KEYS
        self.waiting_for_key = False

    def reset(self) -> None:
        """Release all keys and clear the wait flag."""
        self._keys = [False] * self.NUM_KEYS
        self.waiting_for_key = False

    @classmethod
    def validate_key(cls, key: int) -> int:
        """
        Check a key code.

        Raises:
            ValueError: If key is not 0-15
        """
        if not 0 <= key < cls.NUM_KEYS:
            raise ValueError(f"key must be 0-15, got {key}")
        return key

    def key_down(self, key: int) -> None:
        self._keys[self.validate_key(key)] = True

    def key_up(self, key: int) -> None:
        self._keys[self.validate_key(key)] = False

    def is_pressed(self, key: int) -> bool:
        """True if key (0-15) is held."""
        return self._keys[self.validate_key(key)]

    def pressed_keys(self) -> List[int]:
        """All keys currently held, ascending."""
        return [key for key, down in enumerate(self._keys) if down]
