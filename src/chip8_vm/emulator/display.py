"""
Framebuffer for CHIP-8 VM
=========================

The CHIP-8 display is a 64x32 monochrome grid. Each cell is a boolean
(pixel on/off), stored row-major with index = x + y * 64.

Sprites are drawn by XOR: a set sprite bit flips the target pixel, and a
collision is reported when a set sprite bit lands on a pixel that was
already on.

Edge policy
-----------
By default pixels whose linear index falls past the end of the buffer are
dropped. Note that this is an index check, not a column check: a sprite
running off the right edge continues on the next row, and only pixels past
the last row are clipped. With ``wrap=True`` both coordinates wrap around
the opposite edges instead.

Rendering (colours, scaling, windows) is left to the host.

Copyright (c) 2026 chip8-vm Contributors
"""

from typing import List, Tuple


class Display:
    """
    64x32 monochrome framebuffer.

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0xF0]))
        False
        >>> display.get_pixel(0, 0), display.get_pixel(4, 0)
        (True, False)
    """

    WIDTH = 64
    HEIGHT = 32
    SIZE = WIDTH * HEIGHT

    def __init__(self):
        self._pixels: List[bool] = [False] * self.SIZE
        self._needs_refresh = True

    @property
    def needs_refresh(self) -> bool:
        """True when the buffer changed since the last `snapshot()`."""
        return self._needs_refresh

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = [False] * self.SIZE
        self._needs_refresh = True

    def reset(self) -> None:
        self.clear()

    def get_pixel(self, x: int, y: int) -> bool:
        """Pixel state at (x, y); coordinates outside the grid read as off."""
        if not (0 <= x < self.WIDTH and 0 <= y < self.HEIGHT):
            return False
        return self._pixels[x + y * self.WIDTH]

    def draw_sprite(self, x: int, y: int, rows: bytes, wrap: bool = False) -> bool:
        """
        XOR an 8-pixel-wide sprite onto the framebuffer.

        Args:
            x: Left column of the sprite
            y: Top row of the sprite
            rows: One byte per sprite row, MSB is the leftmost pixel
            wrap: Wrap coordinates around the edges instead of clipping

        Returns:
            True if any set sprite bit hit a pixel that was already on
        """
        collision = False

        for row, bits in enumerate(rows):
            for bit in range(8):
                if not (bits >> (7 - bit)) & 0x01:
                    continue

                if wrap:
                    index = ((x + bit) % self.WIDTH) + ((y + row) % self.HEIGHT) * self.WIDTH
                else:
                    index = (x + bit) + (y + row) * self.WIDTH
                    if index >= self.SIZE:
                        continue

                if self._pixels[index]:
                    collision = True
                self._pixels[index] = not self._pixels[index]

        self._needs_refresh = True
        return collision

    def snapshot(self) -> Tuple[bool, ...]:
        """Immutable copy of all 2048 cells."""
        self._needs_refresh = False
        return tuple(self._pixels)

    def get_rows(self) -> List[str]:
        """
        Text rendering of the grid, one string per row.

        '#' is on, '.' is off. Intended for tests and debugging output.
        """
        return [
            "".join("#" if self._pixels[x + y * self.WIDTH] else "."
                    for x in range(self.WIDTH))
            for y in range(self.HEIGHT)
        ]

    def count_lit(self) -> int:
        """Number of pixels that are on."""
        return sum(self._pixels)
