"""
Framebuffer Unit Tests
======================

Tests for XOR sprite drawing, collision detection and edge handling.

Copyright (c) 2026 chip8-vm Contributors
"""

import pytest

from chip8_vm.emulator.display import Display


@pytest.fixture
def display():
    return Display()


class TestBasics:
    """Test framebuffer state and snapshots."""

    def test_dimensions(self):
        assert Display.WIDTH == 64
        assert Display.HEIGHT == 32
        assert Display.SIZE == 2048

    def test_initially_blank(self, display):
        assert display.count_lit() == 0
        assert not any(display.snapshot())

    def test_snapshot_is_immutable_tuple(self, display):
        snap = display.snapshot()
        assert isinstance(snap, tuple)
        assert len(snap) == 2048

    def test_snapshot_clears_refresh_flag(self, display):
        assert display.needs_refresh
        display.snapshot()
        assert not display.needs_refresh
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.needs_refresh

    def test_get_pixel_out_of_range(self, display):
        assert display.get_pixel(64, 0) is False
        assert display.get_pixel(0, 32) is False
        assert display.get_pixel(-1, 0) is False

    def test_row_major_layout(self, display):
        """Pixel (x, y) is at index x + y * 64."""
        display.draw_sprite(3, 2, bytes([0x80]))
        assert display.snapshot()[3 + 2 * 64] is True

    def test_clear(self, display):
        display.draw_sprite(0, 0, bytes([0xFF, 0xFF]))
        display.clear()
        assert display.count_lit() == 0

    def test_get_rows(self, display):
        display.draw_sprite(0, 0, bytes([0xA0]))
        rows = display.get_rows()
        assert len(rows) == 32
        assert rows[0].startswith("#.#.")
        assert rows[1] == "." * 64


class TestSpriteDrawing:
    """Test XOR drawing and the collision flag."""

    def test_draw_sets_pixels(self, display):
        assert display.draw_sprite(0, 0, bytes([0xF0])) is False
        assert [display.get_pixel(x, 0) for x in range(8)] == [True] * 4 + [False] * 4

    def test_draw_twice_erases_and_collides(self, display):
        display.draw_sprite(10, 5, bytes([0xF0]))
        assert display.draw_sprite(10, 5, bytes([0xF0])) is True
        assert display.count_lit() == 0

    def test_no_collision_without_overlap(self, display):
        display.draw_sprite(0, 0, bytes([0xF0]))
        assert display.draw_sprite(0, 0, bytes([0x0F])) is False
        assert display.count_lit() == 8

    def test_zero_bits_leave_pixels_alone(self, display):
        display.draw_sprite(0, 0, bytes([0xFF]))
        display.draw_sprite(0, 0, bytes([0x00]))
        assert display.count_lit() == 8

    def test_multi_row_sprite(self, display):
        display.draw_sprite(0, 0, bytes([0x80, 0x40, 0x20]))
        assert display.get_pixel(0, 0)
        assert display.get_pixel(1, 1)
        assert display.get_pixel(2, 2)
        assert display.count_lit() == 3

    def test_empty_sprite(self, display):
        assert display.draw_sprite(0, 0, b"") is False
        assert display.count_lit() == 0


class TestEdgeHandling:
    """Test clipping (default) and wrapping."""

    def test_clip_right_edge_bleeds_into_next_row(self, display):
        """Clipping is by linear index, so columns past 63 land on the next row."""
        display.draw_sprite(60, 0, bytes([0xFF]))
        assert [display.get_pixel(x, 0) for x in range(60, 64)] == [True] * 4
        assert [display.get_pixel(x, 1) for x in range(4)] == [True] * 4
        assert display.count_lit() == 8

    def test_clip_bottom_edge_drops_rows(self, display):
        display.draw_sprite(0, 31, bytes([0xFF, 0xFF]))
        assert display.count_lit() == 8
        assert all(display.get_pixel(x, 31) for x in range(8))

    def test_clip_last_pixel_bleed_dropped(self, display):
        """Bits past index 2047 are dropped."""
        display.draw_sprite(62, 31, bytes([0xFF]))
        assert display.get_pixel(62, 31)
        assert display.get_pixel(63, 31)
        assert display.count_lit() == 2

    def test_clip_far_coordinates_draw_nothing(self, display):
        assert display.draw_sprite(0, 40, bytes([0xFF])) is False
        assert display.count_lit() == 0

    def test_wrap_right_edge(self, display):
        display.draw_sprite(60, 0, bytes([0xFF]), wrap=True)
        assert [display.get_pixel(x, 0) for x in range(4)] == [True] * 4
        assert [display.get_pixel(x, 0) for x in range(60, 64)] == [True] * 4
        assert not any(display.get_pixel(x, 1) for x in range(64))

    def test_wrap_bottom_edge(self, display):
        display.draw_sprite(0, 31, bytes([0x80, 0x80]), wrap=True)
        assert display.get_pixel(0, 31)
        assert display.get_pixel(0, 0)

    def test_wrap_large_coordinates(self, display):
        display.draw_sprite(64 + 1, 32 + 2, bytes([0x80]), wrap=True)
        assert display.get_pixel(1, 2)

    def test_wrap_collision(self, display):
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.draw_sprite(64, 32, bytes([0x80]), wrap=True) is True
        assert display.count_lit() == 0
