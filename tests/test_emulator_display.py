"""
Display Unit Tests
==================

Tests for the 64x32 framebuffer: XOR drawing, collisions, edge handling,
the redraw flag and rendering.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import Display
from chip8_vm.emulator.display import HEIGHT, WIDTH


ZERO_GLYPH = bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])


@pytest.fixture
def display():
    """Blank display with the redraw flag acknowledged."""
    display = Display()
    display.acknowledge_redraw()
    return display


# =============================================================================
# Drawing Tests
# =============================================================================

class TestDrawSprite:
    """Test XOR sprite drawing."""

    def test_draw_sets_pixels(self, display):
        """Lit sprite bits switch pixels on."""
        assert display.draw_sprite(0, 0, ZERO_GLYPH) is False
        assert display.get_text_grid()[0][:8] == "####...."
        assert display.get_text_grid()[2][:8] == "#..#...."
        assert display.lit_count() == 14

    def test_draw_twice_collides_and_erases(self, display):
        """Second draw erases the sprite and reports a collision."""
        display.draw_sprite(10, 10, ZERO_GLYPH)
        assert display.draw_sprite(10, 10, ZERO_GLYPH) is True
        assert display.lit_count() == 0

    def test_partial_overlap(self, display):
        """Any pixel turned off is a collision."""
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.draw_sprite(0, 0, bytes([0xC0])) is True
        assert display.get_pixel(0, 0) == 0
        assert display.get_pixel(1, 0) == 1

    def test_zero_bits_do_not_collide(self, display):
        """Unset sprite bits leave the screen alone."""
        display.draw_sprite(0, 0, bytes([0xFF]))
        assert display.draw_sprite(0, 0, bytes([0x00])) is False
        assert display.lit_count() == 8

    def test_empty_sprite_marks_redraw(self, display):
        """A zero-row draw still requests a redraw."""
        assert display.draw_sprite(0, 0, b"") is False
        assert display.redraw_needed

    def test_origin_wraps(self, display):
        """Origin is taken mod 64 and mod 32."""
        display.draw_sprite(WIDTH + 3, HEIGHT + 4, bytes([0x80]))
        assert display.get_pixel(3, 4) == 1

    def test_clip_right(self, display):
        """Pixels past the right edge are dropped by default."""
        display.draw_sprite(62, 0, bytes([0xFF]))
        assert display.get_pixel(62, 0) == 1
        assert display.get_pixel(63, 0) == 1
        assert display.get_pixel(0, 0) == 0
        assert display.lit_count() == 2

    def test_clip_bottom(self, display):
        """Rows past the bottom edge are dropped by default."""
        display.draw_sprite(0, 30, bytes([0x80, 0x80, 0x80, 0x80]))
        assert display.get_pixel(0, 30) == 1
        assert display.get_pixel(0, 31) == 1
        assert display.get_pixel(0, 0) == 0
        assert display.lit_count() == 2

    def test_wrap_right(self, display):
        """With wrap, pixels past the right edge reappear on the left."""
        display.draw_sprite(62, 0, bytes([0xFF]), wrap=True)
        assert display.lit_count() == 8
        assert display.get_pixel(0, 0) == 1
        assert display.get_pixel(5, 0) == 1

    def test_wrap_bottom(self, display):
        """With wrap, rows past the bottom reappear at the top."""
        display.draw_sprite(0, 30, bytes([0x80, 0x80, 0x80, 0x80]), wrap=True)
        assert display.get_pixel(0, 0) == 1
        assert display.get_pixel(0, 1) == 1

    def test_wrap_collision(self, display):
        """Collisions are detected on wrapped pixels."""
        display.draw_sprite(0, 0, bytes([0x80]))
        assert display.draw_sprite(63, 0, bytes([0xC0]), wrap=True) is True


# =============================================================================
# Redraw Flag Tests
# =============================================================================

class TestRedrawFlag:
    """Test the redraw-needed flag."""

    def test_new_display_needs_redraw(self):
        """A fresh display requests a first frame."""
        assert Display().redraw_needed

    def test_acknowledge(self):
        """acknowledge_redraw() clears the flag."""
        display = Display()
        display.acknowledge_redraw()
        assert not display.redraw_needed

    def test_clear_sets_flag(self, display):
        """clear() requests a redraw."""
        display.clear()
        assert display.redraw_needed

    def test_draw_sets_flag(self, display):
        """Drawing requests a redraw."""
        display.draw_sprite(0, 0, ZERO_GLYPH)
        assert display.redraw_needed

    def test_mark_dirty(self, display):
        """mark_dirty() requests a redraw without changing pixels."""
        display.mark_dirty()
        assert display.redraw_needed
        assert display.lit_count() == 0


# =============================================================================
# Pixel Buffer Tests
# =============================================================================

class TestPixelBuffer:
    """Test framebuffer inspection."""

    def test_buffer_layout(self, display):
        """Row-major, one byte per pixel."""
        display.draw_sprite(5, 2, bytes([0x80]))
        buffer = display.get_pixel_buffer()
        assert len(buffer) == WIDTH * HEIGHT
        assert buffer[2 * WIDTH + 5] == 1
        assert sum(buffer) == 1

    def test_buffer_is_snapshot(self, display):
        """Later draws do not change an earlier snapshot."""
        before = display.get_pixel_buffer()
        display.draw_sprite(0, 0, ZERO_GLYPH)
        assert before == bytes(WIDTH * HEIGHT)

    def test_get_pixel_bounds(self, display):
        """Reading outside the screen raises IndexError."""
        with pytest.raises(IndexError):
            display.get_pixel(64, 0)
        with pytest.raises(IndexError):
            display.get_pixel(0, -1)

    def test_text_grid(self, display):
        """Text rendering uses the given characters."""
        display.draw_sprite(0, 0, bytes([0xC0]))
        grid = display.get_text_grid(on="X", off=" ")
        assert len(grid) == HEIGHT
        assert all(len(row) == WIDTH for row in grid)
        assert grid[0].startswith("XX ")

    def test_text(self, display):
        """get_text() joins rows with newlines."""
        assert display.get_text().count("\n") == HEIGHT - 1


# =============================================================================
# Image Rendering Tests
# =============================================================================

class TestRenderImage:
    """Test PNG rendering."""

    def test_render_png(self, display):
        """render_image() returns a scaled PNG."""
        pil = pytest.importorskip("PIL.Image")
        import io

        display.draw_sprite(0, 0, bytes([0x80]))
        data = display.render_image(scale=4)

        assert data[:8] == b"\x89PNG\r\n\x1a\n"
        image = pil.open(io.BytesIO(data))
        assert image.size == (WIDTH * 4, HEIGHT * 4)
        assert image.getpixel((0, 0)) == 255
        assert image.getpixel((3, 3)) == 255
        assert image.getpixel((4, 0)) == 0

    def test_render_bad_scale(self, display):
        """Scale must be at least 1."""
        pytest.importorskip("PIL")
        with pytest.raises(ValueError):
            display.render_image(scale=0)
