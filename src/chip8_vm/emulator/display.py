"""
Framebuffer for CHIP-8 VM
=========================

64x32 monochrome display stored one byte (0 or 1) per pixel, row-major.

Sprites are 8 pixels wide and 1-15 rows tall, one byte per row with the
most significant bit on the left. Drawing XORs the sprite onto the
framebuffer and reports whether any lit pixel was switched off (a
"collision").

Edge behavior:
    The sprite origin always wraps (VX mod 64, VY mod 32). Pixels that
    then fall past the right or bottom edge are clipped by default. With
    wrap=True they reappear on the opposite side instead. Interpreters
    disagree on this, so it is selectable per draw.

The display also owns the "redraw needed" flag: set by every clear or
draw, cleared only by acknowledge_redraw().

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import List, Optional


WIDTH = 64
HEIGHT = 32
SPRITE_WIDTH = 8


class Display:
    """
    Monochrome framebuffer with XOR sprite drawing.

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0xF0, 0x90, 0x90, 0x90, 0xF0]))
        False
        >>> display.get_pixel(0, 0)
        1
    """

    width = WIDTH
    height = HEIGHT

    def __init__(self):
        self._pixels = bytearray(WIDTH * HEIGHT)
        self._needs_refresh = True

    # =========================================================================
    # State
    # =========================================================================

    @property
    def redraw_needed(self) -> bool:
        """True if the framebuffer changed since the last acknowledge_redraw()."""
        return self._needs_refresh

    def acknowledge_redraw(self) -> None:
        """Clear the redraw flag after the frame has been presented."""
        self._needs_refresh = False

    def mark_dirty(self) -> None:
        """Request a redraw without changing any pixel."""
        self._needs_refresh = True

    def reset(self) -> None:
        """Blank the screen and request a first redraw."""
        self.clear()

    def clear(self) -> None:
        """Switch every pixel off."""
        self._pixels[:] = bytes(WIDTH * HEIGHT)
        self._needs_refresh = True

    # =========================================================================
    # Drawing
    # =========================================================================

    def draw_sprite(self, x: int, y: int, rows: bytes, wrap: bool = False) -> bool:
        """
        XOR a sprite onto the framebuffer.

        Args:
            x: Horizontal origin (taken mod 64)
            y: Vertical origin (taken mod 32)
            rows: Sprite rows, one byte each, MSB = leftmost pixel
            wrap: Wrap pixels past the edges instead of clipping them

        Returns:
            True if any pixel went from set to unset
        """
        origin_x = x % WIDTH
        origin_y = y % HEIGHT
        collision = False

        for row_idx, row_data in enumerate(rows):
            py = origin_y + row_idx
            if py >= HEIGHT:
                if not wrap:
                    break
                py %= HEIGHT

            for bit_idx in range(SPRITE_WIDTH):
                if not (row_data >> (7 - bit_idx)) & 1:
                    continue

                px = origin_x + bit_idx
                if px >= WIDTH:
                    if not wrap:
                        break
                    px %= WIDTH

                offset = py * WIDTH + px
                if self._pixels[offset]:
                    collision = True
                self._pixels[offset] ^= 1

        self._needs_refresh = True
        return collision

    # =========================================================================
    # Pixel Buffer API
    # =========================================================================

    def get_pixel(self, x: int, y: int) -> int:
        """Return 1 if the pixel at (x, y) is lit, else 0."""
        if not (0 <= x < WIDTH and 0 <= y < HEIGHT):
            raise IndexError(f"pixel ({x}, {y}) outside {WIDTH}x{HEIGHT} display")
        return self._pixels[y * WIDTH + x]

    def get_pixel_buffer(self) -> bytes:
        """
        Snapshot of the framebuffer.

        Returns:
            WIDTH * HEIGHT bytes, row-major, each 0 or 1
        """
        return bytes(self._pixels)

    def lit_count(self) -> int:
        """Number of lit pixels."""
        return sum(self._pixels)

    def get_text_grid(self, on: str = "#", off: str = ".") -> List[str]:
        """Render the framebuffer as one string per row."""
        lines = []
        for y in range(HEIGHT):
            row = self._pixels[y * WIDTH:(y + 1) * WIDTH]
            lines.append("".join(on if pixel else off for pixel in row))
        return lines

    def get_text(self, on: str = "#", off: str = ".") -> str:
        """Render the framebuffer as newline-separated rows."""
        return "\n".join(self.get_text_grid(on, off))

    def render_image(self, scale: int = 8) -> Optional[bytes]:
        """
        Render display as PNG image (requires PIL).

        Args:
            scale: Pixel scale factor (default 8)

        Returns:
            PNG image bytes, or None if PIL not available
        """
        try:
            from PIL import Image
            import io
        except ImportError:
            return None

        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")

        # Nearest-neighbor upscale keeps pixels square
        img = Image.new("L", (WIDTH, HEIGHT), color=0)
        img.putdata([255 if pixel else 0 for pixel in self._pixels])
        if scale > 1:
            img = img.resize((WIDTH * scale, HEIGHT * scale), Image.Resampling.NEAREST)

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()
