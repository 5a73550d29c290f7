"""
Memory Subsystem for CHIP-8 VM
==============================

Memory Map:
    $000-$04F  Built-in 4x5 hexadecimal font (16 glyphs x 5 bytes)
    $050-$1FF  Reserved for the interpreter
    $200-$FFF  Program image and working RAM

Every access is masked to 12 bits, so no read or write can reach past the
end of the 4096-byte buffer. The font region is read-only: byte writes that
land in $000-$04F (including ones that wrap there from above $FFF) are
ignored. Only reset() writes the font.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging

from ..errors import ProgramTooLargeError

logger = logging.getLogger(__name__)


MEMORY_SIZE = 0x1000
ADDRESS_MASK = 0xFFF
PROGRAM_START = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START

FONT_ADDRESS = 0x000
GLYPH_HEIGHT = 5
FONT_END = FONT_ADDRESS + 16 * GLYPH_HEIGHT

# One glyph per hex digit, 5 rows each. Only the high nibble of each row is lit.
FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
))


def glyph_address(digit: int) -> int:
    """Address of the font glyph for a hex digit (only the low nibble is used)."""
    return FONT_ADDRESS + (digit & 0xF) * GLYPH_HEIGHT


class Memory:
    """
    Flat 4 KiB address space.

    Attributes:
        size: Size of the address space in bytes (always 4096)
    """

    size = MEMORY_SIZE

    def __init__(self):
        self._data = bytearray(MEMORY_SIZE)
        self.reset()

    def reset(self) -> None:
        """Zero all memory and write the font table."""
        self._data[:] = bytes(MEMORY_SIZE)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT)] = FONT

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: Address (masked to 12 bits)

        Returns:
            Byte value at address
        """
        return self._data[address & ADDRESS_MASK]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: Address (masked to 12 bits)
            value: Byte value to write (masked to 8 bits)

        Writes into the font region are dropped.
        """
        address &= ADDRESS_MASK
        if FONT_ADDRESS <= address < FONT_END:
            logger.debug(f"Ignored write of ${value & 0xFF:02X} to font at ${address:03X}")
            return
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit big-endian word; the second byte address wraps at $FFF."""
        return (self.read(address) << 8) | self.read(address + 1)

    def read_block(self, address: int, length: int) -> bytes:
        """Read length bytes starting at address, wrapping at the top of memory."""
        return bytes(self.read(address + i) for i in range(length))

    def load_program(self, data: bytes, address: int = PROGRAM_START) -> None:
        """
        Copy a program image into memory.

        Bytes beyond the end of the image are left untouched.

        Args:
            data: Raw program image (no header)
            address: Load address (default $200)

        Raises:
            ProgramTooLargeError: If the image does not fit between the
                load address and the end of memory. Memory is unchanged.
        """
        capacity = MEMORY_SIZE - address
        if len(data) > capacity:
            raise ProgramTooLargeError(len(data), capacity)

        self._data[address:address + len(data)] = data
        logger.debug(f"Loaded {len(data)} bytes at ${address:03X}")

    def dump(self) -> bytes:
        """Return a copy of the whole address space."""
        return bytes(self._data)
