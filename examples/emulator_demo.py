#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the chip8-vm emulator to:
1. Create an emulator with a fixed random seed
2. Load a program image
3. Drive the FX0A key wait from the host side
4. Present frames only when the redraw flag is set
5. Take a screenshot

Usage:
    python examples/emulator_demo.py [program.ch8]

Without an argument a small built-in program is used: it waits for a key
and draws that key's hex digit, forever.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import sys
from pathlib import Path

from chip8_vm import Emulator, InterpreterConfig, StopReason


# $200: wait for key into V1
# $202: V0 = 0
# $204: clear screen
# $206: I = glyph for V1
# $208: draw 5 rows at (V0, V0)
# $20A: jump back to $200
SHOW_KEY = bytes([
    0xF1, 0x0A,
    0x60, 0x00,
    0x00, 0xE0,
    0xF1, 0x29,
    0xD0, 0x05,
    0x12, 0x00,
])


def present(emu: Emulator) -> None:
    """Print the top of the screen, where the glyph is drawn."""
    for line in emu.display_lines[:6]:
        print("  " + line[:16])


def main():
    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    # A fixed seed makes CXNN reproducible; omit it for OS entropy
    print("Creating CHIP-8 emulator...")
    emu = Emulator(InterpreterConfig(seed=1))

    # ==========================================================================
    # 2. Load a program
    # ==========================================================================
    if len(sys.argv) > 1:
        size = emu.load_rom(sys.argv[1])
        print(f"  Loaded {sys.argv[1]} ({size} bytes)")
    else:
        emu.load_program(SHOW_KEY)
        print(f"  Loaded built-in demo ({len(SHOW_KEY)} bytes)")

    # ==========================================================================
    # 3. Run until the program waits for input
    # ==========================================================================
    event = emu.run(10_000, stop_on_key_wait=True)
    print(f"\nStopped: {event}")

    if event.reason is StopReason.ERROR:
        print(f"  Program crashed: {event.error}")
        return 1

    # ==========================================================================
    # 4. Feed keys and present frames
    # ==========================================================================
    # tap_key() holds a key for a number of cycles then releases it. The
    # key wait completes on the first cycle that sees the new press.
    for key in (0xA, 0x3, 0xF):
        emu.tap_key(key, hold_cycles=20)
        emu.run(100, stop_on_key_wait=True)

        if emu.redraw_needed:
            print(f"\nAfter key {key:X}:")
            present(emu)
            emu.acknowledge_redraw()

    # ==========================================================================
    # 5. Take a screenshot
    # ==========================================================================
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    png = emu.display.render_image(scale=8)
    if png is None:
        print("\nPillow not installed, skipping screenshot")
    else:
        path = output_dir / "chip8_demo.png"
        path.write_bytes(png)
        print(f"\nScreenshot saved to {path}")

    print(f"\nTotal cycles: {emu.total_cycles}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
