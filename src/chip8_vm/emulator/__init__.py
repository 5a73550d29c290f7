"""
CHIP-8 Virtual Machine
======================

A bit-exact interpreter for the CHIP-8 instruction set.

This package provides:

- **Interpreter core**: the full 35-opcode instruction set with an explicit
  key-wait mode and halt-on-fault semantics
- **Memory**: 4 KiB address space with the built-in hex font
- **Framebuffer**: 64x32 monochrome display with XOR sprite drawing
- **Keypad**: 16-key hex keypad with hex and QWERTY name mapping
- **Configuration**: strict mode and compatibility flags for the behaviors
  interpreters disagree on

Quick Start
-----------

Basic usage::

    >>> from chip8_vm.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("ibm_logo.ch8")
    >>> event = emu.run(200)
    >>> print(emu.display_text)

Driving the core from a host loop::

    >>> while running:
    ...     emu.set_keys(poll_host_keys())
    ...     emu.step()
    ...     if emu.redraw_needed:
    ...         present(emu.framebuffer)
    ...         emu.acknowledge_redraw()
    ...     buzzer.enabled = emu.tone_active

Module Structure
----------------

- `emulator.py`: Emulator facade (high-level API)
- `cpu.py`: Interpreter core: registers, stack, timers, execution
- `decoder.py`: Instruction word decoding
- `memory.py`: Address space and font
- `display.py`: Framebuffer
- `keyboard.py`: Keypad
- `config.py`: InterpreterConfig
- `events.py`: StepEvent and StopReason

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator
from .config import InterpreterConfig
from .events import StepEvent, StopReason

# Interpreter core
from .cpu import Chip8CPU, CPUState, CoreMode
from .decoder import Instruction, Op, decode, decode_op

# Memory subsystem
from .memory import (
    Memory,
    FONT,
    FONT_ADDRESS,
    MEMORY_SIZE,
    PROGRAM_START,
    PROGRAM_CAPACITY,
    glyph_address,
)

# I/O
from .display import Display
from .keyboard import Keyboard, KeypadLayout

__all__ = [
    # Main API
    "Emulator",
    "InterpreterConfig",
    "StepEvent",
    "StopReason",

    # Core
    "Chip8CPU",
    "CPUState",
    "CoreMode",
    "Instruction",
    "Op",
    "decode",
    "decode_op",

    # Memory
    "Memory",
    "FONT",
    "FONT_ADDRESS",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "PROGRAM_CAPACITY",
    "glyph_address",

    # I/O
    "Display",
    "Keyboard",
    "KeypadLayout",
]
