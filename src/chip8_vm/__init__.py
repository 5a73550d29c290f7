"""
chip8-vm - CHIP-8 Virtual Machine
=================================

This package emulates the CHIP-8 interpreter found on 1970s hobbyist
microcomputers such as the COSMAC VIP: 4 KiB of memory, sixteen 8-bit
registers, a 16-level call stack, a 64x32 monochrome display, two 60 Hz
countdown timers and a 16-key hex keypad.

Main Components
---------------
- **emulator**: the interpreter core and its memory, display and keypad

- **cli**: command-line tools
    `c8run` runs a program image headless and prints the final screen

Quick Start
-----------
Run a program:
    >>> from chip8_vm import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("ibm_logo.ch8")
    >>> event = emu.run(200)
    >>> print(emu.display_text)

Or use the command-line tool:
    $ c8run ibm_logo.ch8 --cycles 200

Version History
---------------
1.0.0 - Initial release with the full instruction set and c8run
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_vm.emulator import (
    Emulator,
    InterpreterConfig,
    StepEvent,
    StopReason,
    KeypadLayout,
)
from chip8_vm.errors import (
    Chip8Error,
    ProgramTooLargeError,
    ExecutionError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
    CoreHaltedError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Emulator
    "Emulator",
    "InterpreterConfig",
    "StepEvent",
    "StopReason",
    "KeypadLayout",
    # Exception hierarchy
    "Chip8Error",
    "ProgramTooLargeError",
    "ExecutionError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
    "CoreHaltedError",
]
