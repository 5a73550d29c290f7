"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
interpreter-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── ProgramTooLargeError - program image does not fit in program memory
├── ExecutionError (raised out of a step)
│   ├── StackOverflowError - call with all 16 stack slots in use
│   ├── StackUnderflowError - return with an empty stack
│   └── UnknownOpcodeError - instruction word with no defined meaning
└── CoreHaltedError - step requested after a fatal error

Errors reading a program image from disk are not wrapped: the OSError
raised by the filesystem reaches the caller unchanged.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

        try:
            emu.step()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Program Loading Exceptions
# =============================================================================

class ProgramTooLargeError(Chip8Error):
    """
    Program image exceeds available program memory.

    Raised before any byte is copied, so memory is left exactly as it
    was before the load was attempted.

    Attributes:
        size: Size of the rejected image in bytes
        capacity: Number of bytes available from the program start address
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"program is {size} bytes, only {capacity} bytes of program memory available"
        )


# =============================================================================
# Execution Exceptions
# =============================================================================

class ExecutionError(Chip8Error):
    """
    Base exception for faults raised while executing an instruction.

    Attributes:
        pc: Address of the faulting instruction
        opcode: The 16-bit instruction word being executed
    """

    def __init__(self, message: str, pc: Optional[int] = None, opcode: Optional[int] = None):
        self.message = message
        self.pc = pc
        self.opcode = opcode
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format as '$PPP: OOOO: message' when location is known."""
        if self.pc is not None and self.opcode is not None:
            return f"${self.pc:03X}: {self.opcode:04X}: {self.message}"
        return self.message


class StackOverflowError(ExecutionError):
    """Subroutine call attempted with every stack slot already in use."""

    def __init__(self, pc: Optional[int] = None, opcode: Optional[int] = None, depth: int = 16):
        self.depth = depth
        super().__init__(f"stack overflow (depth {depth})", pc=pc, opcode=opcode)


class StackUnderflowError(ExecutionError):
    """Return from subroutine attempted with an empty stack."""

    def __init__(self, pc: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__("stack underflow (return with empty stack)", pc=pc, opcode=opcode)


class UnknownOpcodeError(ExecutionError):
    """
    Instruction word with no defined meaning.

    In the default (lenient) mode this error is reported but not raised:
    it is logged, handed to the CPU's on_unknown_opcode hook, and execution
    continues at the next instruction. In strict mode it is raised and the
    core halts.
    """

    def __init__(self, opcode: int, pc: Optional[int] = None):
        super().__init__(f"unknown opcode 0x{opcode:04X}", pc=pc, opcode=opcode)


class CoreHaltedError(Chip8Error):
    """
    Step requested after the core stopped on a fatal error.

    The core stays halted until reset() is called.

    Attributes:
        cause: The fatal error that halted the core, if known
    """

    def __init__(self, cause: Optional[ExecutionError] = None):
        self.cause = cause
        if cause is not None:
            message = f"core halted: {cause}"
        else:
            message = "core halted"
        super().__init__(message)
