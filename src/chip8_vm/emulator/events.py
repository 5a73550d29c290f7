"""
Step and Run Events
===================

Describes what happened during Emulator.step() and why Emulator.run()
returned.

Example usage:

    >>> from chip8_vm.emulator import Emulator, StopReason
    >>> emu = Emulator()
    >>> emu.load_rom("pong.ch8")
    >>> event = emu.run(10_000)
    >>> if event.reason == StopReason.ERROR:
    ...     print(f"Program crashed: {event.error}")

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..errors import ExecutionError


class StopReason(Enum):
    """
    Enumeration of step outcomes and reasons why a run stopped.
    """
    STEP = auto()            # One instruction executed normally
    KEY_WAIT = auto()        # Core is waiting in FX0A for a key press
    UNKNOWN_OPCODE = auto()  # Undefined instruction skipped (lenient mode)
    MAX_CYCLES = auto()      # Run reached its cycle budget
    ERROR = auto()           # Fatal error; the core is halted


@dataclass
class StepEvent:
    """
    Information about a step, or about why a run stopped.

    Attributes:
        reason: What happened
        address: PC after the step (or at the fault for ERROR)
        opcode: Instruction word involved (if applicable)
        error: The fatal error for ERROR events
        message: Human-readable description
    """
    reason: StopReason
    address: Optional[int] = None
    opcode: Optional[int] = None
    error: Optional[ExecutionError] = None
    message: str = ""

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return self.message
        match self.reason:
            case StopReason.STEP:
                return f"Step to ${self.address:03X}" if self.address is not None else "Step"
            case StopReason.KEY_WAIT:
                return "Waiting for key"
            case StopReason.UNKNOWN_OPCODE:
                return f"Unknown opcode {self.opcode:04X}" if self.opcode is not None else "Unknown opcode"
            case StopReason.MAX_CYCLES:
                return "Maximum cycles reached"
            case StopReason.ERROR:
                return f"Runtime error: {self.error}" if self.error else "Runtime error"
            case _:
                return "Unknown"
