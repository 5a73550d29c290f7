"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the main `Emulator` class that ties the interpreter
core to its memory, framebuffer and keypad, and offers the narrow API an
outer host needs:

- Program loading from raw bytes or from a file
- Execution control (step, run)
- Framebuffer inspection and the redraw flag
- Keypad input
- The "tone active" signal

Pacing (how many steps per second, 60 Hz timer cadence) belongs to the
host loop. Each step() decrements each timer by at most one.

Example usage:
    >>> from chip8_vm.emulator import Emulator, InterpreterConfig
    >>> emu = Emulator(InterpreterConfig(seed=42))
    >>> emu.load_rom("maze.ch8")
    >>> event = emu.run(2_000)
    >>> print(emu.display_text)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..errors import ExecutionError
from .config import InterpreterConfig
from .cpu import Chip8CPU
from .decoder import Op
from .display import Display
from .events import StepEvent, StopReason
from .keyboard import Key, Keyboard, KeypadLayout
from .memory import Memory

logger = logging.getLogger(__name__)


class Emulator:
    """
    CHIP-8 virtual machine.

    Attributes:
        config: The InterpreterConfig used to initialize this instance
        cpu: The interpreter core (registers, stack, timers)
        memory: The 4 KiB address space
        display: The framebuffer
        keyboard: The keypad

    Example:
        >>> emu = Emulator()
        >>> emu.load_program(bytes([0x60, 0x05, 0x61, 0x0A, 0x80, 0x14]))
        >>> event = emu.run(3)
        >>> print(f"V0 = {emu.cpu.v[0]}")  # V0 = 15
    """

    def __init__(
        self,
        config: Optional[InterpreterConfig] = None,
        layout: KeypadLayout = KeypadLayout.HEX,
    ):
        """
        Initialize the emulator and reset it to power-on state.

        Args:
            config: Compatibility settings. If None, defaults apply
                    (lenient, clipped sprites, unmasked FX1E).
            layout: How key names are mapped to keypad keys
        """
        self.config = config or InterpreterConfig()
        self.memory = Memory()
        self.display = Display()
        self.keyboard = Keyboard(layout)
        self.cpu = Chip8CPU(self.memory, self.display, self.keyboard, self.config)

        self._total_cycles = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_program(self, data: bytes) -> None:
        """
        Copy a raw program image to $200.

        Does not reset PC or any other state; call reset() first for a
        clean run.

        Raises:
            ProgramTooLargeError: If the image exceeds 3584 bytes. Memory
                is left unchanged.
        """
        self.memory.load_program(bytes(data))

    def load_rom(self, path: Union[str, Path]) -> int:
        """
        Read a program image from a file and load it at $200.

        Args:
            path: Path to the image (raw bytes, no header)

        Returns:
            Number of bytes loaded

        Raises:
            OSError: If the file cannot be opened or read
            ProgramTooLargeError: If the image exceeds 3584 bytes
        """
        path = Path(path)
        data = path.read_bytes()
        self.load_program(data)
        logger.info(f"Loaded {path.name} ({len(data)} bytes)")
        return len(data)

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset to power-on state.

        - Memory zeroed and font reloaded
        - Framebuffer cleared and marked for redraw
        - Keypad released
        - Registers, stack and timers cleared; PC = $200
        - Cycle counter reset

        A loaded program is erased: load it again after reset().
        """
        self.memory.reset()
        self.display.reset()
        self.keyboard.reset()
        self.cpu.reset()
        self._total_cycles = 0

    def step(self) -> StepEvent:
        """
        Execute a single cycle.

        Returns:
            StepEvent with reason STEP, KEY_WAIT or UNKNOWN_OPCODE

        Raises:
            ExecutionError: On a fatal fault (the core halts)
            CoreHaltedError: If the core was already halted
        """
        try:
            instruction = self.cpu.step()
        except ExecutionError:
            # The faulting cycle counts; a refused step on a halted core does not
            self._total_cycles += 1
            raise
        self._total_cycles += 1

        if self.cpu.awaiting_key:
            return StepEvent(StopReason.KEY_WAIT, address=self.cpu.pc, opcode=self.cpu.opcode)

        if instruction is not None and instruction.op is Op.UNKNOWN:
            return StepEvent(
                StopReason.UNKNOWN_OPCODE,
                address=self.cpu.pc,
                opcode=instruction.word,
            )

        return StepEvent(StopReason.STEP, address=self.cpu.pc, opcode=self.cpu.opcode)

    def run(self, max_cycles: int = 1_000_000, stop_on_key_wait: bool = False) -> StepEvent:
        """
        Run until max_cycles are consumed or a fatal error occurs.

        Unknown opcodes in lenient mode do not stop the run; they are
        logged and counted on cpu.unknown_opcode_count.

        Args:
            max_cycles: Maximum number of cycles to execute
            stop_on_key_wait: Return as soon as the program blocks in FX0A

        Returns:
            StepEvent describing why execution stopped. Fatal faults are
            returned as StopReason.ERROR with the exception attached.

        Raises:
            CoreHaltedError: If the core was already halted
        """
        for _ in range(max_cycles):
            try:
                event = self.step()
            except ExecutionError as e:
                return StepEvent(
                    StopReason.ERROR,
                    address=e.pc,
                    opcode=e.opcode,
                    error=e,
                )

            if stop_on_key_wait and event.reason is StopReason.KEY_WAIT:
                return event

        return StepEvent(
            StopReason.MAX_CYCLES,
            address=self.cpu.pc,
            message=f"Reached max cycles ({max_cycles})",
        )

    @property
    def total_cycles(self) -> int:
        """Cycles executed since the last reset."""
        return self._total_cycles

    # =========================================================================
    # Keypad Input
    # =========================================================================

    def press_key(self, key: Key) -> None:
        """
        Press a key (key down event).

        Args:
            key: Keypad index (0-15) or key name for the configured layout
        """
        self.keyboard.key_down(key)

    def release_key(self, key: Key) -> None:
        """Release a key (key up event)."""
        self.keyboard.key_up(key)

    def set_keys(self, states: Iterable[bool]) -> None:
        """Overwrite all 16 key states at once."""
        self.keyboard.set_state(states)

    def tap_key(self, key: Key, hold_cycles: int = 10) -> StepEvent:
        """
        Tap a key: press, run hold_cycles, release.

        Returns:
            The event that ended the hold run
        """
        self.press_key(key)
        try:
            return self.run(hold_cycles)
        finally:
            self.release_key(key)

    # =========================================================================
    # Display and Sound Output
    # =========================================================================

    @property
    def framebuffer(self) -> bytes:
        """64x32 snapshot, row-major, one byte (0 or 1) per pixel."""
        return self.display.get_pixel_buffer()

    @property
    def redraw_needed(self) -> bool:
        """True if the framebuffer changed since the last acknowledge_redraw()."""
        return self.display.redraw_needed

    def acknowledge_redraw(self) -> None:
        """Mark the current frame as presented."""
        self.display.acknowledge_redraw()

    @property
    def display_text(self) -> str:
        """Framebuffer as text, '#' for lit pixels and '.' for dark ones."""
        return self.display.get_text()

    @property
    def display_lines(self) -> List[str]:
        """Framebuffer as a list of 32 text rows."""
        return self.display.get_text_grid()

    @property
    def tone_active(self) -> bool:
        """True while the sound timer is nonzero."""
        return self.cpu.tone_active
