"""
CHIP-8 CPU
==========

Registers, call stack, timers and the fetch-decode-execute cycle.

Programmer's model:
- V0-VF: sixteen 8-bit registers. VF is also the carry/borrow/shift/
  collision flag and is overwritten by every instruction that defines it.
- I: 16-bit index register (address-valued)
- PC: 16-bit program counter, starts at $200
- Stack: 16 return addresses with a stack pointer in [0, 16]
- Delay and sound timers: 8-bit, decremented once per step while nonzero

Execution modes:
- RUNNING: each step fetches, decodes and executes one instruction
- AWAITING_KEY: entered by FX0A. Each step only looks for a newly
  pressed key. PC stays on the FX0A word until one arrives.
- HALTED: entered on a fatal error. step() raises CoreHaltedError until
  reset().

Timers tick at the end of every step in RUNNING and AWAITING_KEY modes.
Pacing steps against wall-clock time is the caller's job.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Optional, Set, Tuple

from ..errors import (
    CoreHaltedError,
    ExecutionError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from .config import InterpreterConfig
from .decoder import Instruction, Op, decode
from .display import Display
from .keyboard import Keyboard
from .memory import Memory, PROGRAM_START, glyph_address

logger = logging.getLogger(__name__)


REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG = 0xF

# Shared by every core that has no fixed seed. Seeded once per process from
# OS entropy; reset() does not reseed it.
_PROCESS_RNG = random.Random()


class CoreMode(Enum):
    """Externally visible execution mode."""
    RUNNING = auto()
    AWAITING_KEY = auto()
    HALTED = auto()


@dataclass
class CPUState:
    """
    Complete CPU state.

    All values stored as Python ints but represent:
    - v: sixteen 8-bit unsigned registers
    - i, pc: 16-bit unsigned
    - sp: 0-16, index of the next free stack slot
    - stack: 16 saved return addresses
    - delay_timer, sound_timer: 8-bit unsigned
    - opcode: last instruction word fetched
    """
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0
    pc: int = PROGRAM_START
    sp: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    opcode: int = 0
    mode: CoreMode = CoreMode.RUNNING


class Chip8CPU:
    """
    CHIP-8 interpreter core.

    The CPU owns registers, stack and timers; memory, framebuffer and keypad
    are passed in so the Emulator can share them with host-side code.

    Example:
        >>> cpu = Chip8CPU(Memory(), Display(), Keyboard())
        >>> cpu.memory.load_program(bytes([0x60, 0x05]))
        >>> _ = cpu.step()
        >>> print(f"V0=${cpu.v[0]:02X} PC=${cpu.pc:03X}")
        V0=$05 PC=$202
    """

    def __init__(
        self,
        memory: Memory,
        display: Display,
        keyboard: Keyboard,
        config: Optional[InterpreterConfig] = None,
    ):
        """
        Initialize CPU.

        Args:
            memory: 4 KiB address space (font already loaded)
            display: Framebuffer written by 00E0 and DXYN
            keyboard: Keypad read by EX9E, EXA1 and FX0A
            config: Compatibility settings; defaults to InterpreterConfig()
        """
        self.memory = memory
        self.display = display
        self.keyboard = keyboard
        self.config = config or InterpreterConfig()
        self.state = CPUState()

        # on_unknown_opcode(error) is called for every undefined instruction
        # skipped in lenient mode
        self.on_unknown_opcode: Optional[Callable[[UnknownOpcodeError], None]] = None
        self.unknown_opcode_count = 0

        self._rng = _PROCESS_RNG
        self._halt_cause: Optional[ExecutionError] = None
        self._key_wait_register = 0
        self._keys_held_at_wait: Set[int] = set()

        self.reset()

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> List[int]:
        """General-purpose registers V0-VF. Use set_register() to write."""
        return self.state.v

    def set_register(self, index: int, value: int) -> None:
        """Write VX, masked to 8 bits."""
        self.state.v[index & 0xF] = value & 0xFF

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def sp(self) -> int:
        """Stack pointer: number of return addresses on the stack."""
        return self.state.sp

    @property
    def stack(self) -> Tuple[int, ...]:
        """Return addresses currently on the stack, oldest first."""
        return tuple(self.state.stack[:self.state.sp])

    @property
    def delay_timer(self) -> int:
        return self.state.delay_timer

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self.state.delay_timer = value & 0xFF

    @property
    def sound_timer(self) -> int:
        return self.state.sound_timer

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self.state.sound_timer = value & 0xFF

    @property
    def opcode(self) -> int:
        """Last instruction word fetched."""
        return self.state.opcode

    # ========================================
    # Mode Properties
    # ========================================

    @property
    def mode(self) -> CoreMode:
        return self.state.mode

    @property
    def awaiting_key(self) -> bool:
        """True while an FX0A is waiting for a key press."""
        return self.state.mode is CoreMode.AWAITING_KEY

    @property
    def halted(self) -> bool:
        return self.state.mode is CoreMode.HALTED

    @property
    def halt_cause(self) -> Optional[ExecutionError]:
        """The fatal error that halted the core, or None."""
        return self._halt_cause

    @property
    def tone_active(self) -> bool:
        """True while the sound timer is nonzero."""
        return self.state.sound_timer > 0

    # ========================================
    # Reset
    # ========================================

    def reset(self) -> None:
        """
        Reset CPU to power-on state.

        Clears registers, index, stack and timers, sets PC to $200 and
        returns to RUNNING mode. Memory, display and keypad are reset by
        their owners.

        With a fixed seed in the config the random generator is reseeded
        here; otherwise the process-wide generator carries on.
        """
        self.state = CPUState()
        self.unknown_opcode_count = 0
        self._halt_cause = None
        self._key_wait_register = 0
        self._keys_held_at_wait = set()

        if self.config.seed is not None:
            self._rng = random.Random(self.config.seed)
        else:
            self._rng = _PROCESS_RNG

    # ========================================
    # Main Execution Loop
    # ========================================

    def step(self) -> Optional[Instruction]:
        """
        Run one cycle: fetch, decode, execute, then tick the timers.

        In AWAITING_KEY mode the cycle only polls the keypad.

        Returns:
            The instruction executed, or None for a key-wait poll

        Raises:
            CoreHaltedError: If the core halted on an earlier fatal error
            StackOverflowError: On a call with a full stack (core halts)
            StackUnderflowError: On a return with an empty stack (core halts)
            UnknownOpcodeError: On an undefined instruction in strict mode
                (core halts)
        """
        if self.state.mode is CoreMode.HALTED:
            raise CoreHaltedError(self._halt_cause)

        if self.state.mode is CoreMode.AWAITING_KEY:
            self._poll_key_wait()
            self._tick_timers()
            return None

        pc = self.pc
        word = self.memory.read_word(pc)
        self.state.opcode = word
        instruction = decode(word)

        try:
            self._execute(instruction, pc)
        except ExecutionError as e:
            self._halt(e)
            raise

        self._tick_timers()
        return instruction

    def _halt(self, error: ExecutionError) -> None:
        """Stop the core after a fatal error."""
        logger.error(f"Core halted: {error}")
        self._halt_cause = error
        self.state.mode = CoreMode.HALTED

    def _tick_timers(self) -> None:
        """Decrement both timers by one, stopping at zero."""
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1

        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1
            if self.state.sound_timer == 0:
                logger.debug("Sound timer expired, tone off")

    # ========================================
    # Key Wait (FX0A)
    # ========================================

    def _begin_key_wait(self, register: int) -> None:
        """Enter AWAITING_KEY. Keys already held do not count as a press."""
        self._key_wait_register = register
        self._keys_held_at_wait = set(self.keyboard.pressed_keys())
        self.state.mode = CoreMode.AWAITING_KEY
        logger.debug(f"Waiting for key into V{register:X}")

    def _poll_key_wait(self) -> None:
        """Complete FX0A if a key has been pressed since the wait began."""
        pressed = self.keyboard.pressed_keys()

        # A held key released during the wait may count again when re-pressed
        self._keys_held_at_wait &= set(pressed)

        for key in pressed:
            if key not in self._keys_held_at_wait:
                self.set_register(self._key_wait_register, key)
                self.pc = self.pc + 2
                self.state.mode = CoreMode.RUNNING
                self._keys_held_at_wait = set()
                logger.debug(f"Key {key:X} stored in V{self._key_wait_register:X}")
                return

    # ========================================
    # Instruction Execution
    # ========================================

    def _unknown_opcode(self, instruction: Instruction, pc: int) -> None:
        """Report an undefined instruction; raise it in strict mode."""
        error = UnknownOpcodeError(instruction.word, pc=pc)
        if self.config.strict:
            raise error

        self.unknown_opcode_count += 1
        logger.warning(f"Skipping {error}")
        if self.on_unknown_opcode:
            self.on_unknown_opcode(error)

    def _execute(self, instruction: Instruction, pc: int) -> None:
        """
        Execute one decoded instruction.

        PC advances by 2 unless the instruction jumps, calls, returns,
        skips or waits. VF is written after the result so the flag wins
        when VF is also the destination.
        """
        v = self.state.v
        x, y = instruction.x, instruction.y
        nn, nnn = instruction.nn, instruction.nnn
        next_pc = pc + 2

        match instruction.op:
            case Op.CLEAR_SCREEN:
                self.display.clear()

            case Op.RETURN:
                if self.state.sp == 0:
                    raise StackUnderflowError(pc=pc, opcode=instruction.word)
                self.state.sp -= 1
                next_pc = self.state.stack[self.state.sp]

            case Op.JUMP:
                next_pc = nnn

            case Op.CALL:
                if self.state.sp >= STACK_DEPTH:
                    raise StackOverflowError(pc=pc, opcode=instruction.word, depth=STACK_DEPTH)
                self.state.stack[self.state.sp] = next_pc
                self.state.sp += 1
                next_pc = nnn

            case Op.SKIP_EQ_IMM:
                if v[x] == nn:
                    next_pc += 2

            case Op.SKIP_NE_IMM:
                if v[x] != nn:
                    next_pc += 2

            case Op.SKIP_EQ_REG:
                if v[x] == v[y]:
                    next_pc += 2

            case Op.SET_IMM:
                v[x] = nn

            case Op.ADD_IMM:
                # No carry flag for the immediate add
                v[x] = (v[x] + nn) & 0xFF

            case Op.SET_REG:
                v[x] = v[y]

            case Op.OR:
                v[x] |= v[y]

            case Op.AND:
                v[x] &= v[y]

            case Op.XOR:
                v[x] ^= v[y]

            case Op.ADD_REG:
                total = v[x] + v[y]
                v[x] = total & 0xFF
                v[FLAG] = 1 if total > 0xFF else 0

            case Op.SUB_REG:
                vx, vy = v[x], v[y]
                v[x] = (vx - vy) & 0xFF
                v[FLAG] = 1 if vx >= vy else 0

            case Op.SHIFT_RIGHT:
                shifted_out = v[x] & 0x1
                v[x] >>= 1
                v[FLAG] = shifted_out

            case Op.SUBN_REG:
                vx, vy = v[x], v[y]
                v[x] = (vy - vx) & 0xFF
                v[FLAG] = 1 if vy >= vx else 0

            case Op.SHIFT_LEFT:
                shifted_out = (v[x] >> 7) & 0x1
                v[x] = (v[x] << 1) & 0xFF
                v[FLAG] = shifted_out

            case Op.SKIP_NE_REG:
                if v[x] != v[y]:
                    next_pc += 2

            case Op.SET_INDEX:
                self.i = nnn

            case Op.JUMP_V0:
                next_pc = nnn + v[0]

            case Op.RANDOM:
                v[x] = self._rng.getrandbits(8) & nn

            case Op.DRAW:
                rows = self.memory.read_block(self.i, instruction.n)
                collision = self.display.draw_sprite(
                    v[x], v[y], rows, wrap=self.config.sprite_wrap
                )
                v[FLAG] = 1 if collision else 0

            case Op.SKIP_KEY:
                if self.keyboard.is_pressed(v[x]):
                    next_pc += 2

            case Op.SKIP_NOT_KEY:
                if not self.keyboard.is_pressed(v[x]):
                    next_pc += 2

            case Op.GET_DELAY:
                v[x] = self.state.delay_timer

            case Op.WAIT_KEY:
                self._begin_key_wait(x)
                next_pc = pc

            case Op.SET_DELAY:
                self.state.delay_timer = v[x]

            case Op.SET_SOUND:
                self.state.sound_timer = v[x]
                if v[x]:
                    logger.debug(f"Tone on for {v[x]} ticks")

            case Op.ADD_INDEX:
                total = self.i + v[x]
                self.i = total & 0xFFF if self.config.index_wrap else total
                v[FLAG] = 1 if total > 0xFFF else 0

            case Op.FONT_CHAR:
                self.i = glyph_address(v[x])

            case Op.STORE_BCD:
                value = v[x]
                self.memory.write(self.i, value // 100)
                self.memory.write(self.i + 1, (value // 10) % 10)
                self.memory.write(self.i + 2, value % 10)

            case Op.STORE_REGS:
                for k in range(x + 1):
                    self.memory.write(self.i + k, v[k])

            case Op.LOAD_REGS:
                for k in range(x + 1):
                    v[k] = self.memory.read(self.i + k)

            case Op.UNKNOWN:
                self._unknown_opcode(instruction, pc)

        self.pc = next_pc
