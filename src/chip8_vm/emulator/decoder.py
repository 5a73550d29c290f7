"""
CHIP-8 Instruction Decoder
==========================

Turns a 16-bit instruction word into an `Instruction`: an `Op` tag plus the
operands extracted from the word. Decoding is a pure function with no
access to CPU state, so the opcode table can be tested on its own.

Operand extraction (nibbles numbered from the most significant):

    X   = (word >> 8) & 0xF    second nibble, register index
    Y   = (word >> 4) & 0xF    third nibble, register index
    N   = word & 0xF           fourth nibble, 4-bit immediate
    NN  = word & 0xFF          low byte, 8-bit immediate
    NNN = word & 0xFFF         low 12 bits, address

The top nibble selects the opcode family. Families 0, 8, E and F are
further split by the low nibble or low byte; anything left over decodes
to Op.UNKNOWN.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class Op(Enum):
    """Decoded operation. The value is the opcode template."""
    CLEAR_SCREEN = "00E0"
    RETURN = "00EE"
    JUMP = "1NNN"
    CALL = "2NNN"
    SKIP_EQ_IMM = "3XNN"
    SKIP_NE_IMM = "4XNN"
    SKIP_EQ_REG = "5XY0"
    SET_IMM = "6XNN"
    ADD_IMM = "7XNN"
    SET_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB_REG = "8XY5"
    SHIFT_RIGHT = "8XY6"
    SUBN_REG = "8XY7"
    SHIFT_LEFT = "8XYE"
    SKIP_NE_REG = "9XY0"
    SET_INDEX = "ANNN"
    JUMP_V0 = "BNNN"
    RANDOM = "CXNN"
    DRAW = "DXYN"
    SKIP_KEY = "EX9E"
    SKIP_NOT_KEY = "EXA1"
    GET_DELAY = "FX07"
    WAIT_KEY = "FX0A"
    SET_DELAY = "FX15"
    SET_SOUND = "FX18"
    ADD_INDEX = "FX1E"
    FONT_CHAR = "FX29"
    STORE_BCD = "FX33"
    STORE_REGS = "FX55"
    LOAD_REGS = "FX65"
    UNKNOWN = "????"


@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction word.

    All operand fields are always populated from the word, whether or not
    the operation uses them.

    Attributes:
        op: Decoded operation
        word: Raw 16-bit instruction word
        x, y, n, nn, nnn: Operand fields (see module docstring)
    """
    op: Op
    word: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    def __str__(self) -> str:
        return f"{self.word:04X} ({self.op.name})"


# =============================================================================
# DECODE TABLES
# =============================================================================
# Keyed by the bits that distinguish operations inside each family.

# Whole-word matches in family 0
_FAMILY_0 = MappingProxyType({
    0x00E0: Op.CLEAR_SCREEN,
    0x00EE: Op.RETURN,
})

# Families fully identified by the top nibble
_FAMILY_SIMPLE = MappingProxyType({
    0x1: Op.JUMP,
    0x2: Op.CALL,
    0x3: Op.SKIP_EQ_IMM,
    0x4: Op.SKIP_NE_IMM,
    0x6: Op.SET_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.SET_INDEX,
    0xB: Op.JUMP_V0,
    0xC: Op.RANDOM,
    0xD: Op.DRAW,
})

# Family 8, keyed by low nibble
_FAMILY_8 = MappingProxyType({
    0x0: Op.SET_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB_REG,
    0x6: Op.SHIFT_RIGHT,
    0x7: Op.SUBN_REG,
    0xE: Op.SHIFT_LEFT,
})

# Family E, keyed by low byte
_FAMILY_E = MappingProxyType({
    0x9E: Op.SKIP_KEY,
    0xA1: Op.SKIP_NOT_KEY,
})

# Family F, keyed by low byte
_FAMILY_F = MappingProxyType({
    0x07: Op.GET_DELAY,
    0x0A: Op.WAIT_KEY,
    0x15: Op.SET_DELAY,
    0x18: Op.SET_SOUND,
    0x1E: Op.ADD_INDEX,
    0x29: Op.FONT_CHAR,
    0x33: Op.STORE_BCD,
    0x55: Op.STORE_REGS,
    0x65: Op.LOAD_REGS,
})


def decode_op(word: int) -> Op:
    """
    Classify an instruction word.

    Args:
        word: 16-bit instruction word

    Returns:
        The Op for the word, Op.UNKNOWN if it has no defined meaning
    """
    family = (word >> 12) & 0xF

    match family:
        case 0x0:
            return _FAMILY_0.get(word, Op.UNKNOWN)
        case 0x5:
            return Op.SKIP_EQ_REG if word & 0xF == 0 else Op.UNKNOWN
        case 0x8:
            return _FAMILY_8.get(word & 0xF, Op.UNKNOWN)
        case 0x9:
            return Op.SKIP_NE_REG if word & 0xF == 0 else Op.UNKNOWN
        case 0xE:
            return _FAMILY_E.get(word & 0xFF, Op.UNKNOWN)
        case 0xF:
            return _FAMILY_F.get(word & 0xFF, Op.UNKNOWN)
        case _:
            return _FAMILY_SIMPLE[family]


def decode(word: int) -> Instruction:
    """
    Decode a 16-bit instruction word.

    Example:
        >>> decode(0x8014)
        Instruction(op=<Op.ADD_REG: '8XY4'>, word=32788, x=0, y=1, n=4, nn=20, nnn=20)
    """
    word &= 0xFFFF
    return Instruction(
        op=decode_op(word),
        word=word,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=word & 0xFF,
        nnn=word & 0xFFF,
    )
