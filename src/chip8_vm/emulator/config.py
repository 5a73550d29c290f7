"""
Interpreter Configuration
=========================

Compatibility and strictness settings for the interpreter core.

CHIP-8 implementations disagree on a handful of behaviors. The defaults
here follow the original COSMAC-era interpretation; each deviation is an
explicit flag so a program written for another interpreter can be run
without touching the core.

Configuration can come from:
- Keyword arguments (InterpreterConfig(strict=True))
- Environment variables (InterpreterConfig.from_env())

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Optional
import os


_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(value: str) -> Optional[bool]:
    """Parse an environment flag, returning None for unrecognized text."""
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


@dataclass(frozen=True)
class InterpreterConfig:
    """
    Configuration for interpreter initialization.

    Attributes:
        strict: Raise UnknownOpcodeError and halt on undefined instructions.
                When False (default) they are logged and skipped.
        sprite_wrap: DXYN wraps pixels past the right/bottom edge around to
                     the opposite side. Default False clips them.
        index_wrap: FX1E masks I to 12 bits after the add. Default False
                    leaves I unmasked (VF reports the overflow either way).
        seed: Seed for the CXNN random generator. None uses the
              process-wide generator seeded from OS entropy; an int reseeds
              a private generator on every reset for reproducible runs.

    Example:
        >>> config = InterpreterConfig(strict=True, seed=1234)
        >>> config = InterpreterConfig(sprite_wrap=True)
    """
    strict: bool = False
    sprite_wrap: bool = False
    index_wrap: bool = False
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "InterpreterConfig":
        """
        Create InterpreterConfig from environment variables.

        Environment variables (all optional):
            CHIP8_STRICT: Halt on unknown opcodes ("1"/"0", "true"/"false")
            CHIP8_SPRITE_WRAP: Wrap sprites at the screen edges
            CHIP8_INDEX_WRAP: Mask I to 12 bits in FX1E
            CHIP8_SEED: Integer seed for the random generator

        Invalid values are ignored and the default is kept.

        Returns:
            InterpreterConfig with values from environment variables
        """
        values = {}

        for name, env_var in (
            ("strict", "CHIP8_STRICT"),
            ("sprite_wrap", "CHIP8_SPRITE_WRAP"),
            ("index_wrap", "CHIP8_INDEX_WRAP"),
        ):
            if raw := os.environ.get(env_var):
                flag = _parse_bool(raw)
                if flag is not None:
                    values[name] = flag

        if seed := os.environ.get("CHIP8_SEED"):
            try:
                values["seed"] = int(seed, 0)
            except ValueError:
                pass  # Ignore invalid values

        return cls(**values)
