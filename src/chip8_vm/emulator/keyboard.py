"""
Keypad Controller for CHIP-8 VM
===============================

The CHIP-8 keypad has 16 keys labelled with hex digits, laid out as:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

The core only ever reads the pressed/released state; everything here is
written by the host. Keys can be addressed by index (0-15) or by name. How
a name is interpreted depends on the layout:

- HEX: the name is the hex digit on the key ("A", "0", "f")
- QWERTY: the name is the host key at the same position on the left side
  of a standard keyboard (1234 / QWER / ASDF / ZXCV)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Iterable, List, Tuple, Union


KEY_COUNT = 16


class KeypadLayout(IntEnum):
    """How key names passed to key_down()/key_up() are interpreted."""
    HEX = 0  # Name is the hex digit printed on the key
    QWERTY = 1  # Name is the host key in the same grid position


# =============================================================================
# KEY NAME TABLES
# =============================================================================

KEY_TO_INDEX_HEX = MappingProxyType({f"{i:X}": i for i in range(KEY_COUNT)})

KEY_TO_INDEX_QWERTY = MappingProxyType({
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
})

_LAYOUT_TABLES = {
    KeypadLayout.HEX: KEY_TO_INDEX_HEX,
    KeypadLayout.QWERTY: KEY_TO_INDEX_QWERTY,
}

Key = Union[int, str]


class Keyboard:
    """
    16-key hex keypad state.

    Example:
        >>> kb = Keyboard(KeypadLayout.QWERTY)
        >>> kb.key_down("W")
        >>> kb.is_pressed(5)
        True
    """

    def __init__(self, layout: KeypadLayout = KeypadLayout.HEX):
        self.layout = layout
        self._keys = [False] * KEY_COUNT

    def resolve(self, key: Key) -> int:
        """
        Convert a key index or name to a keypad index.

        Raises:
            ValueError: If the key is not on the keypad
        """
        if isinstance(key, int):
            if not 0 <= key < KEY_COUNT:
                raise ValueError(f"Keypad index must be 0-15, got {key}")
            return key

        table = _LAYOUT_TABLES[self.layout]
        index = table.get(key.upper())
        if index is None:
            raise ValueError(f"Unknown key {key!r} for {self.layout.name} layout")
        return index

    def key_down(self, key: Key) -> None:
        """Press a key. It stays pressed until key_up()."""
        self._keys[self.resolve(key)] = True

    def key_up(self, key: Key) -> None:
        """Release a key."""
        self._keys[self.resolve(key)] = False

    def set_state(self, states: Iterable[bool]) -> None:
        """
        Overwrite the whole keypad at once.

        Args:
            states: Exactly 16 pressed flags, index 0 first
        """
        values = [bool(s) for s in states]
        if len(values) != KEY_COUNT:
            raise ValueError(f"Expected {KEY_COUNT} key states, got {len(values)}")
        self._keys = values

    def release_all(self) -> None:
        """Release every key."""
        self._keys = [False] * KEY_COUNT

    def reset(self) -> None:
        self.release_all()

    def is_pressed(self, index: int) -> bool:
        """Check one key. The index is masked to 4 bits."""
        return self._keys[index & 0xF]

    @property
    def state(self) -> Tuple[bool, ...]:
        """Read-only snapshot of all 16 keys."""
        return tuple(self._keys)

    def pressed_keys(self) -> List[int]:
        """Indices of the keys currently held, lowest first."""
        return [i for i, down in enumerate(self._keys) if down]
