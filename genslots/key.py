"""
Versioned handles for SlotMap.

A Key names a slot (index) and the moment the slot was filled
(generation). Externally it travels as one 64-bit unsigned integer:

    bits  0..31   index
    bits 32..63   generation

Two keys are equal iff their packed integers are equal.

A Key carries no tag identifying the SlotMap that minted it. The type
parameter only helps static checkers; presenting a key to a different
SlotMap instance is not detected and resolves whatever happens to live
at the same index and generation there.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import IndexOutOfBounds, InvalidArgument


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

U32_MAX = 0xFFFF_FFFF

# Reserved index for keys that never address a slot
SENTINEL_INDEX = U32_MAX

INDEX_BITS = 32
INDEX_MASK = U32_MAX
KEY_MAX = (1 << 64) - 1


V = TypeVar("V")


def _check_u32(name: str, value: int) -> None:
    # bool is an int subclass but never a meaningful index or generation
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an int, got {type(value).__name__}")
    if not (0 <= value <= U32_MAX):
        raise InvalidArgument(f"{name} must be in [0, {U32_MAX}], got {value}")


@dataclass(frozen=True, eq=False)
class Key(Generic[V]):
    """
    An opaque, immutable handle into a SlotMap.

    Keys are produced by SlotMap.add, SlotMap.add_with and
    SlotMap.get_unique_key. They may be copied freely; a copy behaves
    exactly like the original.
    """
    index: int
    generation: int

    def __post_init__(self):
        _check_u32("index", self.index)
        _check_u32("generation", self.generation)

    @classmethod
    def new(cls, index: int, generation: int) -> Key[V]:
        """
        Build an addressable key.

        Raises:
            IndexOutOfBounds: If index is the reserved sentinel
        """
        if index == SENTINEL_INDEX:
            raise IndexOutOfBounds(
                f"index {index} is reserved, use Key.new_special for unique keys"
            )
        return cls(index, generation)

    @classmethod
    def new_special(cls, generation: int) -> Key[V]:
        """Build a key whose index is the sentinel. It never resolves."""
        return cls(SENTINEL_INDEX, generation)

    @classmethod
    def from_int(cls, value: int) -> Key[V]:
        """Unpack a key from its 64-bit integer form."""
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidArgument(f"packed key must be an int, got {type(value).__name__}")
        if not (0 <= value <= KEY_MAX):
            raise InvalidArgument(f"packed key must be in [0, {KEY_MAX}], got {value}")
        return cls(value & INDEX_MASK, value >> INDEX_BITS)

    def to_int(self) -> int:
        """Pack the key into a 64-bit unsigned integer."""
        return (self.generation << INDEX_BITS) | self.index

    @property
    def is_special(self) -> bool:
        return self.index == SENTINEL_INDEX

    def __int__(self) -> int:
        return self.to_int()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.to_int() == other.to_int()

    def __hash__(self) -> int:
        return hash(self.to_int())

    def __repr__(self) -> str:
        return f"Key <gen: {self.generation}, index: {self.index}>"

    __str__ = __repr__
