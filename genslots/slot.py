"""
Single storage cell of a SlotMap.

States:
    Empty     — generation == 0, no value
    Occupied  — generation > 0, holds the value stored at that generation

Transitions:
    Empty    -> Occupied   store(generation, value)
    Occupied -> Empty      take(generation), only on a generation match

get never transitions. Reads and takes against an empty slot or with
the wrong generation return ABSENT.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .errors import InvalidArgument, SlotNotEmpty


V = TypeVar("V")

EMPTY_GENERATION = 0


class _Absent:
    """Marker for 'no value', distinct from a stored None."""

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Any = _Absent()


@dataclass
class Slot(Generic[V]):
    generation: int = EMPTY_GENERATION
    value: Optional[V] = None

    @property
    def is_empty(self) -> bool:
        return self.generation == EMPTY_GENERATION

    def matches(self, generation: int) -> bool:
        """True iff the slot is occupied and was filled at `generation`."""
        return not self.is_empty and self.generation == generation

    def store(self, generation: int, value: V) -> None:
        """
        Fill an empty slot.

        Raises:
            SlotNotEmpty: If the slot is already occupied
            InvalidArgument: If generation is not positive
        """
        if not self.is_empty:
            raise SlotNotEmpty(
                f"slot holds generation {self.generation}, cannot store generation {generation}"
            )
        if generation <= EMPTY_GENERATION:
            raise InvalidArgument(f"generation must be positive, got {generation}")
        self.generation = generation
        self.value = value

    def get(self, generation: int) -> V:
        if self.matches(generation):
            return self.value
        return ABSENT

    def replace(self, generation: int, value: V) -> bool:
        """Overwrite the value in place, keeping the generation."""
        if not self.matches(generation):
            return False
        self.value = value
        return True

    def take(self, generation: int) -> V:
        """Empty the slot and hand back its value, if generation matches."""
        if not self.matches(generation):
            return ABSENT
        value = self.value
        self.generation = EMPTY_GENERATION
        self.value = None
        return value
