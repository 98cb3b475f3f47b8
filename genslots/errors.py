"""
Error taxonomy for genslots.

Every fallible operation reports failure by raising a SlotMapError
carrying an ErrorKind. Nothing aborts the interpreter and nothing
retries internally; the caller decides what to do next.

Error kinds:
    INDEX_OUT_OF_BOUNDS     — Key built with the sentinel index via Key.new
    MAX_GENERATION_REACHED  — Generation counter exhausted, instance is spent
    SLOT_NOT_EMPTY          — Free list points at an occupied slot (a bug)
    NO_FREE_SLOTS           — Capacity exhausted
    INVALID_ARGUMENT        — Construction parameters out of range
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """
    The failure kinds of the slot map.

    Recoverability:
    - INDEX_OUT_OF_BOUNDS: use Key.new_special for sentinel keys
    - MAX_GENERATION_REACHED: fatal for the instance, replace it
    - SLOT_NOT_EMPTY: implementation bug, never expected
    - NO_FREE_SLOTS: retry after freeing capacity
    - INVALID_ARGUMENT: fix the parameters
    """
    INDEX_OUT_OF_BOUNDS = "index_out_of_bounds"
    MAX_GENERATION_REACHED = "max_generation_reached"
    SLOT_NOT_EMPTY = "slot_not_empty"
    NO_FREE_SLOTS = "no_free_slots"
    INVALID_ARGUMENT = "invalid_argument"


class SlotMapError(Exception):
    """Base class for every error raised by genslots."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, reason: str, kind: ErrorKind | None = None):
        if kind is not None:
            self.kind = kind
        self.reason = reason
        super().__init__(f"[{self.kind.value}] {reason}")


class IndexOutOfBounds(SlotMapError, IndexError):
    """Raised when a key is built with the reserved sentinel index."""
    kind = ErrorKind.INDEX_OUT_OF_BOUNDS


class MaxGenerationReached(SlotMapError):
    """Raised when the generation counter cannot be incremented."""
    kind = ErrorKind.MAX_GENERATION_REACHED


class SlotNotEmpty(SlotMapError):
    """Raised when a recycled index addresses an occupied slot."""
    kind = ErrorKind.SLOT_NOT_EMPTY


class NoFreeSlots(SlotMapError):
    """Raised when the map is full."""
    kind = ErrorKind.NO_FREE_SLOTS


class InvalidArgument(SlotMapError, ValueError):
    """Raised for out-of-range construction parameters."""
    kind = ErrorKind.INVALID_ARGUMENT
