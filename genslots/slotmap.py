"""
Generational slot map.

SlotMap stores values in a list of Slots and hands out Keys in place of
raw indices. Each insertion stamps the slot with a fresh generation from
a monotonic counter; a Key resolves only while its generation matches
the slot's, so a key to a removed value never aliases whatever reuses
the slot afterwards.

Complexity:
    add, add_with, get, get_mut, set, remove, discard,
    get_unique_key, len   — O(1)
    items, keys, values   — O(n) in the number of slots

Freed indices go on a stack and are reused last-freed-first.

Not thread safe. Hosts sharing an instance across threads must
serialize every mutating call themselves.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Iterator, Optional, TypeVar

from .errors import (
    InvalidArgument,
    MaxGenerationReached,
    NoFreeSlots,
    SlotNotEmpty,
)
from .key import SENTINEL_INDEX, U32_MAX, Key
from .slot import Slot


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

MAX_GENERATION = U32_MAX

# Real indices stop one short of the sentinel
MAX_SLOTS = U32_MAX - 1

DEFAULT_INITIAL_SLOTS = 0


V = TypeVar("V")


def _check_count(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")


class SlotMap(Generic[V]):
    """
    A key-value store with O(1) access through versioned keys.

    Adding a value transfers it into the map. Keys are weak: the value
    behind a key may be removed at any time, after which the key simply
    stops resolving.

    Usage:
        slots = SlotMap(initial_slots=16, max_slots=1024)
        key = slots.add("payload")
        slots.get(key)       # "payload"
        slots.remove(key)    # "payload"
        slots.get(key)       # None

    Keys are not tagged with their SlotMap. A key minted by one instance
    will happily resolve against another instance that has an occupied
    slot with the same index and generation.
    """

    def __init__(
        self,
        initial_slots: int = DEFAULT_INITIAL_SLOTS,
        max_slots: int = MAX_SLOTS,
    ):
        """
        Raises:
            InvalidArgument: If initial_slots > max_slots, if max_slots
                reaches the sentinel index, or if either is negative
        """
        _check_count("initial_slots", initial_slots)
        _check_count("max_slots", max_slots)
        if initial_slots > max_slots:
            raise InvalidArgument(
                f"initial_slots ({initial_slots}) exceeds max_slots ({max_slots})"
            )
        if max_slots > MAX_SLOTS:
            raise InvalidArgument(
                f"max_slots must be at most {MAX_SLOTS}, got {max_slots}"
            )

        self._max_slots = max_slots
        self._generation = 0
        self._data: list[Slot[V]] = [Slot() for _ in range(initial_slots)]
        # Reversed so that index 0 is popped first
        self._openlist: list[int] = list(range(initial_slots - 1, -1, -1))
        # Empty slots held by add_with while its factory runs
        self._pending: set[int] = set()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def max_slots(self) -> int:
        return self._max_slots

    @property
    def generation(self) -> int:
        """The last generation minted. 0 until the first add."""
        return self._generation

    @property
    def slot_count(self) -> int:
        """Number of slots allocated so far, empty or not."""
        return len(self._data)

    @property
    def is_exhausted(self) -> bool:
        """True once no further keys can be minted."""
        return self._generation >= MAX_GENERATION

    def __len__(self) -> int:
        return len(self._data) - len(self._openlist) - len(self._pending)

    def __contains__(self, key: object) -> bool:
        return self._resolve(key) is not None

    def __repr__(self) -> str:
        return (
            f"SlotMap(len={len(self)}, slots={len(self._data)}, "
            f"max_slots={self._max_slots}, generation={self._generation})"
        )

    # -------------------------------------------------------------------------
    # Key minting
    # -------------------------------------------------------------------------

    def _next_generation(self) -> int:
        """
        Consume and return the next generation.

        The counter only moves on success, so an exhausted map stays at
        MAX_GENERATION. Exhaustion is logged once, when the last
        generation is handed out.

        Raises:
            MaxGenerationReached: If the counter is at MAX_GENERATION
        """
        if self._generation >= MAX_GENERATION:
            raise MaxGenerationReached(
                f"generation counter exhausted at {self._generation}"
            )
        self._generation += 1
        if self._generation == MAX_GENERATION:
            logger.warning(
                "SlotMap generation counter exhausted at %d; no more keys can be minted",
                self._generation,
            )
        return self._generation

    def _claim_index(self) -> int:
        """
        Pick the index the next value goes to, popping the free list or
        appending a fresh empty slot.

        Raises:
            SlotNotEmpty: If the free list addresses an occupied slot
            NoFreeSlots: If the map is at max_slots
        """
        if self._openlist:
            index = self._openlist.pop()
            slot = self._data[index]
            if not slot.is_empty:
                logger.error(
                    "Free list entry %d addresses occupied slot (generation %d)",
                    index,
                    slot.generation,
                )
                raise SlotNotEmpty(
                    f"free slot {index} is occupied by generation {slot.generation}"
                )
            return index

        if len(self._data) >= self._max_slots:
            logger.debug("SlotMap full at %d slots", self._max_slots)
            raise NoFreeSlots(f"all {self._max_slots} slots are occupied")

        self._data.append(Slot())
        return len(self._data) - 1

    def add(self, value: V) -> Key[V]:
        """
        Store a value and return its key.

        The generation is consumed before a slot is sought, so even a
        failed add burns one generation.

        Raises:
            MaxGenerationReached: If no more generations can be minted
            NoFreeSlots: If the map is at capacity
            SlotNotEmpty: If the free list is corrupt
        """
        generation = self._next_generation()
        index = self._claim_index()
        self._data[index].store(generation, value)
        return Key(index, generation)

    def add_with(self, factory: Callable[[Key[V]], V]) -> Key[V]:
        """
        Store the value built by `factory(key)` and return the key.

        The factory receives the key the value will live under, which
        lets a value hold its own handle. The factory may use the map
        itself; the claimed slot stays empty and uncounted until the
        factory returns. If the factory raises, the exception propagates
        and the index goes back on the free list; the generation stays
        consumed.
        """
        generation = self._next_generation()
        index = self._claim_index()
        key: Key[V] = Key(index, generation)
        self._pending.add(index)
        try:
            value = factory(key)
        except BaseException:
            self._openlist.append(index)
            raise
        finally:
            self._pending.discard(index)
        self._data[index].store(generation, value)
        return key

    def get_unique_key(self) -> Key[V]:
        """
        Mint a key that is distinct from every other key of this map and
        never resolves to a value.

        Raises:
            MaxGenerationReached: If no more generations can be minted
        """
        return Key.new_special(self._next_generation())

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def _resolve(self, key: Key[V]) -> Optional[Slot[V]]:
        """
        Return the slot key addresses, or None if the key does not resolve.

        Raises:
            InvalidArgument: If key is not a Key
        """
        if not isinstance(key, Key):
            raise InvalidArgument(f"expected a Key, got {type(key).__name__}")
        index = key.index
        if index == SENTINEL_INDEX or index >= len(self._data):
            return None
        slot = self._data[index]
        if not slot.matches(key.generation):
            return None
        return slot

    def get(self, key: Key[V], default: Optional[V] = None) -> Optional[V]:
        """Return the value for key, or default if the key does not resolve."""
        slot = self._resolve(key)
        if slot is None:
            return default
        return slot.value

    def get_mut(self, key: Key[V], default: Optional[V] = None) -> Optional[V]:
        """
        Return the stored object itself for in-place mutation.

        Python hands out references, so this is get with the intent made
        explicit at the call site. Use set to replace immutable values.
        """
        return self.get(key, default)

    def set(self, key: Key[V], value: V) -> bool:
        """Replace the value behind key. Returns False if key is stale."""
        slot = self._resolve(key)
        if slot is None:
            return False
        return slot.replace(key.generation, value)

    def remove(self, key: Key[V], default: Optional[V] = None) -> Optional[V]:
        """
        Remove and return the value for key.

        On a stale, empty or out-of-range key nothing changes and
        default is returned.
        """
        slot = self._resolve(key)
        if slot is None:
            return default
        self._openlist.append(key.index)
        return slot.take(key.generation)

    def discard(self, key: Key[V]) -> bool:
        """Drop the value for key. Returns True if something was removed."""
        slot = self._resolve(key)
        if slot is None:
            return False
        slot.take(key.generation)
        self._openlist.append(key.index)
        return True

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def items(self) -> Iterator[tuple[Key[V], V]]:
        """Yield (key, value) for every occupied slot, in index order."""
        for index, slot in enumerate(self._data):
            if not slot.is_empty:
                yield Key(index, slot.generation), slot.value

    def keys(self) -> Iterator[Key[V]]:
        for key, _ in self.items():
            yield key

    def values(self) -> Iterator[V]:
        for _, value in self.items():
            yield value

    def __iter__(self) -> Iterator[Key[V]]:
        return self.keys()
