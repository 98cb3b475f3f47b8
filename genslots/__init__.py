# genslots
# Generational slot map with versioned keys

"""
Core invariant: a key resolves only against the slot and generation that
produced it. A key to a removed value never reaches the value that later
reuses its slot.
"""

import logging

from .errors import (
    ErrorKind,
    IndexOutOfBounds,
    InvalidArgument,
    MaxGenerationReached,
    NoFreeSlots,
    SlotMapError,
    SlotNotEmpty,
)
from .key import KEY_MAX, SENTINEL_INDEX, U32_MAX, Key
from .slotmap import MAX_GENERATION, MAX_SLOTS, SlotMap

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "IndexOutOfBounds",
    "InvalidArgument",
    "KEY_MAX",
    "Key",
    "MAX_GENERATION",
    "MAX_SLOTS",
    "MaxGenerationReached",
    "NoFreeSlots",
    "SENTINEL_INDEX",
    "SlotMap",
    "SlotMapError",
    "SlotNotEmpty",
    "U32_MAX",
]
