"""
Tests for the genslots error taxonomy.
"""

import pytest

from genslots.errors import (
    ErrorKind,
    IndexOutOfBounds,
    InvalidArgument,
    MaxGenerationReached,
    NoFreeSlots,
    SlotMapError,
    SlotNotEmpty,
)


class TestErrorTaxonomy:
    """Every error carries its kind and reason."""

    @pytest.mark.parametrize("error_cls,kind", [
        (IndexOutOfBounds, ErrorKind.INDEX_OUT_OF_BOUNDS),
        (MaxGenerationReached, ErrorKind.MAX_GENERATION_REACHED),
        (SlotNotEmpty, ErrorKind.SLOT_NOT_EMPTY),
        (NoFreeSlots, ErrorKind.NO_FREE_SLOTS),
        (InvalidArgument, ErrorKind.INVALID_ARGUMENT),
    ])
    def test_kind_and_message(self, error_cls, kind):
        error = error_cls("something broke")
        assert isinstance(error, SlotMapError)
        assert error.kind is kind
        assert error.reason == "something broke"
        assert str(error) == f"[{kind.value}] something broke"

    def test_builtin_bases(self):
        """Generic handlers catch the argument errors."""
        assert isinstance(InvalidArgument("x"), ValueError)
        assert isinstance(IndexOutOfBounds("x"), IndexError)

    def test_explicit_kind_overrides_default(self):
        error = SlotMapError("custom", ErrorKind.NO_FREE_SLOTS)
        assert error.kind is ErrorKind.NO_FREE_SLOTS
