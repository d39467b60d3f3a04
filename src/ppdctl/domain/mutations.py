"""Slot mutations — the operations a caller may apply to a paperdoll.

A :class:`SlotMutation` is a value describing one change. ``apply``
performs it against a paperdoll using the assignment and cycling rules.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, model_validator

from ppdctl.domain.catalog import Catalog, Fragment, Slot
from ppdctl.domain.errors import IndexOutOfRangeError
from ppdctl.domain.paperdoll import (
    Paperdoll,
    clear_slot,
    require_fragment,
    set_fragment,
    slot_of,
)
from ppdctl.domain.selection import Direction, cycle_slot


class MutationKind(StrEnum):
    """Kinds of slot mutation. Values double as the textual step prefix."""

    USE_FRAGMENT = "use"
    USE_INDEX = "index"
    USE_EMPTY = "empty"
    USE_NEXT = "next"
    USE_PREV = "prev"


_NEEDS_VALUE = frozenset({MutationKind.USE_FRAGMENT, MutationKind.USE_INDEX})


class SlotMutation(BaseModel):
    """One change to one slot of a paperdoll.

    ``value`` is the fragment id for ``use`` and the candidate index for
    ``index``; it must be None for the other kinds.
    """

    model_config = {"frozen": True}

    kind: MutationKind
    slot_id: int
    value: int | None = None

    @model_validator(mode="after")
    def _check_value(self) -> SlotMutation:
        if self.kind in _NEEDS_VALUE and self.value is None:
            msg = f"Mutation {self.kind.value!r} needs a value"
            raise ValueError(msg)
        if self.kind not in _NEEDS_VALUE and self.value is not None:
            msg = f"Mutation {self.kind.value!r} takes no value"
            raise ValueError(msg)
        return self

    @classmethod
    def parse(cls, text: str) -> SlotMutation:
        """Parse ``kind:SLOT`` or ``kind:SLOT=VALUE``.

        Examples:
            >>> SlotMutation.parse("next:2").kind
            <MutationKind.USE_NEXT: 'next'>
            >>> SlotMutation.parse("use:1=4").value
            4
        """
        kind_text, sep, rest = text.partition(":")
        if not sep:
            msg = f"Expected 'kind:SLOT[=VALUE]', got {text!r}"
            raise ValueError(msg)
        try:
            kind = MutationKind(kind_text.strip().lower())
        except ValueError:
            choices = ", ".join(k.value for k in MutationKind)
            msg = f"Unknown mutation {kind_text!r}. Expected one of: {choices}"
            raise ValueError(msg) from None
        slot_text, sep, value_text = rest.partition("=")
        try:
            slot_id = int(slot_text)
            value = int(value_text) if sep else None
        except ValueError:
            msg = f"Slot and value must be integers in {text!r}"
            raise ValueError(msg) from None
        return cls(kind=kind, slot_id=slot_id, value=value)

    def describe(self) -> str:
        if self.value is None:
            return f"{self.kind.value}:{self.slot_id}"
        return f"{self.kind.value}:{self.slot_id}={self.value}"

    def apply(self, catalog: Catalog, paperdoll: Paperdoll) -> int | None:
        """Apply to *paperdoll* in place and return the slot's new fragment id."""
        match self.kind:
            case MutationKind.USE_FRAGMENT:
                assert self.value is not None
                set_fragment(catalog, paperdoll, self.slot_id, self.value)
                return self.value
            case MutationKind.USE_INDEX:
                assert self.value is not None
                slot = slot_of(catalog, paperdoll, self.slot_id)
                fragment = fragment_at_index(catalog, slot, self.value)
                set_fragment(catalog, paperdoll, self.slot_id, fragment.id)
                return fragment.id
            case MutationKind.USE_EMPTY:
                clear_slot(catalog, paperdoll, self.slot_id)
                return None
            case MutationKind.USE_NEXT:
                return cycle_slot(catalog, paperdoll, self.slot_id, Direction.NEXT)
            case MutationKind.USE_PREV:
                return cycle_slot(catalog, paperdoll, self.slot_id, Direction.PREV)


def fragment_at_index(catalog: Catalog, slot: Slot, index: int) -> Fragment:
    """The *index*-th candidate of *slot*.

    Raises:
        IndexOutOfRangeError: If *index* is outside the candidate list.
        NotFoundError: If the candidate id is not in the catalog.
    """
    if not 0 <= index < len(slot.candidates):
        raise IndexOutOfRangeError(
            f"Index out of range: '{index}' in candidates of slot {slot.id}.",
            slot_id=slot.id,
            index=index,
        )
    return require_fragment(catalog, slot.candidates[index])
