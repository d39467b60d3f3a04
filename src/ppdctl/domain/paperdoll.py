"""Paperdoll instances and validated slot assignment.

A paperdoll maps slot ids to fragment ids. A slot with no entry is empty.

INVARIANT: Every mapped slot belongs to the paperdoll's doll and every
mapped fragment is one of that slot's candidates.
INVARIANT: Required slots are never emptied, and are filled with their
first candidate at creation (unless they have no candidates at all).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ppdctl.domain.catalog import Catalog, Doll, Fragment, PaperdollView, Slot
from ppdctl.domain.errors import (
    InvalidAssignmentError,
    NotFoundError,
    RequiredSlotViolationError,
)


@dataclass
class Paperdoll:
    """Selection state of one live paperdoll."""

    doll_id: int
    slot_map: dict[int, int] = field(default_factory=dict)

    def view(self) -> PaperdollView:
        """Immutable snapshot for rendering and reporting."""
        return PaperdollView(doll_id=self.doll_id, slot_map=dict(self.slot_map))

    def copy(self) -> Paperdoll:
        return Paperdoll(doll_id=self.doll_id, slot_map=dict(self.slot_map))


# --- Catalog lookups that fail loudly ---


def require_doll(catalog: Catalog, doll_id: int) -> Doll:
    doll = catalog.lookup_doll(doll_id)
    if doll is None:
        raise NotFoundError(f"Doll with id '{doll_id}' not found.", doll_id=doll_id)
    return doll


def require_slot(catalog: Catalog, slot_id: int) -> Slot:
    slot = catalog.lookup_slot(slot_id)
    if slot is None:
        raise NotFoundError(f"Slot with id '{slot_id}' not found.", slot_id=slot_id)
    return slot


def require_fragment(catalog: Catalog, fragment_id: int) -> Fragment:
    fragment = catalog.lookup_fragment(fragment_id)
    if fragment is None:
        raise NotFoundError(
            f"Fragment with id '{fragment_id}' not found.", fragment_id=fragment_id
        )
    return fragment


def slot_of(catalog: Catalog, paperdoll: Paperdoll, slot_id: int) -> Slot:
    """Resolve *slot_id* and check it belongs to the paperdoll's doll."""
    slot = require_slot(catalog, slot_id)
    doll = require_doll(catalog, paperdoll.doll_id)
    if slot_id not in doll.slots:
        raise NotFoundError(
            f"Slot {slot_id} does not belong to doll {doll.id}.",
            slot_id=slot_id,
            doll_id=doll.id,
        )
    return slot


def doll_slots(catalog: Catalog, doll: Doll) -> list[Slot]:
    """Slots of *doll* in doll order, skipping ids the catalog cannot resolve."""
    slots: list[Slot] = []
    for slot_id in doll.slots:
        slot = catalog.lookup_slot(slot_id)
        if slot is not None:
            slots.append(slot)
    return slots


# --- Instance operations ---


def create_paperdoll(catalog: Catalog, doll_id: int) -> Paperdoll:
    """Build a paperdoll for *doll_id* with every required slot filled.

    Required slots take their first candidate. Optional slots, and
    required slots without candidates, start empty.

    Raises:
        NotFoundError: If the doll does not exist.
    """
    doll = require_doll(catalog, doll_id)
    paperdoll = Paperdoll(doll_id=doll.id)
    for slot in doll_slots(catalog, doll):
        if slot.required and slot.candidates:
            paperdoll.slot_map[slot.id] = slot.candidates[0]
    return paperdoll


def get_fragment_for_slot(catalog: Catalog, paperdoll: Paperdoll, slot_id: int) -> Fragment | None:
    """The fragment assigned to *slot_id*, or None if empty or unknown."""
    fragment_id = paperdoll.slot_map.get(slot_id)
    if fragment_id is None:
        return None
    return catalog.lookup_fragment(fragment_id)


def set_fragment(catalog: Catalog, paperdoll: Paperdoll, slot_id: int, fragment_id: int) -> None:
    """Assign *fragment_id* to *slot_id*.

    Raises:
        NotFoundError: If the slot is unknown or not part of the doll.
        InvalidAssignmentError: If the fragment is not a candidate of the slot.
    """
    slot = slot_of(catalog, paperdoll, slot_id)
    if fragment_id not in slot.candidates:
        raise InvalidAssignmentError(
            f"Slot {slot_id} does not accept fragment {fragment_id} as a candidate.",
            slot_id=slot_id,
            fragment_id=fragment_id,
        )
    paperdoll.slot_map[slot_id] = fragment_id


def clear_slot(catalog: Catalog, paperdoll: Paperdoll, slot_id: int) -> None:
    """Empty *slot_id*.

    Raises:
        NotFoundError: If the slot is unknown or not part of the doll.
        RequiredSlotViolationError: If the slot is required.
    """
    slot = slot_of(catalog, paperdoll, slot_id)
    if slot.required:
        raise RequiredSlotViolationError(f"Slot {slot_id} cannot be empty.", slot_id=slot_id)
    paperdoll.slot_map.pop(slot_id, None)
