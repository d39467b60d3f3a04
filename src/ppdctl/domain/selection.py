"""Next/previous cycling over a slot's candidate list.

Positions live in the integers modulo the candidate count. Optional
slots get one extra "empty" position: after the last candidate when
stepping forward, before the first when stepping back. Required slots
wrap straight around and never expose the empty position.
"""

from __future__ import annotations

from enum import StrEnum

from ppdctl.domain.catalog import Catalog, Slot
from ppdctl.domain.errors import InconsistentStateError, NotACandidateError
from ppdctl.domain.paperdoll import Paperdoll, clear_slot, set_fragment, slot_of


class Direction(StrEnum):
    NEXT = "next"
    PREV = "prev"


def candidate_position(slot: Slot, fragment_id: int) -> int:
    """Index of *fragment_id* within the slot's candidates.

    Raises:
        NotACandidateError: If the fragment is not in the list.
    """
    try:
        return slot.candidates.index(fragment_id)
    except ValueError:
        raise NotACandidateError(
            f"Fragment {fragment_id} is not a candidate for slot {slot.id}.",
            slot_id=slot.id,
            fragment_id=fragment_id,
        ) from None


def step_candidate(slot: Slot, current: int | None, direction: Direction) -> int | None:
    """Return the fragment id one step from *current*, or None for empty.

    *current* is the assigned fragment id, or None when the slot is empty.

    Raises:
        InconsistentStateError: If the slot is required but *current* is None.
        NotACandidateError: If *current* is not one of the slot's candidates.
    """
    count = len(slot.candidates)

    if current is None:
        if slot.required:
            raise InconsistentStateError(
                f"Slot {slot.id} has no valid fragment set.", slot_id=slot.id
            )
        if count == 0:
            return None
        return slot.candidates[0] if direction is Direction.NEXT else slot.candidates[count - 1]

    position = candidate_position(slot, current)

    if direction is Direction.NEXT:
        at_edge = position == count - 1
        target = (position + 1) % count
    else:
        at_edge = position == 0
        target = (position + count - 1) % count

    if at_edge and not slot.required:
        return None
    return slot.candidates[target]


def cycle_slot(
    catalog: Catalog,
    paperdoll: Paperdoll,
    slot_id: int,
    direction: Direction,
) -> int | None:
    """Move *slot_id* one step in *direction* and return the new fragment id.

    Raises:
        NotFoundError: If the slot is unknown or not part of the doll.
        InconsistentStateError: If a required slot is found empty.
        NotACandidateError: If the assigned fragment left the candidate list.
    """
    slot = slot_of(catalog, paperdoll, slot_id)
    selected = step_candidate(slot, paperdoll.slot_map.get(slot_id), direction)
    if selected is None:
        clear_slot(catalog, paperdoll, slot_id)
    else:
        set_fragment(catalog, paperdoll, slot_id, selected)
    return selected
