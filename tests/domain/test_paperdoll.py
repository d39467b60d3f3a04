"""Tests for paperdoll creation and validated slot assignment."""

from __future__ import annotations

import pytest

from ppdctl.domain.errors import (
    ErrorCode,
    InvalidAssignmentError,
    NotFoundError,
    RequiredSlotViolationError,
)
from ppdctl.domain.paperdoll import (
    Paperdoll,
    clear_slot,
    create_paperdoll,
    doll_slots,
    get_fragment_for_slot,
    set_fragment,
)
from ppdctl.infrastructure.catalog import MemoryCatalog


class TestCreatePaperdoll:
    def test_required_slots_take_first_candidate(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        assert paperdoll.doll_id == 0
        assert paperdoll.slot_map == {1: 1}

    def test_optional_and_candidate_less_slots_start_empty(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 1)
        # slot 4 is the only required slot with candidates
        assert paperdoll.slot_map == {4: 5}

    def test_unknown_doll(self, catalog: MemoryCatalog) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            create_paperdoll(catalog, 99)
        assert exc_info.value.code is ErrorCode.NOT_FOUND
        assert exc_info.value.detail == {"doll_id": 99}


class TestGetFragmentForSlot:
    def test_assigned(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        fragment = get_fragment_for_slot(catalog, paperdoll, 1)
        assert fragment is not None
        assert fragment.desc == "F1"

    def test_empty_slot(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        assert get_fragment_for_slot(catalog, paperdoll, 2) is None

    def test_unknown_slot(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        assert get_fragment_for_slot(catalog, paperdoll, 99) is None


class TestSetFragment:
    def test_candidate_accepted(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        set_fragment(catalog, paperdoll, 2, 4)
        assert paperdoll.slot_map == {1: 1, 2: 4}

    def test_non_candidate_rejected_and_unchanged(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        with pytest.raises(InvalidAssignmentError, match="does not accept fragment 3"):
            set_fragment(catalog, paperdoll, 1, 3)
        assert paperdoll.slot_map == {1: 1}

    @pytest.mark.parametrize("fragment_id", [1, 2, 3, 4, 5, 99])
    def test_mapping_always_legal(self, catalog: MemoryCatalog, fragment_id: int) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        before = dict(paperdoll.slot_map)
        try:
            set_fragment(catalog, paperdoll, 2, fragment_id)
        except InvalidAssignmentError:
            assert paperdoll.slot_map == before
        else:
            assert paperdoll.slot_map[2] in catalog.lookup_slot(2).candidates

    def test_unknown_slot(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        with pytest.raises(NotFoundError, match="Slot with id '99' not found"):
            set_fragment(catalog, paperdoll, 99, 1)

    def test_slot_from_another_doll(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        with pytest.raises(NotFoundError, match="does not belong to doll 0"):
            set_fragment(catalog, paperdoll, 7, 1)
        assert 7 not in paperdoll.slot_map


class TestClearSlot:
    def test_optional_slot_cleared(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        set_fragment(catalog, paperdoll, 2, 3)
        clear_slot(catalog, paperdoll, 2)
        assert 2 not in paperdoll.slot_map

    def test_clearing_empty_slot_is_fine(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        clear_slot(catalog, paperdoll, 2)
        assert paperdoll.slot_map == {1: 1}

    def test_required_slot_protected(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        with pytest.raises(RequiredSlotViolationError) as exc_info:
            clear_slot(catalog, paperdoll, 1)
        assert exc_info.value.code is ErrorCode.REQUIRED_SLOT_VIOLATION
        assert paperdoll.slot_map == {1: 1}

    def test_unknown_slot(self, catalog: MemoryCatalog) -> None:
        paperdoll = create_paperdoll(catalog, 0)
        with pytest.raises(NotFoundError):
            clear_slot(catalog, paperdoll, 42)


class TestPaperdoll:
    def test_copy_is_independent(self) -> None:
        original = Paperdoll(doll_id=0, slot_map={1: 1})
        clone = original.copy()
        clone.slot_map[2] = 3
        assert original.slot_map == {1: 1}

    def test_view_is_a_snapshot(self) -> None:
        paperdoll = Paperdoll(doll_id=0, slot_map={1: 1})
        view = paperdoll.view()
        paperdoll.slot_map[1] = 2
        assert view.slot_map == {1: 1}


def test_doll_slots_skip_unknown_ids() -> None:
    from ppdctl.domain.catalog import Doll, Slot

    catalog = MemoryCatalog(dolls=[Doll(id=0, slots=(1, 2))], slots=[Slot(id=2)])
    assert [slot.id for slot in doll_slots(catalog, catalog.lookup_doll(0))] == [2]
