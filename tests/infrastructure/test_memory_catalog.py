"""Tests for MemoryCatalog lookups and compositing."""

from __future__ import annotations

import pytest

from ppdctl.domain.catalog import Catalog, Doll, Fragment, PaperdollView, RasterImage, Slot
from ppdctl.domain.errors import RenderError
from ppdctl.infrastructure.catalog import MemoryCatalog
from tests.conftest import solid

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def _pixel(image: RasterImage, x: int, y: int) -> tuple[int, ...]:
    offset = (y * image.width + x) * 4
    return tuple(image.pixels[offset : offset + 4])


def _two_layer(lower_z: int, upper_z: int) -> MemoryCatalog:
    return MemoryCatalog(
        dolls=[Doll(id=0, width=2, height=2, slots=(1, 2))],
        slots=[
            Slot(id=1, z=lower_z, candidates=(1,)),
            Slot(id=2, z=upper_z, candidates=(2,)),
        ],
        fragments=[
            Fragment(id=1, image=solid(2, 2, RED)),
            Fragment(id=2, image=solid(2, 2, GREEN)),
        ],
    )


class TestLookups:
    def test_satisfies_protocol(self, catalog) -> None:
        assert isinstance(catalog, Catalog)

    def test_lookup_known_and_unknown(self, catalog) -> None:
        assert catalog.lookup_doll(0).desc == "Scenario"
        assert catalog.lookup_slot(2).desc == "Hat"
        assert catalog.lookup_fragment(5).desc == "A"
        assert catalog.lookup_doll(42) is None
        assert catalog.lookup_slot(42) is None
        assert catalog.lookup_fragment(42) is None

    def test_dolls_in_definition_order(self, catalog) -> None:
        assert [doll.id for doll in catalog.dolls()] == [0, 1]

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate slot id: 1"):
            MemoryCatalog(slots=[Slot(id=1), Slot(id=1)])


class TestRender:
    def test_empty_selection_is_transparent_canvas(self, catalog) -> None:
        image = catalog.render(PaperdollView(doll_id=0))
        assert image == RasterImage.blank(4, 4)

    def test_layers_placed_at_slot_position(self, catalog) -> None:
        image = catalog.render(PaperdollView(doll_id=0, slot_map={1: 1, 2: 3}))
        assert image.size == (4, 4)
        assert _pixel(image, 0, 0) == RED
        assert _pixel(image, 1, 1) == RED
        assert _pixel(image, 2, 2) == BLUE
        assert _pixel(image, 3, 3) == BLUE

    def test_higher_z_drawn_on_top(self) -> None:
        view = PaperdollView(doll_id=0, slot_map={1: 1, 2: 2})
        assert _pixel(_two_layer(0, 1).render(view), 0, 0) == GREEN
        assert _pixel(_two_layer(1, 0).render(view), 0, 0) == RED

    def test_doll_image_is_the_background(self) -> None:
        catalog = MemoryCatalog(
            dolls=[Doll(id=0, width=2, height=2, slots=(1,), image=solid(2, 2, BLUE))],
            slots=[Slot(id=1, position=(1, 0), candidates=(1,))],
            fragments=[Fragment(id=1, image=solid(1, 2, RED))],
        )
        image = catalog.render(PaperdollView(doll_id=0, slot_map={1: 1}))
        assert _pixel(image, 0, 0) == BLUE
        assert _pixel(image, 1, 0) == RED

    def test_fragment_without_image_is_skipped(self, catalog) -> None:
        image = catalog.render(PaperdollView(doll_id=1, slot_map={4: 5}))
        assert image == RasterImage.blank(4, 4)

    def test_unknown_doll(self, catalog) -> None:
        with pytest.raises(RenderError, match="Doll with id '9' not found"):
            catalog.render(PaperdollView(doll_id=9))

    def test_unknown_fragment(self, catalog) -> None:
        with pytest.raises(RenderError) as exc_info:
            catalog.render(PaperdollView(doll_id=0, slot_map={1: 99}))
        assert exc_info.value.detail == {"slot_id": 1, "fragment_id": 99}

    def test_negative_position_does_not_fit(self) -> None:
        catalog = MemoryCatalog(
            dolls=[Doll(id=0, width=2, height=2, slots=(1,))],
            slots=[Slot(id=1, position=(-1, 0), candidates=(1,))],
            fragments=[Fragment(id=1, image=solid(1, 1, RED))],
        )
        with pytest.raises(RenderError, match="does not fit slot 1"):
            catalog.render(PaperdollView(doll_id=0, slot_map={1: 1}))
