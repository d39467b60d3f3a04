"""MemoryCatalog — dict-backed catalog with Pillow compositing.

Rendering stacks the fragment of every filled slot onto the doll's
canvas in ascending slot ``z`` (doll order breaks ties), each placed at
its slot's position.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TypeVar

from PIL import Image

from ppdctl.domain.catalog import Doll, Fragment, PaperdollView, RasterImage, Slot
from ppdctl.domain.errors import RenderError
from ppdctl.infrastructure.images import from_pil, to_pil

logger = logging.getLogger(__name__)

_T = TypeVar("_T", Doll, Slot, Fragment)


class MemoryCatalog:
    """An in-memory catalog of dolls, slots, and fragments."""

    def __init__(
        self,
        dolls: Iterable[Doll] = (),
        slots: Iterable[Slot] = (),
        fragments: Iterable[Fragment] = (),
    ) -> None:
        self._dolls = _index(dolls, "doll")
        self._slots = _index(slots, "slot")
        self._fragments = _index(fragments, "fragment")

    def __repr__(self) -> str:
        return (
            f"MemoryCatalog(dolls={len(self._dolls)}, slots={len(self._slots)}, "
            f"fragments={len(self._fragments)})"
        )

    def lookup_doll(self, doll_id: int) -> Doll | None:
        return self._dolls.get(doll_id)

    def lookup_slot(self, slot_id: int) -> Slot | None:
        return self._slots.get(slot_id)

    def lookup_fragment(self, fragment_id: int) -> Fragment | None:
        return self._fragments.get(fragment_id)

    def dolls(self) -> Iterator[Doll]:
        return iter(self._dolls.values())

    def render(self, view: PaperdollView) -> RasterImage:
        """Composite *view* into one RGBA image.

        Raises:
            RenderError: If the doll, a slot, or an assigned fragment is
                missing, or a layer does not fit on the canvas.
        """
        doll = self._dolls.get(view.doll_id)
        if doll is None:
            raise RenderError(f"Doll with id '{view.doll_id}' not found.", doll_id=view.doll_id)

        if doll.image is not None:
            canvas = to_pil(doll.image)
        else:
            canvas = Image.new("RGBA", (doll.width, doll.height), (0, 0, 0, 0))

        for slot in self._layer_order(doll):
            fragment_id = view.slot_map.get(slot.id)
            if fragment_id is None:
                continue
            fragment = self._fragments.get(fragment_id)
            if fragment is None:
                raise RenderError(
                    f"Fragment with id '{fragment_id}' not found.",
                    slot_id=slot.id,
                    fragment_id=fragment_id,
                )
            if fragment.image is None:
                continue
            try:
                canvas.alpha_composite(to_pil(fragment.image), dest=slot.position)
            except ValueError as exc:
                raise RenderError(
                    f"Fragment {fragment_id} does not fit slot {slot.id}: {exc}",
                    slot_id=slot.id,
                    fragment_id=fragment_id,
                ) from exc

        return from_pil(canvas)

    def _layer_order(self, doll: Doll) -> list[Slot]:
        slots = [self._slots[slot_id] for slot_id in doll.slots if slot_id in self._slots]
        return sorted(slots, key=lambda slot: slot.z)


def _index(items: Iterable[_T], kind: str) -> dict[int, _T]:
    index: dict[int, _T] = {}
    for item in items:
        if item.id in index:
            msg = f"Duplicate {kind} id: {item.id}"
            raise ValueError(msg)
        index[item.id] = item
    return index
