"""PaperdollStore — live paperdoll instances and their rendered textures.

The store is the only owner of mutable paperdoll state. Every mutation is
applied to a draft copy, rendered, and committed together with the new
texture, so a failed call leaves both the instance and its cached image
exactly as they were.

INVARIANT: A cached texture is either in sync with its paperdoll's
current selection or absent.
INVARIANT: Access is one logical writer at a time. Only id allocation is
safe to share across threads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ppdctl.domain.errors import NotFoundError, PaperdollError, RenderError
from ppdctl.domain.ids import IdAllocator, PaperdollId
from ppdctl.domain.mutations import MutationKind, SlotMutation
from ppdctl.domain.paperdoll import (
    Paperdoll,
    create_paperdoll,
    doll_slots,
    get_fragment_for_slot,
    require_doll,
    require_slot,
)
from ppdctl.services.base import BaseService
from ppdctl.services.result import ServiceResult

if TYPE_CHECKING:
    from ppdctl.domain.catalog import Catalog, Doll, Fragment, RasterImage, Slot
    from ppdctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class PaperdollStore(BaseService):
    """Creates, mutates, and removes paperdolls built from a catalog.

    Parameters:
        catalog: Template provider and renderer.
        allocator: Id source. A fresh allocator starting at 1 by default.
        plugin_manager: Optional lifecycle hook dispatcher.
        retain_on_render_failure: Keep the previous texture when a render
            fails (default). When False the cached texture is dropped.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        allocator: IdAllocator | None = None,
        plugin_manager: PluginManager | None = None,
        retain_on_render_failure: bool = True,
    ) -> None:
        super().__init__(plugin_manager)
        self._catalog = catalog
        self._allocator = allocator or IdAllocator()
        self._retain_on_render_failure = retain_on_render_failure
        self._paperdolls: dict[PaperdollId, Paperdoll] = {}
        self._textures: dict[PaperdollId, RasterImage] = {}

    def __contains__(self, paperdoll_id: object) -> bool:
        return paperdoll_id in self._paperdolls

    def __len__(self) -> int:
        return len(self._paperdolls)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_paperdoll(self, doll_id: int) -> ServiceResult:
        """Create a paperdoll from *doll_id* and render its first texture.

        Nothing is added to the store if the doll is unknown or the
        initial render fails.
        """
        op = "create_paperdoll"
        warnings: list[str] = []
        try:
            paperdoll = create_paperdoll(self._catalog, doll_id)
            paperdoll_id = self._allocator.next_id()
            image = self._render(paperdoll)
        except PaperdollError as exc:
            logger.debug("Create from doll %s failed: %s", doll_id, exc.message)
            return ServiceResult.failure(op, exc)

        self._paperdolls[paperdoll_id] = paperdoll
        self._textures[paperdoll_id] = image
        logger.debug("Created paperdoll %s from doll %s", paperdoll_id, doll_id)

        self._dispatch_event(
            "post_create",
            {
                "paperdoll_id": paperdoll_id,
                "doll_id": paperdoll.doll_id,
                "slot_map": dict(paperdoll.slot_map),
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=_paperdoll_data(paperdoll_id, paperdoll),
            warnings=warnings,
        )

    def remove_paperdoll(self, paperdoll_id: PaperdollId) -> ServiceResult:
        """Remove a paperdoll and its texture. Removing twice is not an error.

        ``data["removed"]`` tells whether the id was live; ``data["paperdoll"]``
        holds the removed selection, or None.
        """
        op = "remove_paperdoll"
        warnings: list[str] = []
        paperdoll = self._paperdolls.pop(paperdoll_id, None)
        self._textures.pop(paperdoll_id, None)

        if paperdoll is None:
            return ServiceResult(
                ok=True,
                op=op,
                data={"id": paperdoll_id, "removed": False, "paperdoll": None},
            )

        logger.debug("Removed paperdoll %s", paperdoll_id)
        self._dispatch_event(
            "post_remove",
            {"paperdoll_id": paperdoll_id, "doll_id": paperdoll.doll_id},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": paperdoll_id,
                "removed": True,
                "paperdoll": paperdoll.view().model_dump(),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def apply_mutation(self, paperdoll_id: PaperdollId, mutation: SlotMutation) -> ServiceResult:
        """Apply one slot mutation, re-render, and commit both atomically."""
        op = mutation.kind.name.lower()
        warnings: list[str] = []

        current = self._paperdolls.get(paperdoll_id)
        if current is None:
            return ServiceResult.failure(op, _missing(paperdoll_id))

        draft = current.copy()
        try:
            fragment_id = mutation.apply(self._catalog, draft)
            image = self._render(draft)
        except RenderError as exc:
            if not self._retain_on_render_failure:
                self._textures.pop(paperdoll_id, None)
            logger.warning(
                "Render failed for paperdoll %s after %s: %s",
                paperdoll_id,
                mutation.describe(),
                exc.message,
            )
            return ServiceResult.failure(op, exc)
        except PaperdollError as exc:
            logger.debug("Rejected %s on paperdoll %s: %s", mutation.describe(), paperdoll_id, exc)
            return ServiceResult.failure(op, exc)

        self._paperdolls[paperdoll_id] = draft
        self._textures[paperdoll_id] = image
        logger.debug("Applied %s to paperdoll %s", mutation.describe(), paperdoll_id)

        self._dispatch_event(
            "post_update",
            {
                "paperdoll_id": paperdoll_id,
                "slot_id": mutation.slot_id,
                "fragment_id": fragment_id,
                "op": op,
            },
            warnings,
        )
        data = _paperdoll_data(paperdoll_id, draft)
        data["slot_id"] = mutation.slot_id
        data["fragment_id"] = fragment_id
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def use_fragment(
        self, paperdoll_id: PaperdollId, slot_id: int, fragment_id: int
    ) -> ServiceResult:
        """Set *slot_id* to *fragment_id*, which must be one of its candidates."""
        mutation = SlotMutation(kind=MutationKind.USE_FRAGMENT, slot_id=slot_id, value=fragment_id)
        return self.apply_mutation(paperdoll_id, mutation)

    def use_index(self, paperdoll_id: PaperdollId, slot_id: int, index: int) -> ServiceResult:
        """Set *slot_id* to the *index*-th fragment of its candidates."""
        mutation = SlotMutation(kind=MutationKind.USE_INDEX, slot_id=slot_id, value=index)
        return self.apply_mutation(paperdoll_id, mutation)

    def use_empty(self, paperdoll_id: PaperdollId, slot_id: int) -> ServiceResult:
        """Empty *slot_id*. Fails for required slots."""
        mutation = SlotMutation(kind=MutationKind.USE_EMPTY, slot_id=slot_id)
        return self.apply_mutation(paperdoll_id, mutation)

    def use_next(self, paperdoll_id: PaperdollId, slot_id: int) -> ServiceResult:
        """Step *slot_id* to its next candidate.

        After the last candidate a required slot wraps to the first and an
        optional slot becomes empty. An empty slot moves to the first.
        """
        mutation = SlotMutation(kind=MutationKind.USE_NEXT, slot_id=slot_id)
        return self.apply_mutation(paperdoll_id, mutation)

    def use_prev(self, paperdoll_id: PaperdollId, slot_id: int) -> ServiceResult:
        """Step *slot_id* to its previous candidate.

        Before the first candidate a required slot wraps to the last and an
        optional slot becomes empty. An empty slot moves to the last.
        """
        mutation = SlotMutation(kind=MutationKind.USE_PREV, slot_id=slot_id)
        return self.apply_mutation(paperdoll_id, mutation)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_paperdoll(self, paperdoll_id: PaperdollId) -> ServiceResult:
        op = "get_paperdoll"
        paperdoll = self._paperdolls.get(paperdoll_id)
        if paperdoll is None:
            return ServiceResult.failure(op, _missing(paperdoll_id))
        return ServiceResult(ok=True, op=op, data=_paperdoll_data(paperdoll_id, paperdoll))

    def get_dolls(self) -> ServiceResult:
        """List every doll in the catalog."""
        items = [_doll_summary(doll) for doll in self._catalog.dolls()]
        return ServiceResult(ok=True, op="list_dolls", data={"items": items, "count": len(items)})

    def get_doll_slots(self, doll_id: int) -> ServiceResult:
        """List the slots of a doll, without any paperdoll selection."""
        op = "list_slots"
        try:
            doll = require_doll(self._catalog, doll_id)
        except PaperdollError as exc:
            return ServiceResult.failure(op, exc)
        items = [_slot_summary(slot) for slot in doll_slots(self._catalog, doll)]
        return ServiceResult(ok=True, op=op, data={"doll_id": doll.id, "items": items})

    def get_slots(self, paperdoll_id: PaperdollId) -> ServiceResult:
        """List the slots of a paperdoll's doll with the current selection."""
        op = "list_slots"
        paperdoll = self._paperdolls.get(paperdoll_id)
        if paperdoll is None:
            return ServiceResult.failure(op, _missing(paperdoll_id))
        try:
            doll = require_doll(self._catalog, paperdoll.doll_id)
        except PaperdollError as exc:
            return ServiceResult.failure(op, exc)

        items: list[dict[str, Any]] = []
        for slot in doll_slots(self._catalog, doll):
            summary = _slot_summary(slot)
            summary["fragment_id"] = paperdoll.slot_map.get(slot.id)
            items.append(summary)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": paperdoll_id, "doll_id": doll.id, "items": items},
        )

    def get_fragments_by_slot(self, slot_id: int) -> ServiceResult:
        """List the candidate fragments of a slot in cycling order."""
        op = "list_fragments"
        try:
            slot = require_slot(self._catalog, slot_id)
        except PaperdollError as exc:
            return ServiceResult.failure(op, exc)
        items: list[dict[str, Any]] = []
        for index, fragment_id in enumerate(slot.candidates):
            fragment = self._catalog.lookup_fragment(fragment_id)
            if fragment is None:
                continue
            summary = _fragment_summary(fragment)
            summary["index"] = index
            items.append(summary)
        return ServiceResult(ok=True, op=op, data={"slot_id": slot.id, "items": items})

    def get_slot_fragment(self, paperdoll_id: PaperdollId, slot_id: int) -> ServiceResult:
        """The fragment assigned to a slot. ``data["fragment"]`` is None when empty."""
        op = "get_slot_fragment"
        paperdoll = self._paperdolls.get(paperdoll_id)
        if paperdoll is None:
            return ServiceResult.failure(op, _missing(paperdoll_id))
        fragment = get_fragment_for_slot(self._catalog, paperdoll, slot_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": paperdoll_id,
                "slot_id": slot_id,
                "fragment": _fragment_summary(fragment) if fragment else None,
            },
        )

    # ------------------------------------------------------------------
    # Textures
    # ------------------------------------------------------------------

    def peek_texture(self, paperdoll_id: PaperdollId) -> RasterImage | None:
        """The cached texture, still owned by the store."""
        return self._textures.get(paperdoll_id)

    def take_texture(self, paperdoll_id: PaperdollId) -> RasterImage | None:
        """Hand the cached texture to the caller and forget it.

        Later peeks return None until the next successful mutation.
        """
        return self._textures.pop(paperdoll_id, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _render(self, paperdoll: Paperdoll) -> RasterImage:
        try:
            return self._catalog.render(paperdoll.view())
        except RenderError:
            raise
        except Exception as exc:
            logger.debug("Catalog render raised", exc_info=True)
            raise RenderError(
                f"Could not render doll {paperdoll.doll_id}: {exc}",
                doll_id=paperdoll.doll_id,
            ) from exc


def _missing(paperdoll_id: PaperdollId) -> NotFoundError:
    return NotFoundError(
        f"Paperdoll with id '{paperdoll_id}' not found.", paperdoll_id=paperdoll_id
    )


def _paperdoll_data(paperdoll_id: PaperdollId, paperdoll: Paperdoll) -> dict[str, Any]:
    return {
        "id": paperdoll_id,
        "doll_id": paperdoll.doll_id,
        "slot_map": dict(paperdoll.slot_map),
    }


def _doll_summary(doll: Doll) -> dict[str, Any]:
    summary = doll.model_dump(exclude={"image"})
    summary["slots"] = list(doll.slots)
    return summary


def _slot_summary(slot: Slot) -> dict[str, Any]:
    summary = slot.model_dump()
    summary["candidates"] = list(slot.candidates)
    summary["position"] = list(slot.position)
    return summary


def _fragment_summary(fragment: Fragment) -> dict[str, Any]:
    return fragment.model_dump(exclude={"image"})
