"""Pluggy hook specifications for paperdoll lifecycle events.

Hooks are called synchronously by the store after a change is committed.
A host uses them to learn that a paperdoll's texture needs refreshing.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("ppdctl")


class PpdctlHookSpec:
    """Hook specifications for the ppdctl plugin system."""

    @hookspec
    def post_create(self, paperdoll_id: int, doll_id: int, slot_map: dict[int, int]) -> None:
        """Called after a paperdoll is created and first rendered."""

    @hookspec
    def post_update(
        self,
        paperdoll_id: int,
        slot_id: int,
        fragment_id: int | None,
        op: str,
    ) -> None:
        """Called after a slot mutation is committed. ``fragment_id`` is None for empty."""

    @hookspec
    def post_remove(self, paperdoll_id: int, doll_id: int) -> None:
        """Called after a paperdoll is removed."""
