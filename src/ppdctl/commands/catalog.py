"""Commands: browse the catalog's dolls, slots, and fragments."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ppdctl.commands._base import PpdCommand

if TYPE_CHECKING:
    from ppdctl.commands._context import AppContext


@click.command(
    cls=PpdCommand,
    examples=(
        ("dolls", "Table of the dolls in the configured catalog."),
        ("--catalog art/catalog.toml dolls", "Same, reading an explicit catalog file."),
        ("--json dolls", "Doll definitions as JSON, without images."),
    ),
)
@click.pass_obj
def dolls(app: AppContext) -> None:
    """List every doll in the catalog."""
    app.emit(app.store.get_dolls())


@click.command(
    cls=PpdCommand,
    examples=(
        ("slots 0", "Slots of doll 0 with their candidates."),
        ("-v slots 0", "Same, adding each slot's z order and position."),
    ),
)
@click.argument("doll_id", type=int)
@click.pass_obj
def slots(app: AppContext, doll_id: int) -> None:
    """List the slots of a doll and their candidate fragments."""
    app.emit(app.store.get_doll_slots(doll_id))


@click.command(
    cls=PpdCommand,
    examples=(
        ("fragments 1", "Candidates of slot 1 in cycling order."),
        ("-q fragments 1", "Only the fragment ids, one per line."),
    ),
)
@click.argument("slot_id", type=int)
@click.pass_obj
def fragments(app: AppContext, slot_id: int) -> None:
    """List the candidate fragments of a slot in cycling order."""
    app.emit(app.store.get_fragments_by_slot(slot_id))
