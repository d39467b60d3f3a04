"""Command: build a paperdoll, apply slot steps, and export the image."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from ppdctl.commands._base import PpdCommand
from ppdctl.domain.mutations import SlotMutation

if TYPE_CHECKING:
    from ppdctl.commands._context import AppContext


def _parse_steps(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> list[SlotMutation]:
    steps: list[SlotMutation] = []
    for value in values:
        try:
            steps.append(SlotMutation.parse(value))
        except ValueError as exc:
            raise click.BadParameter(str(exc)) from exc
    return steps


@click.command(
    cls=PpdCommand,
    examples=(
        ("compose 0", "Create from doll 0 with required slots on their first candidate."),
        ("compose 0 -s next:1 -s next:2", "Step slots 1 and 2 forward once each."),
        (
            "compose 0 -s use:1=11 -s empty:2 -o out/doll.png",
            "Put fragment 11 in slot 1, empty slot 2, and save the image.",
        ),
        ("compose 0 -s index:2=0 -s prev:2", "First candidate of slot 2, then step back."),
        ("--json compose 0 -s next:1", "The final selection as JSON."),
    ),
)
@click.argument("doll_id", type=int)
@click.option(
    "-s",
    "--step",
    "steps",
    multiple=True,
    callback=_parse_steps,
    metavar="KIND:SLOT[=VALUE]",
    help="Slot step, applied in order: use, index, empty, next, prev (repeatable).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the final image to this file (format from extension).",
)
@click.pass_obj
def compose(
    app: AppContext,
    doll_id: int,
    steps: list[SlotMutation],
    output: Path | None,
) -> None:
    """Create a paperdoll from DOLL_ID and apply each step in order.

    Stops at the first failing step and reports its error.
    """
    from ppdctl.domain.errors import RenderError
    from ppdctl.infrastructure.images import save_image
    from ppdctl.services.result import ServiceResult

    store = app.store
    created = store.create_paperdoll(doll_id)
    if not created.ok:
        app.emit(created)
        return

    paperdoll_id = created.data["id"]
    warnings = list(created.warnings)
    for step in steps:
        applied = store.apply_mutation(paperdoll_id, step)
        if not applied.ok:
            app.emit(applied)
            return
        warnings.extend(applied.warnings)

    data = dict(store.get_paperdoll(paperdoll_id).data)
    data["steps"] = [step.describe() for step in steps]

    if output is not None:
        image = store.take_texture(paperdoll_id)
        if image is None:
            error = RenderError(f"No image cached for paperdoll {paperdoll_id}.")
            app.emit(ServiceResult.failure("compose", error))
            return
        data["image"] = str(save_image(image, output))

    app.emit(ServiceResult(ok=True, op="compose", data=data, warnings=warnings))
