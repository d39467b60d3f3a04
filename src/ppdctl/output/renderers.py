"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from ppdctl.output.console import EMPTY_MARKER, create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from ppdctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: ids for listings, ``slot=fragment`` pairs for selections."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id", "")) for item in items)

    slot_map = result.data.get("slot_map")
    if isinstance(slot_map, dict):
        return "\n".join(f"{slot}={fragment}" for slot, fragment in slot_map.items())

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="ppd.ok"), Text(f"  {result.op}", style="ppd.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}:", style="ppd.key")
    if value is None:
        v = Text(EMPTY_MARKER, style="ppd.empty")
    elif key == "id" or key.endswith("_id"):
        v = Text(str(value), style="ppd.id")
    else:
        v = Text(str(value))
    console.print(k, v)


def _ids(values: list[int]) -> str:
    return ", ".join(str(v) for v in values) or EMPTY_MARKER


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="ppd.error"),
        Text(f"  {result.op}", style="ppd.op"),
        Text(f"  [{err.code}]" if err else ""),
        Text(f" {msg}"),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Listing renderers ─────────────────────────────────────────────────


def _render_dolls(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="ppd.id", no_wrap=True)
    table.add_column("Description", style="ppd.desc")
    table.add_column("Size", justify="right")
    table.add_column("Slots")
    for item in result.data.get("items", []):
        table.add_row(
            str(item["id"]),
            item.get("desc", ""),
            f"{item.get('width', 0)}x{item.get('height', 0)}",
            _ids(item.get("slots", [])),
        )
    console.print(table)


def _render_slots(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    with_selection = "id" in result.data

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="ppd.id", no_wrap=True)
    table.add_column("Description", style="ppd.desc")
    table.add_column("Required")
    table.add_column("Candidates")
    if with_selection:
        table.add_column("Fragment", style="ppd.id")
    if verbose:
        table.add_column("Z", justify="right", style="dim")
        table.add_column("Position", style="dim")

    for item in items:
        row = [
            str(item["id"]),
            item.get("desc", ""),
            Text("yes", style="ppd.required") if item.get("required") else Text("no"),
            _ids(item.get("candidates", [])),
        ]
        if with_selection:
            fragment_id = item.get("fragment_id")
            row.append(EMPTY_MARKER if fragment_id is None else str(fragment_id))
        if verbose:
            row.append(str(item.get("z", 0)))
            row.append(",".join(str(v) for v in item.get("position", [])))
        table.add_row(*row)
    console.print(table)


def _render_fragments(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="ppd.id", no_wrap=True)
    table.add_column("Description", style="ppd.desc")
    for item in result.data.get("items", []):
        table.add_row(str(item.get("index", "")), str(item["id"]), item.get("desc", ""))
    console.print(table)


# ── Selection renderers ───────────────────────────────────────────────


def _render_selection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/mutate/get results: the paperdoll and its slot map."""
    _status_line(console, result)
    d = result.data
    for key in ("id", "doll_id", "slot_id"):
        if key in d:
            _field(console, key, d[key])
    if "fragment_id" in d:
        _field(console, "fragment_id", d["fragment_id"])
    if "image" in d:
        _field(console, "image", d["image"])

    slot_map = d.get("slot_map", {})
    if slot_map:
        console.print(Text("  slots:", style="ppd.key"))
        for slot_id, fragment_id in slot_map.items():
            console.print(f"    {slot_id} -> {fragment_id}")
    else:
        _field(console, "slots", None)


def _render_slot_fragment(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "id", result.data.get("id"))
    _field(console, "slot_id", result.data.get("slot_id"))
    fragment = result.data.get("fragment")
    if fragment is None:
        _field(console, "fragment", None)
    else:
        _field(console, "fragment_id", fragment.get("id"))
        _field(console, "desc", fragment.get("desc", ""))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "list_dolls": _render_dolls,
    "list_slots": _render_slots,
    "list_fragments": _render_fragments,
    "create_paperdoll": _render_selection,
    "get_paperdoll": _render_selection,
    "compose": _render_selection,
    "use_fragment": _render_selection,
    "use_index": _render_selection,
    "use_empty": _render_selection,
    "use_next": _render_selection,
    "use_prev": _render_selection,
    "get_slot_fragment": _render_slot_fragment,
}
