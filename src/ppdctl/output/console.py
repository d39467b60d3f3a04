"""Rich Console factory and theme for ppdctl output.

Consoles render into a StringIO buffer so renderers keep a
``render_result() -> str`` contract. Without a TTY (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PPD_THEME = Theme(
    {
        "ppd.ok": "bold green",
        "ppd.error": "bold red",
        "ppd.op": "bold cyan",
        "ppd.key": "dim",
        "ppd.id": "bold blue",
        "ppd.desc": "bold",
        "ppd.required": "yellow",
        "ppd.empty": "dim italic",
    }
)

EMPTY_MARKER = "-"


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PPD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
