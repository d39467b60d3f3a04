"""Subcommand modules for ppdctl.

Provides register_commands(), importing command modules only when the
root group is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from ppdctl.commands.catalog import dolls, fragments, slots
    from ppdctl.commands.compose import compose

    cli.add_command(dolls)
    cli.add_command(slots)
    cli.add_command(fragments)
    cli.add_command(compose)
