"""PpdCommand: a click Command carrying described usage examples.

``--examples`` prints each invocation with a one-line explanation and
exits before arguments are validated, so ``ppdctl compose --examples``
works without a DOLL_ID.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

# (command line after "ppdctl", what it does)
Example = tuple[str, str]


def format_examples(examples: Sequence[Example]) -> str:
    """Render examples as ``$ ppdctl ...`` lines, each followed by its summary."""
    blocks = [f"  $ ppdctl {line}\n      {summary}" for line, summary in examples]
    return "\n\n".join(blocks)


class PpdCommand(click.Command):
    """Click Command with an eager ``--examples`` flag."""

    def __init__(self, *args: Any, examples: Sequence[Example] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for 'ppdctl {ctx.info_name}':\n")
        click.echo(format_examples(self.examples))
        ctx.exit(0)
