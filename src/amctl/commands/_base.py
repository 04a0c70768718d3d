"""Click base classes shared by every amctl command.

Two extra keyword arguments are understood by ``@click.command(cls=...)``:

- ``examples``: text printed by an eager ``--examples`` flag, keeping
  ``--help`` short;
- ``lists_verbs``: append a pointer to ``amctl verbs`` to the help epilog,
  for commands whose arguments are a raw bridge command line.
"""

from __future__ import annotations

from typing import Any

import click

VERBS_HINT = "Run 'amctl verbs' to list the commands the bridge accepts."


class _ExamplesMixin:
    """Adds the eager ``--examples`` flag to a command or group."""

    params: list[click.Parameter]
    examples: str | None = None

    def _attach_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples and exit.",
            )
        )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class AmCommand(_ExamplesMixin, click.Command):
    """A command with optional ``--examples`` and verb-list hint."""

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        lists_verbs: bool = False,
        **kwargs: Any,
    ) -> None:
        if lists_verbs:
            epilog = kwargs.get("epilog")
            kwargs["epilog"] = f"{epilog}\n\n{VERBS_HINT}" if epilog else VERBS_HINT
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class AmGroup(_ExamplesMixin, click.Group):
    """Root group; subcommands default to :class:`AmCommand`."""

    command_class = AmCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
