"""amctl send — one request to a running bridge."""

from __future__ import annotations

import click

from amctl.commands._base import AmCommand
from amctl.commands._context import AppContext


@click.command(
    cls=AmCommand,
    lists_verbs=True,
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
    examples="""\
  amctl send PING
  amctl send SET_TEXT_SIZE 32
  amctl send ADD_KEY 1 ESC 27
  amctl send --file GET_UI_STATE
  amctl send --timeout 5 START -a android.intent.action.MAIN -n com.termux/.app.TermuxActivity""",
)
@click.option("--file", "use_files", is_flag=True, help="Use the file transport.")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for the response.")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def send(app: AppContext, use_files: bool, timeout: float | None, command: tuple[str, ...]) -> None:
    """Send COMMAND and print the response line."""
    response = app.request(" ".join(command), use_files=use_files, timeout=timeout)
    app.emit(response)
