"""amctl am — drop-in for ``am start`` inside the sandbox.

A plain VIEW of a web URL goes through the fast-path file and returns at
once. Everything else becomes a START command, sent over the socket and
retried over the file transport when no socket is listening.
"""

from __future__ import annotations

import shlex

import click

from amctl.bridge.client import request_url_open
from amctl.commands._base import AmCommand
from amctl.commands._context import AppContext
from amctl.domain.errors import BridgeError
from amctl.domain.grammar import START_VERB, parse_start_flags
from amctl.services.result import Response


@click.command(
    cls=AmCommand,
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
    examples="""\
  amctl am start -a android.intent.action.VIEW -d https://example.com
  amctl am start -n com.termux/.app.TermuxActivity
  amctl am https://example.com""",
)
@click.argument("args", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def am(app: AppContext, args: tuple[str, ...]) -> None:
    """Start an activity the way ``am start`` does."""
    tokens = list(args)
    if tokens[0].lower() == "start":
        tokens = tokens[1:]
    line = shlex.join(tokens)

    try:
        action = parse_start_flags(line)
    except BridgeError as exc:
        app.emit(Response.from_error(exc, verb=START_VERB))
        return

    if action.is_view_url:
        assert action.data is not None
        request_url_open(app.settings.url_path, action.data)
        response = Response.success(f"Starting: {action.describe()}", verb=START_VERB)
    else:
        response = app.request(f"{START_VERB} {line}", fallback=True)

    if response.ok and not app.settings.json_output:
        click.echo(response.detail)
        return
    app.emit(response)
