"""amctl open-url — fire-and-forget fast path."""

from __future__ import annotations

import click

from amctl.bridge.client import request_url_open
from amctl.commands._base import AmCommand
from amctl.commands._context import AppContext
from amctl.services.result import Response


@click.command(
    "open-url",
    cls=AmCommand,
    examples="""\
  amctl open-url https://example.com""",
)
@click.argument("url")
@click.pass_obj
def open_url(app: AppContext, url: str) -> None:
    """Ask the bridge to open URL. Does not wait for it."""
    if not url.strip():
        raise click.BadParameter("URL must not be empty.", param_hint="URL")
    request_url_open(app.settings.url_path, url)
    app.emit(Response.success(f"Queued {url.strip()}", verb="OPEN_URL"))
