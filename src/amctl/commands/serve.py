"""amctl serve — run the bridge in the foreground."""

from __future__ import annotations

import logging
import signal
import threading
from typing import Any

import click

from amctl.commands._base import AmCommand
from amctl.commands._context import AppContext


def _install_signal_handlers(stop: threading.Event) -> None:
    def handle(_signum: int, _frame: Any) -> None:
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, handle)


@click.command(
    cls=AmCommand,
    examples="""\
  amctl serve
  amctl --home /data/data/com.termux/files/home serve
  amctl -v --log-json serve --no-poller""",
)
@click.option("--no-socket", is_flag=True, help="Disable the socket transport.")
@click.option("--no-poller", is_flag=True, help="Disable the file transport.")
@click.pass_obj
def serve(app: AppContext, no_socket: bool, no_poller: bool) -> None:
    """Run the command bridge until interrupted."""
    from amctl.bridge.daemon import Bridge
    from amctl.config.logging import configure_logging

    settings = app.settings
    updates: dict[str, Any] = {}
    if no_socket:
        updates["socket"] = settings.socket.model_copy(update={"enabled": False})
    if no_poller:
        updates["poller"] = settings.poller.model_copy(update={"enabled": False})
    if updates:
        settings = settings.model_copy(update=updates)
    if not settings.socket.enabled and not settings.poller.enabled:
        raise click.UsageError("At least one transport must be enabled.")

    configure_logging(verbose=settings.verbose, log_json=settings.log_json, level=logging.INFO)

    try:
        bridge = Bridge(settings)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    stop = threading.Event()
    _install_signal_handlers(stop)
    try:
        bridge.run_forever(stop)
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc
