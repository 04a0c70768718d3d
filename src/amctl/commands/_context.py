"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides centralized response emission
(stdout/stderr routing + exit codes) and client-side request helpers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from amctl.bridge.client import send_over_files, send_over_socket
from amctl.domain.errors import BridgeError, BridgeUnavailable
from amctl.output.formatters import format_response
from amctl.services.result import Response

if TYPE_CHECKING:
    from amctl.config.settings import AmSettings


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: AmSettings) -> None:
        self.settings = settings

        from amctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def request(
        self,
        line: str,
        *,
        use_files: bool = False,
        fallback: bool = False,
        timeout: float | None = None,
    ) -> Response:
        """Send *line* to the running bridge and return its Response.

        Local failures (timeout, nothing listening) come back as error
        responses rather than exceptions.

        Args:
            use_files: Use the command/result files instead of the socket.
            fallback: Retry over files when the socket is unavailable.
            timeout: Overrides ``client.timeout``.
        """
        client = self.settings.client
        wait = timeout if timeout is not None else client.timeout
        try:
            if not use_files:
                try:
                    return send_over_socket(self.settings.socket_path, line, timeout=wait)
                except BridgeUnavailable:
                    if not fallback:
                        raise
            return send_over_files(
                self.settings.command_path,
                self.settings.result_path,
                line,
                timeout=wait,
                poll_interval=client.poll_interval,
            )
        except BridgeError as exc:
            return Response.from_error(exc)

    def emit(self, response: Response) -> None:
        """Print a Response with correct exit semantics.

        * Success: writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_response(response, json_output=self.settings.json_output)
        if response.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
