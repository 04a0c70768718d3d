"""Privileged activity proxy.

Two delivery paths:

- ``open_url_fast`` serves the fast-path URL file: no dispatch table, no
  response, just the viewer.
- ``START`` builds a full :class:`ActionDescription` from ``am``-style flags
  and hands it to the platform, which executes it under the host's own
  identity.
"""

from __future__ import annotations

import logging

from amctl.domain.grammar import START_USAGE, Command, parse_start_flags, positional
from amctl.services.base import BaseHandlerSet, handles
from amctl.services.result import Response

logger = logging.getLogger(__name__)


class ActivityHandlers(BaseHandlerSet):
    """START and OPEN_URL."""

    @handles("START", usage=START_USAGE, min_args=1)
    def start(self, command: Command) -> Response:
        """Start an activity from am-style flags."""
        action = parse_start_flags(command.args, verb=command.verb)
        logger.debug("Starting %s", action.describe())
        self._platform.start_activity(action)
        return Response.success(f"Starting: {action.describe()}", verb=command.verb)

    @handles("OPEN_URL", usage="url", min_args=1)
    def open_url(self, command: Command) -> Response:
        """Open a URL in the default viewer."""
        (url,) = positional(command, 1, "url")
        self._platform.open_url(url)
        return Response.success(f"Opening {url}", verb=command.verb)

    def open_url_fast(self, text: str) -> None:
        """Handle the contents of the fast-path URL file.

        Fire-and-forget: nothing is returned to the writer.
        """
        url = text.strip()
        if not url:
            logger.warning("Ignoring empty fast-path URL file")
            return
        self._platform.open_url(url)
