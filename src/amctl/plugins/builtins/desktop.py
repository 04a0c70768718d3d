"""Built-in desktop platform plugin.

Gives a bridge running outside a phone something sensible to do: web URLs
and VIEW actions open in the system's default handler through
``click.launch``, toasts go to the log. Any other action has no handler
here and is reported as rejected, exactly as a device with no matching
activity would.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import click
import pluggy

from amctl.domain.errors import PlatformRejected
from amctl.domain.intents import ACTION_VIEW, ActionDescription

hookimpl = pluggy.HookimplMarker("amctl")

logger = logging.getLogger(__name__)


class DesktopPlatformPlugin:
    """Launches URLs with the desktop's default handler."""

    def __init__(self, launcher: Callable[[str], int] | None = None) -> None:
        self._launch = launcher or click.launch

    def _open(self, target: str) -> bool:
        code = self._launch(target)
        if code != 0:
            msg = f"Launcher exited with status {code} for {target}"
            raise PlatformRejected(msg)
        return True

    @hookimpl
    def amctl_open_url(self, url: str) -> bool | None:
        logger.info("Opening %s", url)
        return self._open(url)

    @hookimpl
    def amctl_start_activity(self, action: ActionDescription) -> bool | None:
        if action.action == ACTION_VIEW and action.data:
            return self._open(action.data)
        logger.debug("No desktop handler for %s", action.describe())
        return None

    @hookimpl
    def amctl_show_toast(self, message: str) -> None:
        logger.info("Toast: %s", message)
