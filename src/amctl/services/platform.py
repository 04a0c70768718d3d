"""Platform facade over the plugin manager.

Handlers never call pluggy directly. Capability calls (open a URL, start
an activity) are synchronous and turn an unhandled request into
:class:`PlatformRejected`; notifications go through the HookBus.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from amctl.domain.errors import PlatformRejected

if TYPE_CHECKING:
    from amctl.domain.intents import ActionDescription
    from amctl.plugins.hook_bus import HookBus
    from amctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Platform:
    """Injected capabilities the handlers depend on."""

    def __init__(self, plugin_manager: PluginManager, hook_bus: HookBus) -> None:
        self.plugin_manager = plugin_manager
        self.hook_bus = hook_bus

    def open_url(self, url: str) -> None:
        """Present a viewer for *url*.

        Raises:
            PlatformRejected: If no plugin handled the URL.
        """
        handled = self.plugin_manager.hook.amctl_open_url(url=url)
        if not handled:
            msg = f"No viewer available for {url}"
            raise PlatformRejected(msg)

    def start_activity(self, action: ActionDescription) -> None:
        """Execute *action* under the host application's identity.

        Raises:
            PlatformRejected: If the platform refused or nothing handled it.
        """
        accepted = self.plugin_manager.hook.amctl_start_activity(action=action)
        if not accepted:
            msg = f"No Activity found to handle {action.describe()}"
            raise PlatformRejected(msg)

    def notify(self, hook_name: str, payload: dict[str, Any]) -> None:
        logger.debug("Notify %s", hook_name)
        self.hook_bus.dispatch(hook_name, payload)
