"""Bridge — the composition root.

Wires settings, plugins, handler sets, the foreground executor, the router,
and both transports into one object with a start/stop lifecycle.
"""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import TYPE_CHECKING

from amctl.bridge.executor import ForegroundExecutor
from amctl.bridge.file_poller import FilePoller
from amctl.bridge.router import Router, build_dispatch_table
from amctl.bridge.socket_listener import SocketListener
from amctl.infrastructure.state_store import ProfileStore, UiStateStore
from amctl.plugins.hook_bus import HookBus
from amctl.plugins.manager import PluginManager
from amctl.services.activity import ActivityHandlers
from amctl.services.platform import Platform
from amctl.services.profiles import ProfileHandlers
from amctl.services.system import SystemHandlers
from amctl.services.ui import UiHandlers, UiStateHolder

if TYPE_CHECKING:
    from amctl.config.settings import AmSettings

logger = logging.getLogger(__name__)


def load_plugins(settings: AmSettings) -> PluginManager:
    """Built-in platform plus entry-point and local plugins."""
    pm = PluginManager()
    if settings.plugins.desktop:
        from amctl.plugins.builtins.desktop import DesktopPlatformPlugin

        pm.register_plugin(DesktopPlatformPlugin(), name="desktop")
    names = pm.discover_and_load(local_dir=settings.plugins_path)
    logger.debug("Loaded plugins: %s", ", ".join(names) or "none")
    return pm


class Bridge:
    """A running command bridge.

    Parameters:
        settings: Resolved settings.
        plugin_manager: Pre-built plugin manager; discovered from settings
            when omitted.
    """

    def __init__(
        self,
        settings: AmSettings,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self.settings = settings
        self.plugin_manager = plugin_manager or load_plugins(settings)
        self.hook_bus = HookBus(
            self.plugin_manager,
            sync=settings.sync,
            max_workers=settings.plugins.hook_workers,
        )
        self.platform = Platform(self.plugin_manager, self.hook_bus)
        self.executor = ForegroundExecutor()

        self.ui_state = UiStateHolder(UiStateStore(settings.state_path))
        self.activity = ActivityHandlers(self.platform)
        handler_sets = [
            self.activity,
            UiHandlers(self.platform, self.ui_state),
            ProfileHandlers(
                self.platform,
                self.ui_state,
                ProfileStore(settings.profiles_path),
                settings.exports_path,
            ),
            SystemHandlers(self.platform),
        ]
        self.router = Router(
            build_dispatch_table(handler_sets),
            self.executor,
            handoff_timeout=settings.foreground.handoff_timeout,
        )

        self.listener: SocketListener | None = None
        if settings.socket.enabled:
            self.listener = SocketListener(
                settings.socket_path,
                self.router,
                max_workers=settings.socket.max_workers,
                read_timeout=settings.socket.read_timeout,
                max_request_bytes=settings.socket.max_request_bytes,
            )

        self.poller: FilePoller | None = None
        if settings.poller.enabled:
            self.poller = FilePoller(
                command_path=settings.command_path,
                result_path=settings.result_path,
                url_path=settings.url_path,
                router=self.router,
                executor=self.executor,
                on_url=self.activity.open_url_fast,
                interval=settings.poller.interval,
            )

        self._started = False
        self._stopped = False

    def start(self) -> None:
        if self._started:
            return
        if self._stopped:
            raise RuntimeError("A stopped bridge cannot be restarted")
        self.settings.ipc_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        if self.listener is not None:
            self.listener.start()
        if self.poller is not None:
            self.poller.start()
        self._started = True
        logger.info("Bridge started in %s", self.settings.ipc_dir)

    def stop(self) -> None:
        if not self._started:
            return
        if self.poller is not None:
            self.poller.stop()
        if self.listener is not None:
            self.listener.stop()
        self.executor.shutdown()
        self.hook_bus.shutdown()
        self._started = False
        self._stopped = True
        logger.info("Bridge stopped")

    def run_forever(self, stop_event: threading.Event | None = None) -> None:
        """Start, block until *stop_event* is set (or interrupted), then stop."""
        event = stop_event or threading.Event()
        self.start()
        try:
            while not event.wait(0.5):
                pass
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.stop()

    def __enter__(self) -> Bridge:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
