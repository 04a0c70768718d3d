"""Fire-and-forget dispatch of notification hooks.

Notification hooks (toasts, script evaluation, UI change callbacks) must
not hold up the foreground worker, so they run on a small
ThreadPoolExecutor. ``sync=True`` runs them inline, which keeps tests and
``--sync`` deterministic.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from amctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class HookBus:
    """Notification hook dispatch via pluggy + ThreadPoolExecutor.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Run hooks inline on the caller's thread.
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_workers: int = 2,
    ) -> None:
        self._pm = plugin_manager
        self._sync = sync
        self._executor: ThreadPoolExecutor | None = (
            None
            if sync
            else ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="amctl-hooks")
        )
        self._futures: list[Future[Any]] = []
        self._lock = threading.Lock()

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> Future[Any] | None:
        """Run *hook_name* with *payload* in the background (or inline).

        Returns the future for async dispatch, None when run inline or
        when no plugin implements the hook.
        """
        if not self._pm.has_impl(hook_name):
            logger.debug("No plugin implements %s, not dispatched", hook_name)
            return None
        if self._executor is None:
            self._execute_hook(hook_name, payload)
            return None
        future = self._executor.submit(self._execute_hook, hook_name, payload)
        with self._lock:
            self._futures = [f for f in self._futures if not f.done()]
            self._futures.append(future)
        return future

    def wait(self, timeout: float = 30) -> None:
        """Wait for all in-flight hooks to finish."""
        with self._lock:
            pending, self._futures = self._futures, []
        for future in pending:
            try:
                future.result(timeout=timeout)
            except Exception:
                pass  # Errors already logged in _execute_hook

    def shutdown(self) -> None:
        """Shutdown ThreadPoolExecutor, waiting for pending hooks."""
        self.wait()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _execute_hook(self, hook_name: str, payload: dict[str, Any]) -> list[Any]:
        hook_fn = getattr(self._pm.hook, hook_name)
        try:
            results = hook_fn(**payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", hook_name, exc, exc_info=True)
            return []
        logger.debug("Hook %s returned %r", hook_name, results)
        return results
