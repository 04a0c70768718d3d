"""The single foreground worker.

Everything that touches UI state or performs a privileged platform action
runs here, one task at a time, in submission order. Any thread may hand
work to it; each hand-off waits on its own Future, so no lock is ever held
across the boundary.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, TypeVar

from amctl.domain.errors import ForegroundUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ForegroundExecutor:
    """A task queue bound to exactly one worker thread."""

    def __init__(self, *, name: str = "amctl-foreground") -> None:
        self._ident: int | None = None
        self._pool = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=name, initializer=self._bind
        )

    def _bind(self) -> None:
        self._ident = threading.get_ident()

    def is_current(self) -> bool:
        """Whether the calling thread is the foreground worker."""
        return self._ident is not None and threading.get_ident() == self._ident

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        """Queue *fn* without waiting. Raises RuntimeError after shutdown."""
        return self._pool.submit(fn, *args, **kwargs)

    def call(self, fn: Callable[[], T], *, timeout: float) -> T:
        """Run *fn* on the foreground worker and wait for its result.

        Runs inline when already on the foreground worker. If the worker
        does not finish within *timeout* the caller stops waiting; the task
        still completes and its result is discarded.

        Raises:
            ForegroundUnavailable: On timeout or after shutdown.
        """
        if self.is_current():
            return fn()
        try:
            future = self._pool.submit(fn)
        except RuntimeError as exc:
            raise ForegroundUnavailable("Foreground context is shut down") from exc
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            logger.warning("Foreground hand-off timed out after %.2fs", timeout)
            msg = f"Foreground context did not respond within {timeout:g}s"
            raise ForegroundUnavailable(msg) from None

    def shutdown(self, *, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=True)
