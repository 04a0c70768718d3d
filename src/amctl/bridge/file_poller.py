"""Filesystem transport, polled from the foreground worker.

Each tick, in order:

1. the fast-path URL file is claimed and handed to the URL handler; no
   result file is ever written for it;
2. the command file is claimed, dispatched inline, and its Response is
   written to the result file.

A claim removes the file before any handler runs, so a command is handled
at most once even when ticks overlap or a handler is slow.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import TYPE_CHECKING

from amctl.domain.types import Transport
from amctl.infrastructure.filesystem import claim_file, write_text_atomic

if TYPE_CHECKING:
    from amctl.bridge.executor import ForegroundExecutor
    from amctl.bridge.router import Router

logger = logging.getLogger(__name__)


class FilePoller:
    """Fixed-interval poll of the command and fast-path files."""

    def __init__(
        self,
        *,
        command_path: Path,
        result_path: Path,
        url_path: Path,
        router: Router,
        executor: ForegroundExecutor,
        on_url: Callable[[str], None],
        interval: float = 0.1,
    ) -> None:
        self.command_path = command_path
        self.result_path = result_path
        self.url_path = url_path
        self._router = router
        self._executor = executor
        self._on_url = on_url
        self._interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> None:
        """One poll pass. Meant to run on the foreground worker."""
        self._poll_fast_path()
        self._poll_commands()

    def _poll_fast_path(self) -> None:
        text = claim_file(self.url_path)
        if text is None:
            return
        logger.debug("Fast-path URL request received")
        try:
            self._on_url(text)
        except Exception:
            logger.warning("Fast-path URL handler failed", exc_info=True)

    def _poll_commands(self) -> None:
        text = claim_file(self.command_path)
        if text is None:
            return
        response = self._router.dispatch(text, Transport.FILE)
        write_text_atomic(self.result_path, response.render() + "\n")

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self.is_running:
            return
        self.command_path.parent.mkdir(parents=True, exist_ok=True)
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="amctl-poller", daemon=True)
        self._thread.start()
        logger.info("Polling %s every %.0fms", self.command_path.parent, self._interval * 1000)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=max(self._interval * 5, 1.0))
            self._thread = None

    def _run(self) -> None:
        pending: Future[None] | None = None
        while not self._stop.wait(self._interval):
            if pending is not None and not pending.done():
                continue  # previous tick still running
            try:
                pending = self._executor.submit(self._safe_tick)
            except RuntimeError:
                logger.debug("Foreground executor is shut down, poller exiting")
                break

    def _safe_tick(self) -> None:
        try:
            self.tick()
        except Exception:
            logger.exception("Poll tick failed")
