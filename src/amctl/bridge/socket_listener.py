"""Local stream socket transport.

One command per connection: read one line, dispatch, write one line,
close. Connections are served by a worker pool so a slow handler never
blocks the accept loop, and no state is shared between connections except
through the router.

INVARIANT: A failing connection never stops the listener.
"""

from __future__ import annotations

import errno
import logging
import os
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from amctl.domain.errors import MalformedCommand
from amctl.domain.types import Transport
from amctl.services.result import Response

if TYPE_CHECKING:
    from amctl.bridge.router import Router

logger = logging.getLogger(__name__)

ACCEPT_TIMEOUT = 1.0
_CHUNK = 4096


class SocketListener:
    """Unix-domain socket listener.

    Parameters:
        path: Socket file location.
        router: Dispatches each received line.
        max_workers: Concurrent connections being served.
        read_timeout: How long a client may take to send its line.
        max_request_bytes: Longest accepted request line.
    """

    def __init__(
        self,
        path: Path,
        router: Router,
        *,
        max_workers: int = 8,
        read_timeout: float = 2.0,
        max_request_bytes: int = 65536,
    ) -> None:
        self.path = path
        self._router = router
        self._max_workers = max_workers
        self._read_timeout = read_timeout
        self._max_request_bytes = max_request_bytes
        self._socket: socket.socket | None = None
        self._pool: ThreadPoolExecutor | None = None
        self._thread: threading.Thread | None = None
        self._stop = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._socket = self._bind()
        self._stop.clear()
        self._pool = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="amctl-conn"
        )
        self._thread = threading.Thread(target=self._accept_loop, name="amctl-accept", daemon=True)
        self._thread.start()
        logger.info("Listening on %s", self.path)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=ACCEPT_TIMEOUT * 3)
            self._thread = None
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None
        self._cleanup_socket()

    # ------------------------------------------------------------------
    # Socket setup
    # ------------------------------------------------------------------

    def _bind(self) -> socket.socket:
        """Bind the socket, replacing a stale file but never a live listener.

        Raises:
            RuntimeError: If another bridge is already listening on the path.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(str(self.path))
        except OSError as exc:
            if exc.errno != errno.EADDRINUSE:
                sock.close()
                raise
            if self._is_live():
                sock.close()
                msg = f"Another bridge is already listening on {self.path}"
                raise RuntimeError(msg) from exc
            logger.info("Removing stale socket %s", self.path)
            self.path.unlink(missing_ok=True)
            sock.bind(str(self.path))
        os.chmod(self.path, 0o600)
        sock.listen(16)
        sock.settimeout(ACCEPT_TIMEOUT)
        return sock

    def _is_live(self) -> bool:
        probe = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            probe.connect(str(self.path))
        except (ConnectionRefusedError, FileNotFoundError):
            return False
        finally:
            probe.close()
        return True

    def _cleanup_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
        self.path.unlink(missing_ok=True)
        logger.info("Socket cleaned up")

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def _accept_loop(self) -> None:
        assert self._socket is not None
        assert self._pool is not None
        while not self._stop.is_set():
            try:
                conn, _ = self._socket.accept()
            except TimeoutError:
                continue
            except OSError:
                if self._stop.is_set():
                    break
                logger.warning("Accept failed", exc_info=True)
                self._stop.wait(ACCEPT_TIMEOUT / 10)
                continue
            try:
                self._pool.submit(self._handle_connection, conn)
            except RuntimeError:
                conn.close()
                break
        logger.debug("Accept loop finished")

    def _handle_connection(self, conn: socket.socket) -> None:
        """Serve exactly one request on *conn* and close it."""
        with conn:
            try:
                conn.settimeout(self._read_timeout)
                line = self._read_line(conn)
                if line is None:
                    response = Response.failure(
                        f"Request too large: exceeds {self._max_request_bytes} byte limit",
                        code=MalformedCommand.code,
                    )
                else:
                    response = self._router.dispatch(line, Transport.SOCKET)
                conn.sendall(response.render().encode("utf-8") + b"\n")
            except (BrokenPipeError, ConnectionResetError):
                logger.debug("Client disconnected before receiving response")
            except Exception:
                logger.exception("Error handling connection")

    def _read_line(self, conn: socket.socket) -> str | None:
        """Read up to the first newline, EOF, or read timeout.

        Returns None when the client exceeds the size limit.
        """
        data = bytearray()
        while b"\n" not in data:
            try:
                chunk = conn.recv(_CHUNK)
            except TimeoutError:
                logger.debug("Client sent no newline within %.1fs", self._read_timeout)
                break
            if not chunk:
                break
            data += chunk
            if b"\n" not in data and len(data) > self._max_request_bytes:
                break
        line = bytes(data).split(b"\n", 1)[0]
        if len(line) > self._max_request_bytes:
            logger.warning("Request exceeded %d bytes, rejecting", self._max_request_bytes)
            return None
        return line.decode("utf-8", errors="replace")
