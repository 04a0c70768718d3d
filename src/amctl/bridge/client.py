"""Requester-side helpers.

These are what a sandboxed worker (or ``amctl send``) uses to talk to a
running bridge. Each request owns its correlation context: an open socket,
or the fixed result-file path. Waits are bounded by an absolute deadline;
once it passes the requester gives up and never reads a late result.
"""

from __future__ import annotations

import logging
import socket
import time
from pathlib import Path

from amctl.domain.errors import BridgeUnavailable, RequestTimeout
from amctl.infrastructure.filesystem import claim_file, remove_file, write_text_atomic
from amctl.services.result import Response, parse_response

logger = logging.getLogger(__name__)

_CHUNK = 4096


def _one_line(text: str) -> str:
    lines = text.strip().splitlines()
    return lines[0].strip() if lines else ""


def send_over_socket(path: Path, line: str, *, timeout: float = 3.0) -> Response:
    """Send one command over the socket and wait for its response.

    Raises:
        BridgeUnavailable: If nothing is listening on *path*.
        RequestTimeout: If no full response arrives before *timeout*.
    """
    deadline = time.monotonic() + timeout
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    with sock:
        sock.settimeout(timeout)
        try:
            sock.connect(str(path))
        except TimeoutError:
            raise RequestTimeout() from None
        except OSError as exc:
            msg = f"Bridge not listening on {path}"
            raise BridgeUnavailable(msg) from exc

        data = bytearray()
        try:
            sock.sendall(_one_line(line).encode("utf-8") + b"\n")
            while b"\n" not in data:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise RequestTimeout()
                sock.settimeout(remaining)
                chunk = sock.recv(_CHUNK)
                if not chunk:
                    break
                data += chunk
        except TimeoutError:
            raise RequestTimeout() from None

    return parse_response(data.decode("utf-8", errors="replace"))


def send_over_files(
    command_path: Path,
    result_path: Path,
    line: str,
    *,
    timeout: float = 3.0,
    poll_interval: float = 0.1,
) -> Response:
    """Write one command to the command file and poll for the result file.

    Any result left over from an earlier, abandoned request is removed
    before the command is written.

    Raises:
        RequestTimeout: If no result appears before *timeout*.
    """
    if remove_file(result_path):
        logger.debug("Cleared orphaned result %s", result_path)
    write_text_atomic(command_path, _one_line(line) + "\n")

    deadline = time.monotonic() + timeout
    while True:
        text = claim_file(result_path)
        if text is not None:
            return parse_response(text)
        if time.monotonic() >= deadline:
            raise RequestTimeout()
        time.sleep(poll_interval)


def request_url_open(url_path: Path, url: str) -> None:
    """Drop *url* into the fast-path file. Nothing is returned."""
    write_text_atomic(url_path, url.strip() + "\n")
