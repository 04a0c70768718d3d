"""Transport and execution-context enums."""

from __future__ import annotations

from enum import StrEnum


class Transport(StrEnum):
    """Channel a command arrived on."""

    SOCKET = "socket"
    FILE = "file"
    FAST_PATH = "fast_path"
    LOCAL = "local"


class ExecutionContext(StrEnum):
    """Where a handler is allowed to run.

    ``FOREGROUND`` handlers touch UI state or perform privileged platform
    actions and only ever execute on the single foreground worker.
    """

    FOREGROUND = "foreground"
    ANY = "any"
