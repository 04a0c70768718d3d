"""Filesystem primitives for the file transport.

INVARIANT: A channel file is consumed at most once. :func:`claim_file`
renames the file to a private name before reading it, so two overlapping
readers can never both see the same contents, and the original path is
gone before any handler runs.
"""

from __future__ import annotations

import os
import threading
import uuid
from pathlib import Path


def _private_name(path: Path, suffix: str) -> Path:
    token = f"{os.getpid()}.{threading.get_ident()}.{uuid.uuid4().hex[:8]}"
    return path.with_name(f".{path.name}.{token}.{suffix}")


def claim_file(path: Path) -> str | None:
    """Take ownership of *path*, delete it, and return its text.

    Returns None when the file does not exist, including when another
    reader claimed it first.
    """
    claimed = _private_name(path, "claimed")
    try:
        os.replace(path, claimed)
    except FileNotFoundError:
        return None
    try:
        return claimed.read_text(encoding="utf-8", errors="replace")
    finally:
        claimed.unlink(missing_ok=True)


def write_text_atomic(path: Path, text: str) -> None:
    """Write *text* so readers only ever observe the complete file.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = _private_name(path, "tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)


def remove_file(path: Path) -> bool:
    """Delete *path* if present. Returns whether anything was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
