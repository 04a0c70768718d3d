"""JSON persistence for the UI snapshot and named profiles.

Writes go through :func:`write_text_atomic`. Reads are forgiving: a
persisted value that no longer validates is dropped and its default kept,
so a bad file never prevents the bridge from starting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from amctl.domain.ui_state import UIStateSnapshot
from amctl.infrastructure.filesystem import remove_file, write_text_atomic

logger = logging.getLogger(__name__)


def snapshot_from_dict(data: Any) -> UIStateSnapshot:
    """Build a snapshot from untrusted data, discarding invalid fields."""
    if not isinstance(data, dict):
        logger.warning("Ignoring UI state that is not a JSON object")
        return UIStateSnapshot()
    try:
        return UIStateSnapshot.model_validate(data)
    except ValidationError as exc:
        invalid = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.warning("Ignoring invalid UI settings: %s", ", ".join(sorted(map(str, invalid))))
    cleaned = {key: value for key, value in data.items() if key not in invalid}
    try:
        return UIStateSnapshot.model_validate(cleaned)
    except ValidationError:
        logger.warning("Falling back to default UI state", exc_info=True)
        return UIStateSnapshot()


def read_snapshot_file(path: Path) -> UIStateSnapshot:
    """Read a snapshot someone handed us, e.g. an exported profile.

    Unlike the stores this is strict about the container: the file must be
    readable and hold a JSON object. Individual invalid fields are still
    dropped.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it is not UTF-8 JSON or not an object.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return snapshot_from_dict(data)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Ignoring unreadable state file %s", path, exc_info=True)
        return None


class UiStateStore:
    """The persisted copy of the live UI snapshot."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> UIStateSnapshot:
        if not self.path.is_file():
            return UIStateSnapshot()
        return snapshot_from_dict(_read_json(self.path))

    def save(self, snapshot: UIStateSnapshot) -> None:
        write_text_atomic(self.path, snapshot.model_dump_json(indent=2))

    def discard(self) -> bool:
        return remove_file(self.path)


class ProfileStore:
    """Named snapshots stored as ``<directory>/<name>.json``.

    Names are validated by the caller; this class only maps them to files.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def save(self, name: str, snapshot: UIStateSnapshot) -> None:
        write_text_atomic(self._path(name), snapshot.model_dump_json(indent=2))

    def load(self, name: str) -> UIStateSnapshot | None:
        path = self._path(name)
        if not path.is_file():
            return None
        return snapshot_from_dict(_read_json(path))

    def delete(self, name: str) -> bool:
        return remove_file(self._path(name))

    def export(self, name: str, destination: Path) -> None:
        """Copy the stored profile *name* to *destination* byte for byte."""
        write_text_atomic(destination, self._path(name).read_text(encoding="utf-8"))

    def names(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
