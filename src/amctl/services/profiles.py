"""Named UI profiles: save, load, list, delete, export, import.

Anything that reads or replaces the live snapshot stays on the foreground
worker; listing and deleting only touch files and run anywhere.

Exports are plain copies of the profile JSON named ``amctl-<name>.json``
in the exports directory, so they can be handed to another device and
brought back with ``IMPORT_PROFILE``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

from amctl.domain.errors import InvalidArgument
from amctl.domain.grammar import Command, positional, trailing
from amctl.domain.types import ExecutionContext
from amctl.infrastructure.state_store import read_snapshot_file
from amctl.services.base import BaseHandlerSet, handles
from amctl.services.result import Response

if TYPE_CHECKING:
    from amctl.domain.ui_state import UIStateSnapshot
    from amctl.infrastructure.state_store import ProfileStore
    from amctl.services.platform import Platform
    from amctl.services.ui import UiStateHolder

PROFILE_NAME = re.compile(r"^[A-Za-z0-9_-]+$")
EXPORT_PREFIX = "amctl-"
EXPORT_SUFFIX = ".json"


def validate_profile_name(name: str) -> str:
    if not PROFILE_NAME.match(name):
        msg = f"Invalid profile name: {name} (use letters, digits, '_' and '-')"
        raise InvalidArgument(msg)
    return name


def export_file_name(name: str) -> str:
    return f"{EXPORT_PREFIX}{name}{EXPORT_SUFFIX}"


def profile_name_from_file(path: Path) -> str:
    """``amctl-dark.json`` and ``dark.json`` both import as ``dark``."""
    return validate_profile_name(path.stem.removeprefix(EXPORT_PREFIX))


class ProfileHandlers(BaseHandlerSet):
    """Snapshots stored under a name.

    Parameters:
        platform: Injected capabilities.
        state: The live snapshot.
        store: Where named profiles live.
        exports_dir: Target of ``EXPORT_PROFILE`` and base for relative
            ``IMPORT_PROFILE`` paths.
    """

    def __init__(
        self,
        platform: Platform,
        state: UiStateHolder,
        store: ProfileStore,
        exports_dir: Path,
    ) -> None:
        super().__init__(platform)
        self._state = state
        self._store = store
        self._exports_dir = exports_dir

    def _name(self, command: Command) -> str:
        (name,) = positional(command, 1, "name")
        return validate_profile_name(name)

    def _apply(self, snapshot: UIStateSnapshot) -> None:
        self._state.commit(snapshot)
        self._notify("amctl_ui_changed", setting="profile", state=snapshot.model_dump(mode="json"))

    @handles("SAVE_PROFILE", usage="name", min_args=1)
    def save_profile(self, command: Command) -> Response:
        """Save the current UI state under a name."""
        name = self._name(command)
        self._store.save(name, self._state.snapshot)
        return Response.success(f"Profile '{name}' saved", verb=command.verb)

    @handles("LOAD_PROFILE", usage="name", min_args=1)
    def load_profile(self, command: Command) -> Response:
        """Replace the current UI state with a saved profile."""
        name = self._name(command)
        snapshot = self._store.load(name)
        if snapshot is None:
            msg = f"Profile '{name}' not found"
            raise InvalidArgument(msg)
        self._apply(snapshot)
        return Response.success(f"Profile '{name}' loaded", verb=command.verb)

    @handles("LIST_PROFILES", context=ExecutionContext.ANY)
    def list_profiles(self, command: Command) -> Response:
        """List saved profile names."""
        names = self._store.names()
        if not names:
            return Response.success("No profiles saved yet", verb=command.verb)
        return Response.success(f"Profiles: {', '.join(names)}", verb=command.verb)

    @handles("DELETE_PROFILE", context=ExecutionContext.ANY, usage="name", min_args=1)
    def delete_profile(self, command: Command) -> Response:
        """Delete a saved profile."""
        name = self._name(command)
        if not self._store.delete(name):
            msg = f"Profile '{name}' not found"
            raise InvalidArgument(msg)
        return Response.success(f"Profile '{name}' deleted", verb=command.verb)

    @handles("EXPORT_PROFILE", usage="name", min_args=1)
    def export_profile(self, command: Command) -> Response:
        """Copy a profile to the exports directory.

        A name with no saved profile exports the current state, saving it
        under that name first.
        """
        name = self._name(command)
        if not self._store.exists(name):
            self._store.save(name, self._state.snapshot)
        destination = (self._exports_dir / export_file_name(name)).resolve()
        try:
            self._store.export(name, destination)
        except OSError as exc:
            msg = f"Export failed: {exc}"
            raise InvalidArgument(msg) from exc
        return Response.success(f"Exported to {destination}", verb=command.verb)

    @handles("IMPORT_PROFILE", usage="path", min_args=1)
    def import_profile(self, command: Command) -> Response:
        """Save a profile file under its own name and apply it.

        Relative paths are looked up in the exports directory.
        """
        path = Path(trailing(command, "path")).expanduser()
        if not path.is_absolute():
            path = self._exports_dir / path
        path = path.resolve()
        if not path.is_file():
            msg = f"File not found: {path}"
            raise InvalidArgument(msg)
        name = profile_name_from_file(path)
        try:
            snapshot = read_snapshot_file(path)
        except (OSError, ValueError) as exc:
            msg = f"Import failed: {exc}"
            raise InvalidArgument(msg) from exc
        self._store.save(name, snapshot)
        self._apply(snapshot)
        return Response.success(f"Profile '{name}' imported and applied", verb=command.verb)
