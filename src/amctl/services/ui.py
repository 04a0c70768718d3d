"""UI mutation, query and reset handlers.

Each mutating handler validates its arguments, builds a new snapshot,
commits it (memory and disk), then fires ``amctl_ui_changed``. All of
them are foreground-only: the foreground worker is the single writer of
the snapshot, so no locking is needed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from amctl.domain.errors import InvalidArgument
from amctl.domain.grammar import Command, positional, trailing
from amctl.domain.ui_state import (
    OVERLAY_POSITIONS,
    OVERLAY_SIZES,
    KeyButton,
    UIStateSnapshot,
    parse_choice,
    parse_hex_color,
    parse_opacity,
    parse_row,
    parse_text_size,
)
from amctl.services.base import BaseHandlerSet, handles
from amctl.services.result import Response

if TYPE_CHECKING:
    from amctl.infrastructure.state_store import UiStateStore
    from amctl.services.platform import Platform

logger = logging.getLogger(__name__)


class UiStateHolder:
    """The live snapshot and its persisted copy."""

    def __init__(self, store: UiStateStore) -> None:
        self._store = store
        self.snapshot: UIStateSnapshot = store.load()

    def commit(self, snapshot: UIStateSnapshot) -> None:
        self.snapshot = snapshot
        try:
            self._store.save(snapshot)
        except OSError:
            logger.error("Failed to persist UI state to %s", self._store.path, exc_info=True)

    def reset(self) -> None:
        self.snapshot = UIStateSnapshot()
        try:
            self._store.discard()
        except OSError:
            logger.error("Failed to remove UI state at %s", self._store.path, exc_info=True)


class UiHandlers(BaseHandlerSet):
    """Extra keys, colours, text size, overlay geometry, and state queries."""

    def __init__(self, platform: Platform, state: UiStateHolder) -> None:
        super().__init__(platform)
        self._state = state

    @property
    def snapshot(self) -> UIStateSnapshot:
        return self._state.snapshot

    def _apply(self, setting: str, **changes: Any) -> None:
        self._commit(setting, self.snapshot.model_copy(update=changes))

    def _commit(self, setting: str, snapshot: UIStateSnapshot) -> None:
        self._state.commit(snapshot)
        self._notify("amctl_ui_changed", setting=setting, state=snapshot.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Extra keys
    # ------------------------------------------------------------------

    @handles("ADD_KEY", usage="row text action", min_args=3)
    def add_key(self, command: Command) -> Response:
        """Append a key to row 1 or 2."""
        row_arg, text, action = positional(command, 3, "row text action")
        row = parse_row(row_arg)
        key = KeyButton(label=text, action=action)
        self._commit("keys", self.snapshot.with_key_added(row, key))
        return Response.success(f"Added key '{text}' to row {row}", verb=command.verb)

    @handles("REMOVE_KEY", usage="row text", min_args=2)
    def remove_key(self, command: Command) -> Response:
        """Remove the first key with a given label from a row."""
        row_arg, text = positional(command, 2, "row text")
        row = parse_row(row_arg)
        self._commit("keys", self.snapshot.with_key_removed(row, text))
        return Response.success(f"Removed key '{text}' from row {row}", verb=command.verb)

    @handles("CLEAR_KEYS", usage="row", min_args=1)
    def clear_keys(self, command: Command) -> Response:
        """Remove every key from a row."""
        (row_arg,) = positional(command, 1, "row")
        row = parse_row(row_arg, command.verb)
        self._commit("keys", self.snapshot.with_row_cleared(row))
        return Response.success(f"Cleared all keys from row {row}", verb=command.verb)

    # ------------------------------------------------------------------
    # Colours and text
    # ------------------------------------------------------------------

    @handles("SET_BACKGROUND", usage="#RRGGBB", min_args=1)
    def set_background(self, command: Command) -> Response:
        """Set the terminal background colour."""
        (value,) = positional(command, 1, "#RRGGBB")
        color = parse_hex_color(value, command.verb)
        self._apply("background", background=color)
        return Response.success(f"Background set to {color}", verb=command.verb)

    @handles("SET_TEXT_COLOR", usage="#RRGGBB", min_args=1)
    def set_text_color(self, command: Command) -> Response:
        """Set the terminal text colour."""
        (value,) = positional(command, 1, "#RRGGBB")
        color = parse_hex_color(value, command.verb)
        self._apply("text_color", text_color=color)
        return Response.success(f"Text color set to {color}", verb=command.verb)

    @handles("SET_KEY_STYLE", usage="#bg #text", min_args=2)
    def set_key_style(self, command: Command) -> Response:
        """Set extra-key background and label colours."""
        bg_arg, text_arg = positional(command, 2, "#bg #text")
        background = parse_hex_color(bg_arg, command.verb, "#bg #text")
        text = parse_hex_color(text_arg, command.verb, "#bg #text")
        self._apply("key_style", key_background=background, key_text_color=text)
        return Response.success("Key style updated", verb=command.verb)

    @handles("SET_TEXT_SIZE", usage="sp", min_args=1)
    def set_text_size(self, command: Command) -> Response:
        """Set the terminal text size (14-56 sp)."""
        (value,) = positional(command, 1, "sp")
        size = parse_text_size(value, command.verb)
        self._apply("text_size", text_size=size)
        return Response.success(f"Text size set to {size}sp", verb=command.verb)

    # ------------------------------------------------------------------
    # Overlay
    # ------------------------------------------------------------------

    @handles("LOAD_UI", usage="path", min_args=1)
    def load_ui(self, command: Command) -> Response:
        """Load an overlay from a file and show it."""
        path = Path(trailing(command, "path")).expanduser()
        if not path.is_file():
            msg = f"File not found: {path.resolve()}"
            raise InvalidArgument(msg)
        self._apply("overlay_source", overlay_source=str(path.resolve()), overlay_visible=True)
        return Response.success(f"UI loaded from {path.name}", verb=command.verb)

    @handles("SHOW_UI")
    def show_ui(self, command: Command) -> Response:
        """Show the overlay."""
        self._apply("overlay_visible", overlay_visible=True)
        return Response.success("UI shown", verb=command.verb)

    @handles("HIDE_UI")
    def hide_ui(self, command: Command) -> Response:
        """Hide the overlay."""
        self._apply("overlay_visible", overlay_visible=False)
        return Response.success("UI hidden", verb=command.verb)

    @handles("UI_SIZE", usage="|".join(OVERLAY_SIZES), min_args=1)
    def ui_size(self, command: Command) -> Response:
        """Set the overlay size."""
        (value,) = positional(command, 1, "|".join(OVERLAY_SIZES))
        size = parse_choice(value, OVERLAY_SIZES, command.verb)
        self._apply("overlay_size", overlay_size=size)
        return Response.success(f"UI size set to {size}", verb=command.verb)

    @handles("UI_POSITION", usage="|".join(OVERLAY_POSITIONS), min_args=1)
    def ui_position(self, command: Command) -> Response:
        """Anchor the overlay."""
        (value,) = positional(command, 1, "|".join(OVERLAY_POSITIONS))
        position = parse_choice(value, OVERLAY_POSITIONS, command.verb)
        self._apply("overlay_position", overlay_position=position)
        return Response.success(f"UI position set to {position}", verb=command.verb)

    @handles("UI_OPACITY", usage="0.0-1.0", min_args=1)
    def ui_opacity(self, command: Command) -> Response:
        """Set overlay opacity."""
        (value,) = positional(command, 1, "0.0-1.0")
        opacity = parse_opacity(value, command.verb)
        self._apply("overlay_opacity", overlay_opacity=opacity)
        return Response.success(f"UI opacity set to {opacity}", verb=command.verb)

    @handles("SHOW_TOAST", usage="message", min_args=1)
    def show_toast(self, command: Command) -> Response:
        """Show a short message."""
        message = trailing(command, "message")
        self._notify("amctl_show_toast", message=message)
        return Response.success("Toast shown", verb=command.verb)

    @handles("INJECT_JS", usage="javascript_code", min_args=1)
    def inject_js(self, command: Command) -> Response:
        """Evaluate script in the overlay; the result is only logged."""
        script = trailing(command, "javascript_code")
        self._notify("amctl_evaluate_script", script=script)
        return Response.success("JavaScript injected", verb=command.verb)

    # ------------------------------------------------------------------
    # Query and reset
    # ------------------------------------------------------------------

    @handles("GET_UI_STATE")
    def get_ui_state(self, command: Command) -> Response:
        """Report text size, colours and key counts as JSON."""
        detail = json.dumps(self.snapshot.summary(), separators=(",", ":"))
        return Response.success(detail, verb=command.verb)

    @handles("GET_FULL_STATE")
    def get_full_state(self, command: Command) -> Response:
        """Report the whole snapshot as JSON."""
        return Response.success(self.snapshot.model_dump_json(), verb=command.verb)

    @handles("FACTORY_RESET")
    def factory_reset(self, command: Command) -> Response:
        """Restore defaults and discard the saved state."""
        self._state.reset()
        self._notify(
            "amctl_ui_changed", setting="reset", state=self.snapshot.model_dump(mode="json")
        )
        return Response.success("Factory reset complete", verb=command.verb)
