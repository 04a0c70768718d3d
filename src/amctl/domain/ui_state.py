"""Live UI state snapshot and the validators that guard every mutation.

The snapshot is immutable; handlers build a new one with ``model_copy``
and hand it to the state store. Only foreground handlers ever do this, so
there is a single writer and no locking.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, Field

from amctl.domain.errors import InvalidArgument, UsageError

MIN_TEXT_SIZE = 14
MAX_TEXT_SIZE = 56
DEFAULT_TEXT_SIZE = 28

DEFAULT_BACKGROUND = "#000000"
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_KEY_BACKGROUND = "#333333"
DEFAULT_KEY_TEXT_COLOR = "#FFFFFF"

ROWS = (1, 2)
OVERLAY_SIZES = ("full", "half", "quarter")
OVERLAY_POSITIONS = ("top", "bottom", "left", "right", "center")

OverlaySize = Literal["full", "half", "quarter"]
OverlayPosition = Literal["top", "bottom", "left", "right", "center"]

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]{6}")


class KeyButton(BaseModel):
    """One on-screen extra key: its label and the key code or sequence it sends."""

    model_config = {"frozen": True}

    label: str
    action: str


def _stock_row(labels: list[str]) -> list[KeyButton]:
    return [KeyButton(label=label, action=label) for label in labels]


def default_row1() -> list[KeyButton]:
    return _stock_row(["ESC", "CTRL", "ALT", "TAB", "HOME", "UP", "END", "PGUP"])


def default_row2() -> list[KeyButton]:
    return _stock_row(
        ["-", "/", "\\", "|", "LEFT", "DOWN", "RIGHT", "PGDN", "~", "_", ":", '"']
    )


class UIStateSnapshot(BaseModel):
    """Named UI settings and their current values.

    Attributes:
        text_size: Terminal font size in sp.
        background: Terminal background colour.
        text_color: Terminal foreground colour.
        key_background: Extra-key button background.
        key_text_color: Extra-key label colour.
        row1: First extra-key row, in display order.
        row2: Second extra-key row, in display order.
        overlay_visible: Whether the custom UI overlay is shown.
        overlay_source: File the overlay was last loaded from.
        overlay_size: Share of the screen the overlay occupies.
        overlay_position: Where the overlay is anchored.
        overlay_opacity: Overlay alpha.
    """

    model_config = {"frozen": True}

    text_size: int = Field(default=DEFAULT_TEXT_SIZE, ge=MIN_TEXT_SIZE, le=MAX_TEXT_SIZE)
    background: str = Field(default=DEFAULT_BACKGROUND, pattern=_HEX_COLOR.pattern)
    text_color: str = Field(default=DEFAULT_TEXT_COLOR, pattern=_HEX_COLOR.pattern)
    key_background: str = Field(default=DEFAULT_KEY_BACKGROUND, pattern=_HEX_COLOR.pattern)
    key_text_color: str = Field(default=DEFAULT_KEY_TEXT_COLOR, pattern=_HEX_COLOR.pattern)
    row1: tuple[KeyButton, ...] = Field(default_factory=lambda: tuple(default_row1()))
    row2: tuple[KeyButton, ...] = Field(default_factory=lambda: tuple(default_row2()))
    overlay_visible: bool = False
    overlay_source: str | None = None
    overlay_size: OverlaySize = "full"
    overlay_position: OverlayPosition = "bottom"
    overlay_opacity: float = Field(default=1.0, ge=0.0, le=1.0)

    def keys(self, row: int) -> tuple[KeyButton, ...]:
        return self.row1 if row == 1 else self.row2

    def _with_row(self, row: int, keys: tuple[KeyButton, ...]) -> UIStateSnapshot:
        return self.model_copy(update={"row1" if row == 1 else "row2": keys})

    def with_key_added(self, row: int, key: KeyButton) -> UIStateSnapshot:
        return self._with_row(row, (*self.keys(row), key))

    def with_key_removed(self, row: int, label: str) -> UIStateSnapshot:
        """Drop the first key labelled *label* from *row*.

        Raises:
            InvalidArgument: If the row has no such key.
        """
        keys = list(self.keys(row))
        for index, key in enumerate(keys):
            if key.label == label:
                del keys[index]
                return self._with_row(row, tuple(keys))
        msg = f"Key '{label}' not found in row {row}"
        raise InvalidArgument(msg)

    def with_row_cleared(self, row: int) -> UIStateSnapshot:
        return self._with_row(row, ())

    def summary(self) -> dict[str, Any]:
        """Compact view reported by the state query verb."""
        return {
            "text_size": self.text_size,
            "background": self.background,
            "text_color": self.text_color,
            "rows1_count": len(self.row1),
            "rows2_count": len(self.row2),
            "overlay_visible": self.overlay_visible,
        }


# ---------------------------------------------------------------------------
# Argument validators
# ---------------------------------------------------------------------------


def parse_row(value: str, verb: str | None = None) -> int:
    """Accept row 1 or 2.

    With *verb*, a non-numeric row is a usage error for that verb, for
    verbs whose only argument is the row.
    """
    try:
        row = int(value)
    except ValueError:
        if verb is not None:
            raise UsageError(verb, "row") from None
        raise InvalidArgument("Invalid row number") from None
    if row not in ROWS:
        raise InvalidArgument("Row must be 1 or 2")
    return row


def parse_hex_color(value: str, verb: str, usage: str = "#RRGGBB") -> str:
    """Accept ``#RRGGBB`` only.

    A value of the wrong shape is a usage error; the right shape with
    non-hex digits is an invalid colour.
    """
    if len(value) != 7 or not value.startswith("#"):
        raise UsageError(verb, usage)
    if not _HEX_DIGITS.fullmatch(value[1:]):
        msg = f"Invalid color: {value}"
        raise InvalidArgument(msg)
    return value


def parse_text_size(value: str, verb: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise UsageError(verb, "sp") from None
    if not MIN_TEXT_SIZE <= size <= MAX_TEXT_SIZE:
        msg = f"Size must be between {MIN_TEXT_SIZE} and {MAX_TEXT_SIZE}"
        raise InvalidArgument(msg)
    return size


def parse_opacity(value: str, verb: str) -> float:
    """Accept a float in [0.0, 1.0]; anything else is a usage error."""
    try:
        opacity = float(value)
    except ValueError:
        raise UsageError(verb, "0.0-1.0") from None
    if not 0.0 <= opacity <= 1.0:
        raise UsageError(verb, "0.0-1.0")
    return opacity


def parse_choice(value: str, choices: tuple[str, ...], verb: str) -> str:
    choice = value.lower()
    if choice not in choices:
        raise UsageError(verb, "|".join(choices))
    return choice
