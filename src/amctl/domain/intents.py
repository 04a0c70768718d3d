"""Structured description of a privileged "start" action.

An :class:`ActionDescription` is what the activity proxy hands to the
platform's identity-stamping capability. It carries no behaviour beyond
rendering itself the way ``am start`` reports an intent.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

ACTION_VIEW = "android.intent.action.VIEW"
ACTION_MAIN = "android.intent.action.MAIN"

WEB_SCHEMES = ("http://", "https://")

Extra = str | bool | int


def is_web_url(value: str) -> bool:
    """Whether *value* is a bare ``http://`` or ``https://`` URL."""
    return value.lower().startswith(WEB_SCHEMES)


class ActionDescription(BaseModel):
    """Action name, data URI, MIME type, target component, categories and extras."""

    model_config = {"frozen": True}

    action: str | None = None
    data: str | None = None
    mime_type: str | None = None
    package: str | None = None
    class_name: str | None = None
    categories: tuple[str, ...] = ()
    extras: dict[str, Extra] = Field(default_factory=dict)

    @property
    def component(self) -> str | None:
        """``package/class`` when a class is targeted, else None."""
        if self.package and self.class_name:
            return f"{self.package}/{self.class_name}"
        return None

    @property
    def is_view_url(self) -> bool:
        """A plain VIEW of a web URL with nothing else attached."""
        return (
            self.action == ACTION_VIEW
            and self.data is not None
            and is_web_url(self.data)
            and self.component is None
            and not self.extras
        )

    def describe(self) -> str:
        """Render as ``Intent { act=... dat=... }``."""
        parts: list[str] = []
        if self.action:
            parts.append(f"act={self.action}")
        if self.categories:
            parts.append(f"cat=[{','.join(self.categories)}]")
        if self.data:
            parts.append(f"dat={self.data}")
        if self.mime_type:
            parts.append(f"typ={self.mime_type}")
        if self.component:
            parts.append(f"cmp={self.component}")
        elif self.package:
            parts.append(f"pkg={self.package}")
        if self.extras:
            parts.append("(has extras)")
        return "Intent { " + " ".join(parts) + " }"
