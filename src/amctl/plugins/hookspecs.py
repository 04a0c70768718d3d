"""Pluggy hook specifications for injected platform capabilities.

Two capability hooks are called synchronously on the foreground worker and
decide the outcome of a command:

- ``amctl_open_url``: the fast-path viewer.
- ``amctl_start_activity``: executes an action under the host's identity.

Three notification hooks are dispatched through the HookBus; their failures
are logged and never change a response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from amctl.domain.intents import ActionDescription

hookspec = pluggy.HookspecMarker("amctl")


class AmctlHookSpec:
    """Hook specifications for the amctl plugin system."""

    @hookspec(firstresult=True)
    def amctl_open_url(self, url: str) -> bool | None:
        """Present a viewer for *url*. Return True when handled."""

    @hookspec(firstresult=True)
    def amctl_start_activity(self, action: ActionDescription) -> bool | None:
        """Execute *action* attributed to the host application.

        Return True when the platform accepted it, False or None when no
        target could handle it. Raise ``PlatformRejected`` to report a
        specific reason.
        """

    @hookspec
    def amctl_show_toast(self, message: str) -> None:
        """Show a short user-visible message."""

    @hookspec
    def amctl_evaluate_script(self, script: str) -> str | None:
        """Evaluate *script* in the UI overlay; the result is only logged."""

    @hookspec
    def amctl_ui_changed(self, setting: str, state: dict[str, Any]) -> None:
        """Called after a UI setting changed and the snapshot was persisted."""
