"""Extension layer — platform capabilities via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Notification hook failures are warnings, never errors.
"""

from amctl.plugins.hook_bus import HookBus
from amctl.plugins.manager import PluginManager

__all__ = ["HookBus", "PluginManager"]
