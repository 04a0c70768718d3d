"""Platform plugin loading.

The bridge's capabilities (open a URL, start an activity) and its
notification sinks are pluggy plugins. They come from three places, in
registration order:

1. built-ins registered by the caller (the desktop platform);
2. installed distributions exposing the ``amctl.plugins`` entry point,
   which must name a module or a plugin instance;
3. ``*.py`` modules in the local plugins directory, registered as modules:
   their hook implementations are module-level functions.

pluggy consults the most recently registered implementation first, so a
local plugin overrides an installed one, which overrides the built-in.
After loading, :meth:`PluginManager.report_capabilities` logs which plugin
answers each capability hook and warns about any that nothing answers;
commands that need such a hook will be rejected by the platform.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType

import pluggy

from amctl.plugins.hookspecs import AmctlHookSpec

PROJECT_NAME = "amctl"
ENTRY_POINT_GROUP = "amctl.plugins"
LOCAL_MODULE_PREFIX = "amctl_local_plugin_"

logger = logging.getLogger(__name__)


def _capability_hooks() -> tuple[str, ...]:
    """Names of the firstresult hooks, whose answer decides a command."""
    names = []
    for name, member in inspect.getmembers(AmctlHookSpec, inspect.isfunction):
        opts = getattr(member, f"{PROJECT_NAME}_spec", None) or {}
        if opts.get("firstresult"):
            names.append(name)
    return tuple(names)


CAPABILITY_HOOKS = _capability_hooks()


def _implements_hooks(module: ModuleType) -> bool:
    return any(
        getattr(obj, f"{PROJECT_NAME}_impl", None) is not None
        for _name, obj in inspect.getmembers(module, inspect.isfunction)
    )


def _import_local(path: Path) -> ModuleType | None:
    """Import one local plugin file; a broken file is logged and skipped."""
    module_name = f"{LOCAL_MODULE_PREFIX}{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning("Cannot import local plugin %s", path)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Failed to load local plugin %s", path, exc_info=True)
        return None
    return module


class PluginManager:
    """A pluggy manager preloaded with amctl's hook specifications."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(AmctlHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or getattr(plugin, "__name__", None) or type(plugin).__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        return [name for name, _plugin in self._pm.list_name_plugin()]

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local ones, then report coverage.

        Returns the names of every registered plugin.
        """
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if count:
            logger.debug("Loaded %d entry-point plugin(s)", count)
        if local_dir is not None:
            self._load_local(local_dir)
        self.report_capabilities()
        return self.list_plugin_names()

    def _load_local(self, local_dir: Path) -> None:
        if not local_dir.is_dir():
            return
        for path in sorted(local_dir.glob("*.py")):
            if path.name.startswith("_"):
                continue
            module = _import_local(path)
            if module is None:
                continue
            if not _implements_hooks(module):
                logger.info("Local plugin %s implements no amctl hooks, skipped", path.name)
                continue
            self.register_plugin(module, name=f"local:{path.stem}")

    def providers(self, hook_name: str) -> list[str]:
        """Plugins implementing *hook_name*, in the order pluggy consults them."""
        caller = getattr(self._pm.hook, hook_name, None)
        if caller is None:
            return []
        return [impl.plugin_name for impl in reversed(caller.get_hookimpls())]

    def has_impl(self, hook_name: str) -> bool:
        return bool(self.providers(hook_name))

    def report_capabilities(self) -> dict[str, str | None]:
        """Log which plugin answers each capability hook first.

        Returns a map of hook name to that plugin's name, or None when no
        plugin implements the hook.
        """
        report: dict[str, str | None] = {}
        for hook_name in CAPABILITY_HOOKS:
            if not self.has_impl(hook_name):
                logger.warning("No plugin provides %s; such commands will be rejected", hook_name)
                report[hook_name] = None
                continue
            first, *others = self.providers(hook_name)
            fallback = f" (falls back to {', '.join(others)})" if others else ""
            logger.info("%s provided by %s%s", hook_name, first, fallback)
            report[hook_name] = first
        return report
