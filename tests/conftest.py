"""Shared pytest fixtures for amctl tests."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pluggy
import pytest
from click.testing import CliRunner

from amctl.bridge.daemon import Bridge
from amctl.config.settings import AmSettings
from amctl.domain.errors import PlatformRejected
from amctl.domain.intents import ActionDescription
from amctl.infrastructure.state_store import ProfileStore, UiStateStore
from amctl.plugins.hook_bus import HookBus
from amctl.plugins.manager import PluginManager
from amctl.services.platform import Platform
from amctl.services.ui import UiStateHolder

hookimpl = pluggy.HookimplMarker("amctl")


class FakePlatform:
    """Platform plugin that records every capability call.

    ``accept`` controls what ``amctl_start_activity`` reports; setting
    ``reject_reason`` makes it raise PlatformRejected instead.
    """

    def __init__(self) -> None:
        self.urls: list[str] = []
        self.actions: list[ActionDescription] = []
        self.toasts: list[str] = []
        self.scripts: list[str] = []
        self.changes: list[tuple[str, dict[str, Any]]] = []
        self.accept = True
        self.reject_reason: str | None = None

    @hookimpl
    def amctl_open_url(self, url: str) -> bool:
        self.urls.append(url)
        return True

    @hookimpl
    def amctl_start_activity(self, action: ActionDescription) -> bool:
        if self.reject_reason:
            raise PlatformRejected(self.reject_reason)
        self.actions.append(action)
        return self.accept

    @hookimpl
    def amctl_show_toast(self, message: str) -> None:
        self.toasts.append(message)

    @hookimpl
    def amctl_evaluate_script(self, script: str) -> str:
        self.scripts.append(script)
        return "ok"

    @hookimpl
    def amctl_ui_changed(self, setting: str, state: dict[str, Any]) -> None:
        self.changes.append((setting, state))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def short_home() -> Generator[Path]:
    """A home directory with a short path.

    Unix socket paths are limited to about 100 bytes, which pytest's
    ``tmp_path`` can exceed.
    """
    base = "/tmp" if os.path.isdir("/tmp") else None
    path = Path(tempfile.mkdtemp(prefix="am-", dir=base))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def settings(short_home: Path) -> AmSettings:
    """Settings rooted at a private home, with fast polling and inline hooks."""
    return AmSettings(
        home=short_home,
        sync=True,
        poller={"interval": 0.02},
        client={"timeout": 3.0, "poll_interval": 0.02},
    )


@pytest.fixture
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def plugin_manager(fake_platform: FakePlatform) -> PluginManager:
    pm = PluginManager()
    pm.register_plugin(fake_platform, name="fake")
    return pm


@pytest.fixture
def platform(plugin_manager: PluginManager) -> Generator[Platform]:
    bus = HookBus(plugin_manager, sync=True)
    try:
        yield Platform(plugin_manager, bus)
    finally:
        bus.shutdown()


@pytest.fixture
def ui_state(tmp_path: Path) -> UiStateHolder:
    return UiStateHolder(UiStateStore(tmp_path / "ui_config.json"))


@pytest.fixture
def profile_store(tmp_path: Path) -> ProfileStore:
    return ProfileStore(tmp_path / "profiles")


@pytest.fixture
def bridge(settings: AmSettings, plugin_manager: PluginManager) -> Generator[Bridge]:
    """A started bridge with both transports and the fake platform."""
    b = Bridge(settings, plugin_manager=plugin_manager)
    b.start()
    try:
        yield b
    finally:
        b.stop()


@pytest.fixture
def _isolated_home(short_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the CLI at a private home and keep config discovery local.

    Use via ``@pytest.mark.usefixtures("_isolated_home")`` on command test
    classes.
    """
    monkeypatch.chdir(short_home)
    monkeypatch.setenv("AMCTL_HOME", str(short_home))
    monkeypatch.delenv("AMCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(short_home / "xdg"))


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo the root handler that CLI invocations install."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    am_level = logging.getLogger("amctl").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("amctl").setLevel(am_level)
