"""Tests for AmSettings — unified settings with TOML source."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from amctl.config.settings import AmSettings


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AMCTL_CONFIG", raising=False)
    monkeypatch.delenv("AMCTL_HOME", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


class TestAmSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = AmSettings.from_cli(home=tmp_path)
        assert settings.home == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.sync is False
        assert settings.socket.enabled is True
        assert settings.poller.interval == 0.1
        assert settings.foreground.handoff_timeout == 1.5
        assert settings.client.timeout == 3.0
        assert settings.plugins.desktop is True

    def test_home_defaults_to_user_home(self) -> None:
        assert AmSettings.from_cli().home == Path.home()

    def test_frozen(self, tmp_path: Path) -> None:
        settings = AmSettings.from_cli(home=tmp_path)
        with pytest.raises(ValidationError):
            settings.verbose = True  # type: ignore[misc]


class TestDerivedPaths:
    def test_channel_paths(self, tmp_path: Path) -> None:
        settings = AmSettings.from_cli(home=tmp_path)
        ipc = tmp_path / ".amctl"
        assert settings.ipc_dir == ipc
        assert settings.command_path == ipc / "am_command"
        assert settings.result_path == ipc / "am_result"
        assert settings.url_path == ipc / "url_to_open"
        assert settings.socket_path == ipc / "am.sock"
        assert settings.state_path == ipc / "ui_config.json"
        assert settings.profiles_path == ipc / "profiles"
        assert settings.plugins_path == ipc / "plugins"
        assert settings.exports_path == ipc / "exports"

    def test_renamed_ipc_dir(self, tmp_path: Path) -> None:
        settings = AmSettings.from_cli(home=tmp_path, paths={"ipc_dir": "bridge"})
        assert settings.socket_path == tmp_path / "bridge" / "am.sock"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "amctl.toml").write_text(
            "[poller]\ninterval = 0.5\n[socket]\nmax_workers = 2\n"
        )
        settings = AmSettings.from_cli(home=tmp_path)
        assert settings.poller.interval == 0.5
        assert settings.socket.max_workers == 2
        assert settings.socket.read_timeout == 2.0  # default preserved
        assert settings.config_path == tmp_path / "amctl.toml"

    def test_found_by_walking_up(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "amctl.toml").write_text("[plugins]\ndesktop = false\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert AmSettings.from_cli(home=tmp_path).plugins.desktop is False

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "bridge.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[client]\ntimeout = 10.0\n")
        settings = AmSettings.from_cli(config_path=str(custom), home=tmp_path)
        assert settings.client.timeout == 10.0
        assert settings.config_path == custom

    def test_missing_explicit_config_uses_defaults(self, tmp_path: Path) -> None:
        settings = AmSettings.from_cli(config_path=str(tmp_path / "nope.toml"), home=tmp_path)
        assert settings.config_path is None

    def test_invalid_toml(self, tmp_path: Path) -> None:
        import click

        (tmp_path / "amctl.toml").write_text("[poller\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            AmSettings.from_cli(home=tmp_path)


class TestPriority:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = AmSettings.from_cli(home=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AMCTL_SYNC", "true")
        assert AmSettings.from_cli(home=tmp_path).sync is True

    def test_nested_env_var_beats_toml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "amctl.toml").write_text("[poller]\ninterval = 0.5\n")
        monkeypatch.setenv("AMCTL_POLLER__INTERVAL", "0.25")
        assert AmSettings.from_cli(home=tmp_path).poller.interval == 0.25

    def test_home_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AMCTL_HOME", str(tmp_path / "elsewhere"))
        assert AmSettings.from_cli().home == tmp_path / "elsewhere"


class TestValidation:
    def test_handoff_must_beat_client_timeout(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="handoff_timeout"):
            AmSettings.from_cli(
                home=tmp_path, foreground={"handoff_timeout": 5.0}, client={"timeout": 3.0}
            )

    def test_interval_must_be_positive(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            AmSettings.from_cli(home=tmp_path, poller={"interval": 0})
