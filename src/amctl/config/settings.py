"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``AMCTL_*`` prefix, nested sections via ``__``
  3. TOML file    — ``amctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`amctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from amctl.config.discovery import find_config
from amctl.config.models import (
    ClientConfig,
    ForegroundConfig,
    PathsConfig,
    PluginsConfig,
    PollerConfig,
    SocketConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``amctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class AmSettings(BaseSettings):
    """Unified settings for the bridge and its CLI.

    Attributes:
        home: Directory the IPC directory lives under.
        config_path: The TOML file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "AMCTL_",
        "env_nested_delimiter": "__",
    }

    home: Path = Field(default_factory=Path.home)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False

    # --- TOML sections ---
    paths: PathsConfig = Field(default_factory=PathsConfig)
    socket: SocketConfig = Field(default_factory=SocketConfig)
    poller: PollerConfig = Field(default_factory=PollerConfig)
    foreground: ForegroundConfig = Field(default_factory=ForegroundConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @model_validator(mode="after")
    def _handoff_shorter_than_client(self) -> AmSettings:
        if self.foreground.handoff_timeout >= self.client.timeout:
            msg = (
                f"foreground.handoff_timeout ({self.foreground.handoff_timeout}) must be "
                f"shorter than client.timeout ({self.client.timeout})"
            )
            raise ValueError(msg)
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        home: Path | None = None,
        **cli_flags: Any,
    ) -> AmSettings:
        """Construct settings from a CLI invocation.

        Discovers ``amctl.toml`` via walk-up (or explicit *config_path*)
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config()

        overrides: dict[str, Any] = dict(cli_flags)
        if home is not None:
            overrides["home"] = home

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    # --- Derived paths ---

    @property
    def ipc_dir(self) -> Path:
        return self.home / self.paths.ipc_dir

    @property
    def command_path(self) -> Path:
        return self.ipc_dir / self.paths.command_file

    @property
    def result_path(self) -> Path:
        return self.ipc_dir / self.paths.result_file

    @property
    def url_path(self) -> Path:
        return self.ipc_dir / self.paths.url_file

    @property
    def socket_path(self) -> Path:
        return self.ipc_dir / self.paths.socket_name

    @property
    def state_path(self) -> Path:
        return self.ipc_dir / self.paths.state_file

    @property
    def profiles_path(self) -> Path:
        return self.ipc_dir / self.paths.profiles_dir

    @property
    def exports_path(self) -> Path:
        return self.ipc_dir / self.paths.exports_dir

    @property
    def plugins_path(self) -> Path:
        return self.ipc_dir / self.paths.plugins_dir
