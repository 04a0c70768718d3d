"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, amctl.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PathsConfig(BaseModel):
    """[paths] section. File names are relative to ``ipc_dir``."""

    model_config = {"frozen": True}

    ipc_dir: str = ".amctl"
    command_file: str = "am_command"
    result_file: str = "am_result"
    url_file: str = "url_to_open"
    socket_name: str = "am.sock"
    state_file: str = "ui_config.json"
    profiles_dir: str = "profiles"
    exports_dir: str = "exports"
    plugins_dir: str = "plugins"


class SocketConfig(BaseModel):
    """[socket] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    max_workers: int = Field(default=8, ge=1)
    read_timeout: float = Field(default=2.0, gt=0)
    max_request_bytes: int = Field(default=65536, ge=64)


class PollerConfig(BaseModel):
    """[poller] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    interval: float = Field(default=0.1, gt=0)


class ForegroundConfig(BaseModel):
    """[foreground] section."""

    model_config = {"frozen": True}

    handoff_timeout: float = Field(default=1.5, gt=0)


class ClientConfig(BaseModel):
    """[client] section."""

    model_config = {"frozen": True}

    timeout: float = Field(default=3.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    desktop: bool = True
    hook_workers: int = Field(default=2, ge=1)
