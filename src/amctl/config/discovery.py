"""Locate ``amctl.toml``.

Search order, first hit wins:

1. ``AMCTL_CONFIG`` (an explicit file; if it does not exist, no config);
2. the working directory and each of its parents, the way git finds ``.git``;
3. the per-user file ``$XDG_CONFIG_HOME/amctl/amctl.toml``
   (``~/.config`` when ``XDG_CONFIG_HOME`` is unset).

``--config`` bypasses all of this; see :meth:`AmSettings.from_cli`.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "amctl.toml"
CONFIG_ENV_VAR = "AMCTL_CONFIG"


def user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "amctl" / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

    fallback = user_config_path()
    return fallback if fallback.is_file() else None
