"""Config file discovery.

Lookup order for enginectl.toml:

1. ``ENGINECTL_CONFIG`` env var (must point at an existing file)
2. Walk up from the working directory, similar to how git finds .git/
3. ``$XDG_CONFIG_HOME/enginectl/enginectl.toml`` (``~/.config`` fallback)
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "enginectl.toml"
CONFIG_ENV_VAR = "ENGINECTL_CONFIG"


def user_config_dir() -> Path:
    """Per-user enginectl configuration directory."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "enginectl"


def find_config(start: Path | None = None) -> Path | None:
    """Locate enginectl.toml, or return None if there is none."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    user_file = user_config_dir() / CONFIG_FILENAME
    if user_file.is_file():
        return user_file
    return None
