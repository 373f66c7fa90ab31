"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, enginectl.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ConnectionsConfig(BaseModel):
    """[connections] section."""

    model_config = {"frozen": True}

    ssh_mode: str = ""
    default_port: int = Field(default=22, ge=0, le=65535)
    registry_path: Path | None = None
