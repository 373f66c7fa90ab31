"""Shared pytest fixtures and test helpers for enginectl tests."""

from __future__ import annotations

import os
import stat
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from enginectl.config.settings import EngineSettings
from enginectl.infrastructure.store import ConnectionStore


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate XDG config lookups and the working directory under tmp_path.

    The registry then lives at ``<tmp>/xdg/enginectl/connections.yaml``.
    """
    xdg = tmp_path / "xdg"
    xdg.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.delenv("ENGINECTL_CONFIG", raising=False)
    monkeypatch.delenv("ENGINECTL_CONNECTIONS__REGISTRY_PATH", raising=False)
    monkeypatch.delenv("ENGINECTL_CONNECTIONS__SSH_MODE", raising=False)
    monkeypatch.chdir(tmp_path)
    return xdg


@pytest.fixture
def registry_file(config_home: Path) -> Path:
    """Path of the registry file the CLI writes in an isolated config home."""
    return config_home / "enginectl" / "connections.yaml"


@pytest.fixture
def settings(config_home: Path) -> EngineSettings:
    """Default settings resolved inside the isolated config home."""
    return EngineSettings.from_cli()


@pytest.fixture
def store(tmp_path: Path) -> ConnectionStore:
    """A store writing to a fresh file under tmp_path."""
    return ConnectionStore(tmp_path / "registry" / "connections.yaml")


# ---------------------------------------------------------------------------
# Fake stat callables
# ---------------------------------------------------------------------------


def fake_stat(mode: int) -> Callable[[str], os.stat_result]:
    """A stat callable reporting every path as having *mode*."""

    def _stat(path: str) -> os.stat_result:
        return os.stat_result((mode, 0, 0, 1, 0, 0, 0, 0, 0, 0))

    return _stat


def raising_stat(exc: OSError) -> Callable[[str], os.stat_result]:
    """A stat callable that always raises *exc*."""

    def _stat(path: str) -> os.stat_result:
        raise exc

    return _stat


SOCKET_STAT = fake_stat(stat.S_IFSOCK | 0o660)
REGULAR_STAT = fake_stat(stat.S_IFREG | 0o644)
MISSING_STAT = raising_stat(FileNotFoundError(2, "No such file or directory"))
