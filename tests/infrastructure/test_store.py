"""Tests for the YAML-backed connection store."""

from __future__ import annotations

from pathlib import Path

import pytest

from enginectl.domain.errors import PersistenceError
from enginectl.domain.registry import ConnectionRecord, ConnectionRegistry
from enginectl.infrastructure.store import ConnectionStore


class TestLoad:
    def test_missing_file_is_empty(self, store: ConnectionStore) -> None:
        registry = store.load()
        assert registry.active_service == ""
        assert registry.service_destinations is None

    def test_empty_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "connections.yaml"
        path.write_text("")
        assert ConnectionStore(path).load() == ConnectionRegistry()

    def test_reads_records(self, tmp_path: Path) -> None:
        path = tmp_path / "connections.yaml"
        path.write_text(
            "active_service: laptop\n"
            "service_destinations:\n"
            "  laptop:\n"
            "    uri: ssh://root@h:22/run/podman/podman.sock\n"
            "    identity: ~/.ssh/id\n"
        )
        registry = ConnectionStore(path).load()
        assert registry.active_service == "laptop"
        assert registry.service_destinations == {
            "laptop": ConnectionRecord(
                uri="ssh://root@h:22/run/podman/podman.sock", identity="~/.ssh/id"
            )
        }

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "connections.yaml"
        path.write_text("active_service: [unclosed\n")
        with pytest.raises(PersistenceError, match="invalid YAML"):
            ConnectionStore(path).load()

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "connections.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(PersistenceError, match="mapping"):
            ConnectionStore(path).load()

    def test_wrong_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "connections.yaml"
        path.write_text("service_destinations:\n  laptop: 42\n")
        with pytest.raises(PersistenceError):
            ConnectionStore(path).load()


class TestWrite:
    def test_creates_parent_dirs(self, store: ConnectionStore) -> None:
        store.write(
            ConnectionRegistry(
                active_service="a",
                service_destinations={"a": ConnectionRecord(uri="tcp://h:1")},
            )
        )
        assert store.path.is_file()

    def test_write_then_load(self, store: ConnectionStore) -> None:
        registry = ConnectionRegistry(
            active_service="b",
            service_destinations={
                "a": ConnectionRecord(uri="unix:///run/x.sock"),
                "b": ConnectionRecord(uri="ssh://h", identity="~/.ssh/id"),
            },
        )
        store.write(registry)
        assert store.load() == registry

    def test_omits_missing_identity(self, store: ConnectionStore) -> None:
        store.write(
            ConnectionRegistry(
                active_service="a",
                service_destinations={"a": ConnectionRecord(uri="tcp://h:1")},
            )
        )
        assert "identity" not in store.path.read_text()

    def test_no_temp_files_left(self, store: ConnectionStore) -> None:
        store.write(ConnectionRegistry())
        assert [p.name for p in store.path.parent.iterdir()] == ["connections.yaml"]

    def test_unwritable_target(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = ConnectionStore(blocker / "connections.yaml")
        with pytest.raises(PersistenceError, match="cannot write"):
            store.write(ConnectionRegistry())
