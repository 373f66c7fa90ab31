"""Tests for ConnectionService — add and create_context pipelines."""

from __future__ import annotations

from pathlib import Path

import pytest

from enginectl.config.settings import EngineSettings
from enginectl.domain.destinations import ResolveOptions
from enginectl.domain.registry import ConnectionRecord
from enginectl.infrastructure.store import ConnectionStore
from enginectl.services.connection import ConnectionService
from tests.conftest import MISSING_STAT, REGULAR_STAT, SOCKET_STAT


@pytest.fixture
def service(store: ConnectionStore, settings: EngineSettings) -> ConnectionService:
    return ConnectionService(store, settings, stat=SOCKET_STAT)


class TestAdd:
    def test_first_connection_becomes_default(
        self, service: ConnectionService, store: ConnectionStore
    ) -> None:
        result = service.add("laptop", "root@server", ResolveOptions())
        assert result.ok, result.error
        assert result.op == "connection_add"
        assert result.data["name"] == "laptop"
        assert result.data["uri"] == "ssh://root@server/run/podman/podman.sock"
        assert result.data["default"] is True
        assert result.data["registry_path"] == str(store.path)

        registry = store.load()
        assert registry.active_service == "laptop"

    def test_second_connection_not_default(
        self, service: ConnectionService, store: ConnectionStore
    ) -> None:
        service.add("first", "tcp://one:1", ResolveOptions())
        result = service.add("second", "tcp://two:2", ResolveOptions())
        assert result.ok
        assert result.data["default"] is False
        assert store.load().active_service == "first"

    def test_make_default_moves_pointer(
        self, service: ConnectionService, store: ConnectionStore
    ) -> None:
        service.add("first", "tcp://one:1", ResolveOptions())
        result = service.add("second", "tcp://two:2", ResolveOptions(make_default=True))
        assert result.data["default"] is True
        assert store.load().active_service == "second"

    def test_identity_recorded_when_supplied(
        self, service: ConnectionService, store: ConnectionStore
    ) -> None:
        options = ResolveOptions(identity="~/.ssh/dev_rsa", identity_supplied=True)
        result = service.add("testing", "ssh://root@server:2222", options)
        assert result.data["identity"] == "~/.ssh/dev_rsa"
        registry = store.load()
        assert registry.service_destinations is not None
        assert registry.service_destinations["testing"] == ConnectionRecord(
            uri="ssh://root@server:2222/run/podman/podman.sock",
            identity="~/.ssh/dev_rsa",
        )

    def test_unix_missing_socket_warns(self, store: ConnectionStore, settings) -> None:
        service = ConnectionService(store, settings, stat=MISSING_STAT)
        result = service.add("local", "unix:///does/not/exist", ResolveOptions())
        assert result.ok
        assert result.data["uri"] == "unix:///does/not/exist"
        assert result.warnings == ['"/does/not/exist" does not exist']

    def test_unix_regular_file_fails(self, store: ConnectionStore, settings) -> None:
        service = ConnectionService(store, settings, stat=REGULAR_STAT)
        result = service.add("local", "unix:///etc/hostname", ResolveOptions())
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_DESTINATION"
        assert not store.path.exists()

    def test_tcp_without_port_fails(self, service: ConnectionService) -> None:
        result = service.add("debug", "tcp://localhost", ResolveOptions())
        assert result.error is not None
        assert result.error.code == "INVALID_DESTINATION"

    def test_tcp_identity_unsupported(self, service: ConnectionService) -> None:
        options = ResolveOptions(identity="k", identity_supplied=True)
        result = service.add("debug", "tcp://localhost:8080", options)
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED_OPTION"

    def test_overwrite_reports_previous_uri(self, service: ConnectionService) -> None:
        service.add("box", "tcp://old:1", ResolveOptions())
        result = service.add("box", "tcp://new:1", ResolveOptions())
        assert result.ok
        assert result.warnings == ['Replaced connection "box" (was tcp://old:1)']

    def test_identical_readd_is_silent(self, service: ConnectionService) -> None:
        service.add("box", "tcp://same:1", ResolveOptions())
        result = service.add("box", "tcp://same:1", ResolveOptions())
        assert result.warnings == []

    def test_invalid_ssh_mode(self, store: ConnectionStore, config_home: Path) -> None:
        settings = EngineSettings.from_cli(connections={"ssh_mode": "bogus"})
        result = ConnectionService(store, settings).add("a", "tcp://h:1", ResolveOptions())
        assert result.error is not None
        assert result.error.code == "INVALID_OPTION"

    def test_persistence_failure_surfaces(
        self, tmp_path: Path, settings: EngineSettings
    ) -> None:
        bad = tmp_path / "registry.yaml"
        bad.write_text("- not\n- a mapping\n")
        service = ConnectionService(ConnectionStore(bad), settings)
        result = service.add("a", "tcp://h:1", ResolveOptions())
        assert result.error is not None
        assert result.error.code == "PERSISTENCE_ERROR"

    def test_custom_ssh_setup_used(self, store: ConnectionStore, settings) -> None:
        calls: list[str] = []

        class RecordingSetup:
            def create(self, name, endpoint, options, *, mode, warnings):
                calls.append(name)
                return endpoint

        service = ConnectionService(store, settings, ssh_setup=RecordingSetup())
        result = service.add("laptop", "server", ResolveOptions())
        assert calls == ["laptop"]
        assert result.data["uri"] == "ssh://server"

    def test_ssh_setup_skipped_for_tcp(self, store: ConnectionStore, settings) -> None:
        calls: list[str] = []

        class RecordingSetup:
            def create(self, name, endpoint, options, *, mode, warnings):
                calls.append(name)
                return endpoint

        ConnectionService(store, settings, ssh_setup=RecordingSetup()).add(
            "debug", "tcp://h:1", ResolveOptions()
        )
        assert calls == []


class TestCreateContext:
    def test_translates_docker_host(
        self, service: ConnectionService, store: ConnectionStore
    ) -> None:
        result = service.create_context("build", "host=tcp://build:2376")
        assert result.ok
        assert result.op == "context_create"
        assert result.data["uri"] == "tcp://build:2376"
        assert store.load().active_service == "build"

    def test_never_moves_default(
        self, service: ConnectionService, store: ConnectionStore
    ) -> None:
        service.add("first", "tcp://one:1", ResolveOptions())
        service.create_context("second", "host=tcp://two:2")
        assert store.load().active_service == "first"

    def test_extra_docker_options_rejected(self, service: ConnectionService) -> None:
        result = service.create_context("build", "host=tcp://build:2376,ca=~/ca")
        assert result.error is not None
        assert result.error.code == "UNSUPPORTED_OPTION"
        assert "ca=~/ca" in result.error.message

    def test_bad_key_rejected(self, service: ConnectionService) -> None:
        result = service.create_context("build", "user=foo")
        assert result.error is not None
        assert result.error.code == "INVALID_OPTION"

    def test_bare_host_defaults_to_ssh(self, service: ConnectionService) -> None:
        result = service.create_context("remote", "host=root@server")
        assert result.data["uri"] == "ssh://root@server"
