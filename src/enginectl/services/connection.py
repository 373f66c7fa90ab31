"""ConnectionService — record remote service destinations.

Pipeline: TRANSLATE → RESOLVE → SETUP (ssh only) → UPSERT → WRITE

The registry is loaded, mutated in memory, and written back once per
call.  A write failure is reported as-is; nothing is rolled back.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from enginectl.domain.destinations import (
    EndpointDescriptor,
    ResolveOptions,
    StatFn,
    resolve_destination,
    translate_destination,
)
from enginectl.domain.errors import DestinationError
from enginectl.domain.registry import upsert_connection
from enginectl.domain.types import Scheme
from enginectl.infrastructure.ssh import OfflineSshSetup, SshSetup, define_mode
from enginectl.services.base import BaseService
from enginectl.services.result import ServiceResult

if TYPE_CHECKING:
    from enginectl.config.settings import EngineSettings
    from enginectl.infrastructure.store import ConnectionStore

logger = logging.getLogger(__name__)


class ConnectionService(BaseService):
    """Adds named connections to the registry."""

    def __init__(
        self,
        store: ConnectionStore,
        settings: EngineSettings,
        *,
        stat: StatFn = os.stat,
        ssh_setup: SshSetup | None = None,
    ) -> None:
        super().__init__(store, settings)
        self._stat = stat
        self._ssh_setup = ssh_setup or OfflineSshSetup()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, name: str, destination: str, options: ResolveOptions) -> ServiceResult:
        """Validate *destination* and record it as connection *name*.

        The first connection recorded becomes the active service;
        afterwards only ``options.make_default`` moves the pointer.
        """
        op = "connection_add"
        warnings: list[str] = []

        try:
            mode = define_mode(self._settings.connections.ssh_mode)
            endpoint = resolve_destination(
                destination, options, stat=self._stat, warnings=warnings
            )
            if endpoint.scheme == Scheme.SSH:
                endpoint = self._ssh_setup.create(
                    name, endpoint, options, mode=mode, warnings=warnings
                )
            data = self._record(
                name, endpoint, make_default=options.make_default, warnings=warnings
            )
        except DestinationError as exc:
            return ServiceResult.failure(op, exc, warnings)

        return ServiceResult.success(op, data, warnings)

    def create_context(self, name: str, docker: str = "") -> ServiceResult:
        """Record *name* from a legacy ``--docker host=<dest>`` description.

        Never changes the active service unless the registry was empty.
        """
        op = "context_create"
        warnings: list[str] = []

        try:
            destination = translate_destination(docker)
            endpoint = resolve_destination(destination, stat=self._stat, warnings=warnings)
            data = self._record(name, endpoint, make_default=False, warnings=warnings)
        except DestinationError as exc:
            return ServiceResult.failure(op, exc, warnings)

        return ServiceResult.success(op, data, warnings)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(
        self,
        name: str,
        endpoint: EndpointDescriptor,
        *,
        make_default: bool,
        warnings: list[str],
    ) -> dict[str, object]:
        registry = self._store.load()
        previous = upsert_connection(registry, name, endpoint, make_default=make_default)
        if previous is not None and previous.uri != endpoint.uri:
            warnings.append(f'Replaced connection "{name}" (was {previous.uri})')
        self._store.write(registry)

        logger.debug("connection_added name=%s uri=%s", name, endpoint.uri)
        data: dict[str, object] = {
            "name": name,
            "uri": endpoint.uri,
            "default": registry.active_service == name,
            "registry_path": str(self._store.path),
        }
        if endpoint.identity is not None:
            data["identity"] = endpoint.identity
        return data
