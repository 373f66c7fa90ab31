"""SSH connection setup collaborator.

The ssh branch of ``connection add`` hands the resolved endpoint to an
:class:`SshSetup` implementation before it is recorded.  The shipped
:class:`OfflineSshSetup` never opens a network connection; it only fills
in the fields a remote handshake would otherwise have supplied.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

from enginectl.domain.destinations import DEFAULT_SSH_PORT, EndpointDescriptor, ResolveOptions
from enginectl.domain.errors import InvalidOptionError

logger = logging.getLogger(__name__)

ROOT_SOCKET_PATH = "/run/podman/podman.sock"


class SshMode(StrEnum):
    """SSH client implementation selected by the ``ssh_mode`` setting."""

    GOLANG = "golang"
    NATIVE = "native"


def define_mode(value: str) -> SshMode:
    """Map the configured ssh mode to :class:`SshMode`.

    Empty selects the default client.  Matching is case-insensitive.
    """
    if value == "":
        return SshMode.GOLANG
    try:
        return SshMode(value.lower())
    except ValueError:
        msg = f"invalid ssh mode {value!r}"
        raise InvalidOptionError(msg) from None


class SshSetup(Protocol):
    """Prepares an ssh endpoint for recording."""

    def create(
        self,
        name: str,
        endpoint: EndpointDescriptor,
        options: ResolveOptions,
        *,
        mode: SshMode,
        warnings: list[str],
    ) -> EndpointDescriptor:
        """Return the endpoint to record for connection *name*."""
        ...


class OfflineSshSetup:
    """Fill in port and socket path without contacting the remote host."""

    def create(
        self,
        name: str,
        endpoint: EndpointDescriptor,
        options: ResolveOptions,
        *,
        mode: SshMode,
        warnings: list[str],
    ) -> EndpointDescriptor:
        updates: dict[str, str] = {}
        if not endpoint.port and options.port != DEFAULT_SSH_PORT:
            updates["port"] = str(options.port)

        if not endpoint.path:
            if endpoint.user in (None, "", "root"):
                updates["path"] = ROOT_SOCKET_PATH
            else:
                message = (
                    f"No socket path given for user {endpoint.user!r}; "
                    "pass --socket-path to record the remote service socket"
                )
                logger.warning(message)
                warnings.append(message)

        logger.debug("ssh setup for %s (mode=%s): %s", name, mode, updates or "unchanged")
        return endpoint.model_copy(update=updates) if updates else endpoint
