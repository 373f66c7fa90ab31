"""Connection registry model and the upsert rule.

The registry is two plain fields: a name -> record mapping and the name
of the active service.  The first connection ever added becomes active;
after that the pointer only moves on an explicit make-default request.
"""

from __future__ import annotations

from pydantic import BaseModel

from enginectl.domain.destinations import EndpointDescriptor


class ConnectionRecord(BaseModel):
    """A persisted connection entry."""

    model_config = {"frozen": True}

    uri: str
    identity: str | None = None


class ConnectionRegistry(BaseModel):
    """Name-keyed connections plus the active service pointer.

    ``service_destinations`` is None until the first connection is added.
    ``active_service`` is the empty string when nothing is active.
    """

    active_service: str = ""
    service_destinations: dict[str, ConnectionRecord] | None = None


def upsert_connection(
    registry: ConnectionRegistry,
    name: str,
    endpoint: EndpointDescriptor,
    *,
    make_default: bool = False,
) -> ConnectionRecord | None:
    """Insert or replace *name* in *registry*, in place.

    Re-adding an existing name replaces its record (last write wins).
    Returns the record that was replaced, or None for a new name.
    """
    record = ConnectionRecord(uri=endpoint.uri, identity=endpoint.identity)

    if not registry.service_destinations:
        registry.service_destinations = {name: record}
        registry.active_service = name
        return None

    previous = registry.service_destinations.get(name)
    registry.service_destinations[name] = record
    if make_default:
        registry.active_service = name
    return previous
