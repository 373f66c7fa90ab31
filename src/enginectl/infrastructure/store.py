"""ConnectionStore — YAML-backed persistence for the connection registry.

File layout::

    active_service: laptop
    service_destinations:
      laptop:
        uri: ssh://root@server.example.com:22/run/podman/podman.sock
        identity: ~/.ssh/dev_rsa

Writes go to a temporary file in the same directory which is then
renamed over the target, so a failed write never leaves a torn file.
No cross-process locking is performed.
"""

from __future__ import annotations

import logging
import os
import tempfile
from io import StringIO
from pathlib import Path

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from enginectl.domain.errors import PersistenceError
from enginectl.domain.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


def _new_yaml() -> YAML:
    y = YAML(typ="safe")
    y.default_flow_style = False
    return y


class ConnectionStore:
    """Load and write the connection registry file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> ConnectionRegistry:
        """Read the registry; a missing file yields an empty registry."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ConnectionRegistry()
        except OSError as exc:
            msg = f"cannot read {self.path}: {exc}"
            raise PersistenceError(msg) from exc

        try:
            data = _new_yaml().load(raw)
        except YAMLError as exc:
            msg = f"invalid YAML in {self.path}: {exc}"
            raise PersistenceError(msg) from exc

        if data is None:
            return ConnectionRegistry()
        if not isinstance(data, dict):
            msg = f"{self.path} must contain a mapping, got {type(data).__name__}"
            raise PersistenceError(msg)
        try:
            return ConnectionRegistry.model_validate(data)
        except ValidationError as exc:
            msg = f"invalid connection registry in {self.path}: {exc}"
            raise PersistenceError(msg) from exc

    def write(self, registry: ConnectionRegistry) -> None:
        """Persist *registry*, replacing the file atomically."""
        buf = StringIO()
        _new_yaml().dump(registry.model_dump(exclude_none=True), buf)

        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(buf.getvalue())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            msg = f"cannot write {self.path}: {exc}"
            raise PersistenceError(msg) from exc
        logger.debug("Wrote connection registry to %s", self.path)
