"""BaseService — shared foundation for enginectl services.

Every service receives the :class:`ConnectionStore` it persists through
and the frozen :class:`EngineSettings`.  Both are injected so services
can be exercised against temporary files in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from enginectl.config.settings import EngineSettings
    from enginectl.infrastructure.store import ConnectionStore


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ConnectionService(BaseService):
            def add(self, name: str, ...) -> ServiceResult:
                registry = self._store.load()
                ...
    """

    def __init__(self, store: ConnectionStore, settings: EngineSettings) -> None:
        self._store = store
        self._settings = settings
