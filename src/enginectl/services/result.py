"""Service-layer return values.

Services never raise domain errors to the CLI.  Each public method
returns a :class:`ServiceResult`; the CLI decides whether it becomes
human text, quiet text, or JSON, and which exit code to use.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from enginectl.domain.errors import DestinationError


class ServiceError(BaseModel):
    """Why an operation failed, keyed by a stable error ``code``."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: DestinationError) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail={"error": type(exc).__name__})


class ServiceResult(BaseModel):
    """Outcome of one service call.

    ``data`` is filled on success and ``error`` on failure; ``warnings``
    may be present either way, since a call can warn before it fails.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def success(
        cls, op: str, data: dict[str, Any], warnings: list[str] | None = None
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data, warnings=warnings or [])

    @classmethod
    def failure(
        cls, op: str, exc: DestinationError, warnings: list[str] | None = None
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError.from_exception(exc),
        )
