"""ServiceResult and ServiceError — the contract between services and the CLI.

INVARIANT: every public service method returns a ServiceResult. Domain
exceptions are converted into ``ok=False`` results at the service boundary,
never raised through it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Machine-readable failure: a stable ``code`` plus free-form detail."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation, serialized as-is by ``--json``.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"build_schema"``, ``"attribute"``, ...);
            renderers dispatch on it.
        data: Operation payload on success.
        warnings: Non-fatal issues, such as unresolved declarations.
        error: Set when ``ok`` is False.
        meta: Counts and flags shown in verbose mode.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build an ``ok=False`` result; keyword arguments become ``error.detail``."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else "Unknown error"
