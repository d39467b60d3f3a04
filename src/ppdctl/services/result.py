"""ServiceResult and ServiceError — the store's return contract.

INVARIANT: Every public store operation that can fail returns a
ServiceResult. Callers never need to catch domain exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ppdctl.domain.errors import PaperdollError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for store operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"use_next"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: PaperdollError) -> ServiceResult:
        """Build a failed result from a domain error."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code.value, message=exc.message, detail=exc.detail),
        )
