"""ServiceResult and ServiceError, the contract between services and the CLI.

Every public service method returns a ServiceResult. A :class:`CdpgenError`
raised by the compiler core or its I/O adapters crosses that boundary as a
ServiceError carrying the same ``code`` and the offending ``path``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from cdpgen.domain.errors import CdpgenError


class ServiceError(BaseModel):
    """Structured failure: stable ``code``, human ``message``, extra ``detail``."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: CdpgenError) -> ServiceError:
        detail = {"path": exc.path} if exc.path else {}
        return cls(code=exc.code, message=exc.message, detail=detail)

    @property
    def path(self) -> str | None:
        """Schema location or file the failure points at, if any."""
        return self.detail.get("path")


class ServiceResult(BaseModel):
    """Outcome of one ``compile`` or ``inspect`` run.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (``"compile"`` or ``"inspect"``).
        data: Counts, paths and listings on success.
        warnings: Non-fatal issues, echoed to stderr by the CLI.
        error: Set exactly when ``ok`` is False.
        meta: Telemetry span tree when ``--verbose`` is on.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, error: ServiceError | CdpgenError) -> ServiceResult:
        if not isinstance(error, ServiceError):
            error = ServiceError.from_exception(error)
        return cls(ok=False, op=op, error=error)
