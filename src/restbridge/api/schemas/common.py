"""
Common API schemas: RFC 7807 error envelope.

Every non-2xx response produced by restbridge itself (readiness guard,
request validation, unsatisfied injection, unhandled errors) uses
:class:`ProblemDetail`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Structured error detail for field-level or nested errors."""

    code: str = Field(description="Machine-readable error code (e.g., 'REQUIRED', 'INVALID_FORMAT')")
    message: str = Field(description="Human-readable error description")
    field: str | None = Field(default=None, description="Field path if error is field-specific")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Error Codes:
        - ``VALIDATION_FAILED`` (422): Request body or parameters invalid
        - ``NOT_READY`` (503): Server context is not initialised
        - ``UNSATISFIED_DEPENDENCY`` (500): Injection point could not be resolved
        - ``INTERNAL`` (500): Unexpected server error
    """

    type: str = Field(default="about:blank", description="URI reference identifying the problem type")
    title: str = Field(description="Short human-readable summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation")
    instance: str = Field(default="", description="URI of the request that failed")
    errors: list[ErrorDetail] = Field(default_factory=list, description="Field-level errors")
