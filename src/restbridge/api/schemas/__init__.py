"""Pydantic schemas shared by the HTTP layer."""

from restbridge.api.schemas.common import ErrorDetail, ProblemDetail

__all__ = ["ErrorDetail", "ProblemDetail"]
