"""
Error-handling middleware: maps errors to RFC 7807 responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from restbridge.api.schemas.common import ErrorDetail, ProblemDetail
from restbridge.core.errors import UnsatisfiedDependencyError
from restbridge.core.logging import get_logger

logger = get_logger(__name__)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
    )
    if errors:
        body.errors = [ErrorDetail(**e) for e in errors]
    return JSONResponse(
        status_code=status,
        content=body.model_dump(),
        media_type="application/problem+json",
    )


def _debug_enabled(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(getattr(settings, "debug", False))


async def unsatisfied_dependency_handler(
    request: Request, exc: UnsatisfiedDependencyError
) -> JSONResponse:
    """An injection point had no provider on the host or the bridged container."""
    logger.error("dependency_unsatisfied", path=request.url.path, **exc.context)
    return problem_response(
        status=500,
        title="Unsatisfied Dependency",
        detail=exc.message if _debug_enabled(request) else "A required service is not available.",
        instance=str(request.url),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: returns 500 with ProblemDetail."""
    logger.error("request_failed", path=request.url.path, error=str(exc), exc_info=exc)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if _debug_enabled(request) else "An unexpected error occurred.",
        instance=str(request.url),
    )
