"""Readiness guard: refuses requests until the bootstrap has completed.

A server context whose bootstrap failed (or never ran) stays
``UNINITIALIZED``; serving a partially wired application is never allowed, so
every request is answered with ``503`` instead.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from restbridge.api.middleware.errors import problem_response


class ReadinessGuardMiddleware(BaseHTTPMiddleware):
    """Answer 503 while ``app.state.bootstrap_state`` is not ``READY``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        from restbridge.api.bootstrap import BootstrapState

        state = getattr(request.app.state, "bootstrap_state", BootstrapState.UNINITIALIZED)
        if state is not BootstrapState.READY:
            return problem_response(
                status=503,
                title="Service Unavailable",
                detail="The application has not been initialised.",
                instance=str(request.url),
            )
        return await call_next(request)
