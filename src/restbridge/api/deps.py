"""
FastAPI dependency injection: resolve services through the host container.

Usage in resources::

    from restbridge.api.deps import Inject

    @router.get("/info")
    def get_info(info: Annotated[ApplicationInfo, Inject(ApplicationInfo)]):
        ...

``Inject(key)`` looks *key* up on ``app.state.host_container``; keys the host
does not bind itself are forwarded to the bridged service container.  Request
scoped host bindings are cached on ``request.state`` for the request lifespan.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from restbridge.api.bridge import HOST_CONTAINER_ATTR
from restbridge.api.host import HostContainer
from restbridge.core.errors import MissingConfigError

_SCOPE_ATTR = "injection_scope"


def get_host_container(request: Request) -> HostContainer:
    host = getattr(request.app.state, HOST_CONTAINER_ATTR, None)
    if host is None:
        raise MissingConfigError(HOST_CONTAINER_ATTR)
    return host


def _request_scope(request: Request) -> dict[Any, Any]:
    scope = getattr(request.state, _SCOPE_ATTR, None)
    if scope is None:
        scope = {}
        setattr(request.state, _SCOPE_ATTR, scope)
    return scope


def Inject(key: Any) -> Any:  # noqa: N802
    """FastAPI dependency marker resolving *key* through the host container."""

    def _resolve(request: Request) -> Any:
        return get_host_container(request).resolve(key, _request_scope(request))

    _resolve.__name__ = f"inject_{getattr(key, '__name__', 'service')}"
    return Depends(_resolve)

