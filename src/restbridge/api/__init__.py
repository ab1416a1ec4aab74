"""
REST API layer for restbridge.

Provides the FastAPI application factory together with the pieces it wires:
the host container, the container bridge, the resource registry and the
OpenAPI publisher.

Quick start::

    from restbridge.api import create_app

    app = create_app()  # ready for uvicorn
"""

from restbridge.api.app import attach_service_container, create_app, create_server_context
from restbridge.api.bootstrap import ApplicationBootstrap, BootstrapState
from restbridge.api.deps import Inject
from restbridge.api.resources import register_resource

__all__ = [
    "ApplicationBootstrap",
    "BootstrapState",
    "Inject",
    "attach_service_container",
    "create_app",
    "create_server_context",
    "register_resource",
]
