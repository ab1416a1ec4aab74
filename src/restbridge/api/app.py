"""
FastAPI application factory.

``create_app()`` creates a server context, attaches the application's service
container to it and runs the :class:`ApplicationBootstrap`.  It is the entry
point used by uvicorn (``factory=True``).

Server context layout (``app.state``)::

    settings            RestBridgeSettings
    host_container      HostContainer (dispatch-side injector)
    service_container   ServiceContainer (application graph, attached once)
    bootstrap_state     UNINITIALIZED | READY
    resource_registry   ResourceRegistry      (after READY)
    openapi_document    OpenApiDocument       (after READY)
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from restbridge import __version__
from restbridge.api.bootstrap import BOOTSTRAP_STATE_ATTR, ApplicationBootstrap, BootstrapState
from restbridge.api.bridge import GUEST_CONTAINER_ATTR, HOST_CONTAINER_ATTR
from restbridge.api.host import HostContainer
from restbridge.api.middleware.errors import unhandled_exception_handler, unsatisfied_dependency_handler
from restbridge.api.middleware.readiness import ReadinessGuardMiddleware
from restbridge.core.container import ServiceContainer, build_service_container
from restbridge.core.errors import ConfigError, UnsatisfiedDependencyError
from restbridge.core.logging import configure_logging, get_logger
from restbridge.core.settings import RestBridgeSettings, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup / shutdown hooks."""
    logger.info(
        "restbridge_api_starting",
        version=app.version,
        state=getattr(app.state, BOOTSTRAP_STATE_ATTR, BootstrapState.UNINITIALIZED).value,
    )
    yield
    container = getattr(app.state, GUEST_CONTAINER_ATTR, None)
    if container is not None:
        container.close()
    logger.info("restbridge_api_shutting_down")


def create_server_context(settings: RestBridgeSettings | None = None) -> FastAPI:
    """Build an uninitialised server context.

    FastAPI's own OpenAPI routes are disabled; the bootstrap publishes the
    document for the scanned namespace instead.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.openapi.title,
        version=settings.openapi.version,
        lifespan=lifespan,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )

    app.state.settings = settings
    setattr(app.state, HOST_CONTAINER_ATTR, HostContainer())
    setattr(app.state, BOOTSTRAP_STATE_ATTR, BootstrapState.UNINITIALIZED)

    app.add_middleware(ReadinessGuardMiddleware)

    app.add_exception_handler(UnsatisfiedDependencyError, unsatisfied_dependency_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    return app


def attach_service_container(app: FastAPI, container: ServiceContainer) -> None:
    """Store the application's service container on the server context.

    A context holds exactly one service container for its lifetime.
    """
    existing = getattr(app.state, GUEST_CONTAINER_ATTR, None)
    if existing is not None and existing is not container:
        raise ConfigError(
            "A service container is already attached to this server context",
            context={"existing": repr(existing)},
        )
    setattr(app.state, GUEST_CONTAINER_ATTR, container)


def create_app(
    *,
    settings: RestBridgeSettings | None = None,
    service_container: ServiceContainer | None = None,
) -> FastAPI:
    """Build and return a fully-wired FastAPI application.

    Parameters
    ----------
    settings : RestBridgeSettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    service_container : ServiceContainer | None
        Application graph to bridge; built from *settings* when ``None``.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    app = create_server_context(settings)
    attach_service_container(app, service_container or build_service_container(settings))

    ApplicationBootstrap(app, settings).initialize()
    logger.info("restbridge_api_ready", version=__version__, prefix=settings.api_prefix)
    return app
