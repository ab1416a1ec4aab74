"""Resource registry for declaring and discovering REST resources.

Each resource module registers its router at import time::

    # myapp/rest/greetings.py
    router = APIRouter(prefix="/greetings", tags=["greetings"])

    @router.get("")
    def list_greetings(greeter: Annotated[Greeter, Inject(Greeter)]): ...

    register_resource(router)

Discovery imports every module below a namespace and returns the resources
those modules registered, so adding a resource never requires editing a
central list.  The same namespace value feeds both dispatch registration and
the OpenAPI publisher.

Tags:
    restbridge, api, registry, resource-discovery
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from dataclasses import dataclass
from types import ModuleType

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from restbridge.api.codec import JsonCodecFeature
from restbridge.core.errors import DiscoveryError, DuplicateResourceError, InvalidConfigError
from restbridge.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resource:
    """A router registered by a resource module."""

    name: str
    module: str
    router: APIRouter

    @property
    def qualified_name(self) -> str:
        return f"{self.module}:{self.name}"

    @property
    def paths(self) -> list[str]:
        return [route.path for route in self.router.routes if isinstance(route, APIRoute)]

    def in_namespace(self, namespace: str) -> bool:
        return self.module == namespace or self.module.startswith(namespace + ".")


# Process-wide registration table, filled as resource modules are imported
_registry: dict[str, Resource] = {}


def _calling_module(depth: int = 2) -> str | None:
    """``__name__`` of the frame *depth* levels above this one, if frames are available."""
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            frame = frame.f_back if frame is not None else None
        return frame.f_globals.get("__name__") if frame is not None else None
    finally:
        del frame


def register_resource(
    router: APIRouter,
    *,
    name: str | None = None,
    module: str | None = None,
) -> APIRouter:
    """Register *router* as a resource of the calling module.

    ``name`` defaults to the router prefix (or ``"router"``); ``module``
    defaults to the caller's ``__name__``.  Returns the router unchanged.
    """
    module = module or _calling_module()
    if not module:
        raise InvalidConfigError(
            "module", module, "Cannot determine the registering module; pass module=__name__"
        )
    name = name or (router.prefix.strip("/").replace("/", ".") or "router")
    resource = Resource(name=name, module=module, router=router)

    existing = _registry.get(resource.qualified_name)
    if existing is not None and existing.router is not router:
        raise DuplicateResourceError(resource.qualified_name)
    _registry[resource.qualified_name] = resource
    logger.debug("resource_registered", resource=resource.qualified_name, paths=resource.paths)
    return router


def registered_resources() -> list[Resource]:
    """Every resource registered so far, sorted by qualified name."""
    return [_registry[key] for key in sorted(_registry)]


def _import(namespace: str, module_name: str) -> ModuleType:
    try:
        return importlib.import_module(module_name)
    except Exception as exc:
        raise DiscoveryError(
            namespace,
            f"Cannot import '{module_name}' while scanning resource namespace '{namespace}': {exc}",
            cause=exc,
        ).with_context(module=module_name) from exc


def discover_resources(namespace: str) -> list[Resource]:
    """Import every module below *namespace* and return its resources.

    Raises
    ------
    InvalidConfigError
        *namespace* is empty.
    DiscoveryError
        The namespace or one of its modules cannot be imported.
    """
    namespace = (namespace or "").strip()
    if not namespace:
        raise InvalidConfigError("resource_namespace", namespace, "Resource namespace must not be empty")

    package = _import(namespace, namespace)
    search_path = getattr(package, "__path__", None)
    if search_path is not None:
        for info in pkgutil.walk_packages(search_path, prefix=namespace + "."):
            _import(namespace, info.name)

    return [r for r in registered_resources() if r.in_namespace(namespace)]


class ResourceRegistry:
    """Declares the resource namespace of one server context.

    :meth:`discover` scans the namespace; :meth:`register` makes every
    discovered resource dispatchable on the app.
    """

    def __init__(self, namespace: str, codec: JsonCodecFeature | None = None) -> None:
        self.namespace = namespace
        self.codec = codec or JsonCodecFeature()
        self._resources: tuple[Resource, ...] | None = None

    @property
    def resources(self) -> tuple[Resource, ...]:
        if self._resources is None:
            self._resources = tuple(discover_resources(self.namespace))
        return self._resources

    def discover(self) -> tuple[Resource, ...]:
        return self.resources

    def register(self, app: FastAPI, prefix: str = "") -> tuple[Resource, ...]:
        resources = self.discover()
        self.codec.install(app)
        for resource in resources:
            app.include_router(
                resource.router,
                prefix=prefix,
                default_response_class=self.codec.response_class,
            )

        if not resources:
            logger.warning("resources_empty", namespace=self.namespace)
        logger.info(
            "resources_registered",
            namespace=self.namespace,
            count=len(resources),
            resources=[r.qualified_name for r in resources],
        )
        return resources
