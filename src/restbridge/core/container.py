"""
Application service container.

:class:`ServiceContainer` is the application's object graph: it is built once
per server process from a fixed set of :class:`Binding` entries and exposes no
registration surface afterwards.  Singletons are created lazily on first
resolution and disposed via :meth:`ServiceContainer.close`.

Usage::

    from restbridge.core.container import Binding, Scope, ServiceContainer

    container = ServiceContainer([
        Binding(Clock, lambda c: SystemClock()),
        Binding(Greeter, lambda c: Greeter(c.resolve(Clock)), Scope.TRANSIENT),
    ])
    greeter = container.resolve(Greeter)

    # As a context manager for automatic cleanup:
    with build_service_container(settings) as c:
        c.resolve(ApplicationInfo)
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol

from restbridge.core.errors import ContainerClosedError, InvalidConfigError, UnsatisfiedDependencyError
from restbridge.core.logging import get_logger

logger = get_logger(__name__)


class Scope(str, Enum):
    """Lifetime of a provided instance."""

    SINGLETON = "singleton"    # one instance per container
    REQUEST = "request"        # one instance per HTTP request (host only)
    TRANSIENT = "transient"    # new instance on every resolution


class Resolver(Protocol):
    """Anything a provider factory can pull its own dependencies from."""

    def resolve(self, key: Any) -> Any: ...


@dataclass(frozen=True)
class Binding:
    """A key, the factory producing its instance, and the instance scope."""

    key: Any
    factory: Callable[[Resolver], Any]
    scope: Scope = Scope.SINGLETON

    @classmethod
    def instance(cls, key: Any, value: Any) -> Binding:
        """Bind an already constructed object."""
        return cls(key, lambda _resolver: value, Scope.SINGLETON)


def describe_key(key: Any) -> str:
    """Readable name for a binding key (class name or repr)."""
    return getattr(key, "__qualname__", None) or repr(key)


class ServiceContainer:
    """Immutable (post-construction) dependency container.

    Parameters
    ----------
    bindings : Iterable[Binding]
        Every key the container can provide.  Duplicate keys and
        request-scoped bindings are rejected with :class:`InvalidConfigError`.
    """

    def __init__(self, bindings: Iterable[Binding] = ()) -> None:
        table: dict[Any, Binding] = {}
        for binding in bindings:
            if binding.scope is Scope.REQUEST:
                raise InvalidConfigError(
                    describe_key(binding.key),
                    binding.scope.value,
                    "The service container has no request scope; "
                    f"register {describe_key(binding.key)} on the host container instead",
                )
            if binding.key in table:
                raise InvalidConfigError(
                    describe_key(binding.key),
                    binding.key,
                    f"Duplicate binding for {describe_key(binding.key)}",
                )
            table[binding.key] = binding

        self._bindings = MappingProxyType(table)
        self._singletons: dict[Any, Any] = {}
        self._lock = threading.RLock()
        self._closed = False

    # ── Lookup ───────────────────────────────────────────────────

    def has(self, key: Any) -> bool:
        return key in self._bindings

    def __contains__(self, key: Any) -> bool:
        return self.has(key)

    def keys(self) -> Iterator[Any]:
        return iter(self._bindings)

    def resolve(self, key: Any) -> Any:
        """Return the instance bound to *key*.

        Raises
        ------
        UnsatisfiedDependencyError
            If *key* is not bound.
        ContainerClosedError
            If the container has been closed.
        """
        binding = self._bindings.get(key)
        if binding is None:
            raise UnsatisfiedDependencyError(key)
        if self._closed:
            raise ContainerClosedError(key)

        if binding.scope is Scope.TRANSIENT:
            return binding.factory(self)

        if key in self._singletons:
            return self._singletons[key]
        with self._lock:
            if key not in self._singletons:
                if self._closed:
                    raise ContainerClosedError(key)
                self._singletons[key] = binding.factory(self)
                logger.debug("service_created", key=describe_key(key))
            return self._singletons[key]

    # ── Lifecycle ────────────────────────────────────────────────

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Dispose of created singletons that expose ``close()``."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            instances = list(self._singletons.values())
            self._singletons.clear()

        for instance in reversed(instances):
            close = getattr(instance, "close", None)
            if callable(close):
                try:
                    close()
                except Exception:  # noqa: BLE001
                    logger.warning(
                        "service_close_failed",
                        service=type(instance).__name__,
                        exc_info=True,
                    )

    def __enter__(self) -> ServiceContainer:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ServiceContainer(bindings={len(self._bindings)})"


# ── Default application graph ────────────────────────────────────────────


@dataclass(frozen=True)
class ApplicationInfo:
    """Identity of the running application, served by ``GET /info``."""

    name: str
    version: str
    title: str
    resource_namespace: str


def build_service_container(settings: Any, extra: Iterable[Binding] = ()) -> ServiceContainer:
    """Build the default application graph from settings.

    Binds the settings object, :class:`ApplicationInfo` and the
    :class:`~restbridge.core.health.HealthMonitor`; *extra* bindings are
    appended (and may not repeat those keys).
    """
    from restbridge import __version__
    from restbridge.core.health import HealthMonitor
    from restbridge.core.settings import RestBridgeSettings

    bindings = [
        Binding.instance(RestBridgeSettings, settings),
        Binding(
            ApplicationInfo,
            lambda c: ApplicationInfo(
                name="restbridge",
                version=__version__,
                title=settings.openapi.title,
                resource_namespace=settings.resource_namespace,
            ),
        ),
        Binding(
            HealthMonitor,
            lambda c: HealthMonitor(
                service_name=c.resolve(ApplicationInfo).name,
                version=c.resolve(ApplicationInfo).version,
            ),
        ),
        *extra,
    ]
    return ServiceContainer(bindings)
