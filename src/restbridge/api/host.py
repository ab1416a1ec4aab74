"""
Host container: the dispatch-side injector.

The :class:`HostContainer` satisfies injection points on request handlers.
It has its own mutable registration surface (for request-scoped values such
as a per-request unit of work) and, once bridged, forwards every key it cannot
satisfy itself to the application's :class:`ServiceContainer`.

Resolution order::

    host binding?  ──yes──▶  host scope (singleton / request / transient)
        │ no
        ▼
    bridged guest has key?  ──yes──▶  guest.resolve(key)   (same instance)
        │ no
        ▼
    UnsatisfiedDependencyError

Tags:
    restbridge, api, dependency-injection, host-container, bridge
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from restbridge.core.container import Binding, Resolver, Scope, ServiceContainer, describe_key
from restbridge.core.errors import DuplicateBridgeError, UnsatisfiedDependencyError
from restbridge.core.logging import get_logger

logger = get_logger(__name__)


class _ScopedResolver:
    """Resolver handed to host factories so nested lookups share a request scope."""

    def __init__(self, host: HostContainer, cache: dict[Any, Any] | None) -> None:
        self._host = host
        self._cache = cache

    def resolve(self, key: Any) -> Any:
        return self._host.resolve(key, self._cache)


class HostContainer:
    """Per-request-capable injector with an optional one-way link to a guest."""

    def __init__(self) -> None:
        self._bindings: dict[Any, Binding] = {}
        self._singletons: dict[Any, Any] = {}
        self._guest: ServiceContainer | None = None
        self._lock = threading.RLock()

    # ── Registration ─────────────────────────────────────────────

    def register(
        self,
        key: Any,
        factory: Callable[[Resolver], Any],
        scope: Scope = Scope.REQUEST,
    ) -> None:
        """Bind *key* on the host; replaces an earlier host binding."""
        with self._lock:
            self._bindings[key] = Binding(key, factory, scope)
            self._singletons.pop(key, None)

    def register_instance(self, key: Any, value: Any) -> None:
        self.register(key, lambda _resolver: value, Scope.SINGLETON)

    # ── Bridge link ──────────────────────────────────────────────

    @property
    def guest(self) -> ServiceContainer | None:
        return self._guest

    @property
    def bridged(self) -> bool:
        return self._guest is not None

    def bridge(self, guest: ServiceContainer) -> bool:
        """Link *guest* so unsatisfied keys are forwarded to it.

        Returns ``True`` when the link was established and ``False`` when this
        host is already linked to the very same guest.

        Raises
        ------
        DuplicateBridgeError
            If the host is already linked to a different guest.
        """
        with self._lock:
            if self._guest is guest:
                return False
            if self._guest is not None:
                raise DuplicateBridgeError(
                    "Host container is already bridged to another service container",
                    context={"existing": repr(self._guest), "requested": repr(guest)},
                )
            self._guest = guest
        logger.info("container_bridged", guest=repr(guest))
        return True

    # ── Lookup ───────────────────────────────────────────────────

    def can_resolve(self, key: Any) -> bool:
        if key in self._bindings:
            return True
        return self._guest is not None and self._guest.has(key)

    def resolve(self, key: Any, cache: dict[Any, Any] | None = None) -> Any:
        """Resolve *key*.

        *cache* is the per-request instance cache; request-scoped bindings
        require one.
        """
        binding = self._bindings.get(key)
        if binding is None:
            if self._guest is not None and self._guest.has(key):
                return self._guest.resolve(key)
            raise UnsatisfiedDependencyError(key)

        resolver = _ScopedResolver(self, cache)

        if binding.scope is Scope.TRANSIENT:
            return binding.factory(resolver)

        if binding.scope is Scope.REQUEST:
            if cache is None:
                raise UnsatisfiedDependencyError(
                    key,
                    f"{describe_key(key)} is request-scoped and cannot be resolved outside a request",
                )
            if key not in cache:
                cache[key] = binding.factory(resolver)
            return cache[key]

        if key in self._singletons:
            return self._singletons[key]
        with self._lock:
            if key not in self._singletons:
                self._singletons[key] = binding.factory(_ScopedResolver(self, None))
            return self._singletons[key]

    def __repr__(self) -> str:
        return f"HostContainer(bindings={len(self._bindings)}, bridged={self.bridged})"
