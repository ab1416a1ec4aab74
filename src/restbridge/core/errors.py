"""
Structured error types for restbridge.

Every error raised by the bootstrap and the injection layer extends
:class:`RestBridgeError` so that it carries a category, structured context and
an optional chained cause.  Bootstrap errors are never retried: they abort the
server-context initialisation and surface through process logs and exit status.

Architecture:
    ::

        RestBridgeError
        ├── ConfigError                  (CONFIG)
        │   ├── MissingConfigError       missing guest container / host
        │   ├── InvalidConfigError       wrong type, empty namespace, ...
        │   ├── DuplicateBridgeError     second bridge link on one host
        │   └── DuplicateResourceError   resource registered twice
        ├── DiscoveryError               (DISCOVERY) namespace unreadable
        └── UnsatisfiedDependencyError   (DEPENDENCY) request-time lookup

Usage:
    from restbridge.core.errors import MissingConfigError

    if container is None:
        raise MissingConfigError("service_container")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and log routing."""

    CONFIG = "CONFIG"              # Missing or invalid wiring, never retryable
    DISCOVERY = "DISCOVERY"        # Resource namespace cannot be scanned
    DEPENDENCY = "DEPENDENCY"      # Injection point could not be satisfied
    INTERNAL = "INTERNAL"          # Bugs, unexpected state


class RestBridgeError(Exception):
    """
    Base exception for all restbridge errors.

    Subclasses set :attr:`default_category`; instances may override it.  The
    ``context`` mapping holds structured metadata that ends up in the log
    record via :meth:`to_dict`.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> RestBridgeError:
        """
        Add context to this error (fluent API).

        Usage:
            raise DiscoveryError("app.rest").with_context(module="app.rest.users")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialise for structured logging."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "context": dict(self.context),
            "cause": repr(self.cause) if self.cause is not None else None,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(RestBridgeError):
    """
    Configuration error.

    Fatal during bootstrap - the wiring must be fixed before the server can
    serve requests.
    """

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(
            message or f"Missing required configuration: {key}",
            context={"key": key},
        )


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(
            message or f"Invalid configuration for {key}: {value!r}",
            context={"key": key},
        )


class DuplicateBridgeError(ConfigError):
    """A host container is already bridged to a different guest container."""


class DuplicateResourceError(ConfigError):
    """A resource with the same qualified name is already registered."""

    def __init__(self, qualified_name: str):
        self.qualified_name = qualified_name
        super().__init__(
            f"Resource '{qualified_name}' is already registered",
            context={"resource": qualified_name},
        )


# =============================================================================
# DISCOVERY ERRORS
# =============================================================================


class DiscoveryError(RestBridgeError):
    """The resource namespace (or one of its modules) could not be imported."""

    default_category = ErrorCategory.DISCOVERY

    def __init__(
        self,
        namespace: str,
        message: str | None = None,
        *,
        cause: Exception | None = None,
    ):
        self.namespace = namespace
        super().__init__(
            message or f"Cannot scan resource namespace '{namespace}'",
            context={"namespace": namespace},
            cause=cause,
        )


# =============================================================================
# DEPENDENCY ERRORS
# =============================================================================


class UnsatisfiedDependencyError(RestBridgeError):
    """Neither the host container nor the bridged guest can provide a key."""

    default_category = ErrorCategory.DEPENDENCY

    def __init__(self, key: Any, message: str | None = None):
        self.key = key
        name = getattr(key, "__qualname__", None) or repr(key)
        super().__init__(
            message or f"No provider registered for {name}",
            context={"key": name},
        )


class ContainerClosedError(RestBridgeError):
    """A service was requested from a container that has already been closed."""

    default_category = ErrorCategory.INTERNAL

    def __init__(self, key: Any):
        self.key = key
        name = getattr(key, "__qualname__", None) or repr(key)
        super().__init__(
            f"Cannot resolve {name}: the service container is closed",
            context={"key": name},
        )


__all__ = [
    "ErrorCategory",
    "RestBridgeError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "DuplicateBridgeError",
    "DuplicateResourceError",
    "DiscoveryError",
    "UnsatisfiedDependencyError",
    "ContainerClosedError",
]
