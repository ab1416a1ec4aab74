"""
Core primitives: errors, settings, logging, the service container and health.

Nothing in this package imports FastAPI; the HTTP layer lives in
``restbridge.api``.
"""

from restbridge.core.container import ApplicationInfo, Binding, Scope, ServiceContainer
from restbridge.core.errors import (
    ConfigError,
    ContainerClosedError,
    DiscoveryError,
    MissingConfigError,
    RestBridgeError,
    UnsatisfiedDependencyError,
)
from restbridge.core.settings import OpenApiSettings, RestBridgeSettings, get_settings

__all__ = [
    "ApplicationInfo",
    "Binding",
    "Scope",
    "ServiceContainer",
    "ConfigError",
    "ContainerClosedError",
    "DiscoveryError",
    "MissingConfigError",
    "RestBridgeError",
    "UnsatisfiedDependencyError",
    "OpenApiSettings",
    "RestBridgeSettings",
    "get_settings",
]
