"""
Container bridge: links the host container to the application container.

The application's :class:`ServiceContainer` is created once per process by the
server lifecycle and stored on the server context (``app.state``) under
:data:`GUEST_CONTAINER_ATTR` before the bootstrap runs.  The bridge reads it
from there and links it into the :class:`HostContainer`, after which any
injection point the host cannot satisfy is forwarded to the service container.
"""

from __future__ import annotations

from typing import Any

from restbridge.api.host import HostContainer
from restbridge.core.container import ServiceContainer
from restbridge.core.errors import InvalidConfigError, MissingConfigError

GUEST_CONTAINER_ATTR = "service_container"
HOST_CONTAINER_ATTR = "host_container"


def get_service_container(context: Any) -> ServiceContainer:
    """Read the service container stored on a server context.

    Raises
    ------
    MissingConfigError
        No container has been attached to the context.
    InvalidConfigError
        The attribute holds something other than a :class:`ServiceContainer`.
    """
    container = getattr(context, GUEST_CONTAINER_ATTR, None)
    if container is None:
        raise MissingConfigError(
            GUEST_CONTAINER_ATTR,
            "No service container is attached to the server context "
            f"(expected attribute '{GUEST_CONTAINER_ATTR}'); it must be created "
            "before the application is bootstrapped",
        )
    if not isinstance(container, ServiceContainer):
        raise InvalidConfigError(GUEST_CONTAINER_ATTR, container)
    return container


def bridge_containers(context: Any, host: HostContainer | None) -> bool:
    """Link the context's service container into *host*.

    Returns ``True`` if a new link was made, ``False`` if *host* was already
    linked to that same container.
    """
    if host is None:
        raise MissingConfigError(HOST_CONTAINER_ATTR, "No host container available to bridge")
    guest = get_service_container(context)
    return host.bridge(guest)
