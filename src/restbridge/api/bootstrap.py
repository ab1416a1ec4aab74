"""
Application bootstrap: the composition root of the REST API.

Runs once per server context and moves it from ``UNINITIALIZED`` to
``READY``::

    install logging bridge
        → bridge host container to the service container
        → declare resource namespace + JSON codec
        → publish the API descriptor (same namespace)
        → READY

Any failure leaves the context ``UNINITIALIZED`` and propagates; the readiness
guard then answers every request with 503 and ``create_app`` never returns a
half-wired application.  Running the bootstrap again on a ``READY`` context is
a no-op.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import FastAPI

from restbridge.api.bridge import HOST_CONTAINER_ATTR, bridge_containers
from restbridge.api.codec import JsonCodecFeature
from restbridge.api.openapi import ApiDescriptorPublisher, OpenApiDocument, build_descriptor
from restbridge.api.resources import ResourceRegistry
from restbridge.core.errors import InvalidConfigError, RestBridgeError
from restbridge.core.logging import get_logger, install_logging_bridge

logger = get_logger(__name__)

BOOTSTRAP_STATE_ATTR = "bootstrap_state"


class BootstrapState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


def get_bootstrap_state(app: FastAPI) -> BootstrapState:
    return getattr(app.state, BOOTSTRAP_STATE_ATTR, BootstrapState.UNINITIALIZED)


class ApplicationBootstrap:
    """Wires one server context (a FastAPI app) exactly once."""

    def __init__(self, app: FastAPI, settings: Any | None = None) -> None:
        self.app = app
        self.settings = settings if settings is not None else app.state.settings
        self.registry = ResourceRegistry(self.settings.resource_namespace, JsonCodecFeature())
        self.publisher = ApiDescriptorPublisher(
            build_descriptor(self.settings),
            pretty_print=self.settings.openapi.pretty_print,
            docs_enabled=self.settings.openapi.docs_enabled,
        )

    @property
    def state(self) -> BootstrapState:
        return get_bootstrap_state(self.app)

    def initialize(self) -> bool:
        """Run the bootstrap sequence.

        Returns ``True`` when the context transitioned to ``READY`` and
        ``False`` when it already was.
        """
        if self.state is BootstrapState.READY:
            logger.info("bootstrap_already_ready", namespace=self.registry.namespace)
            return False

        prefix = self.settings.api_prefix
        logger.info("bootstrap_started", namespace=self.registry.namespace, prefix=prefix)
        try:
            if self.publisher.namespace != self.registry.namespace:
                raise InvalidConfigError(
                    "resource_namespace",
                    self.publisher.namespace,
                    f"Descriptor namespace '{self.publisher.namespace}' does not match "
                    f"registry namespace '{self.registry.namespace}'",
                )

            install_logging_bridge(self.settings.log_level)

            host = getattr(self.app.state, HOST_CONTAINER_ATTR, None)
            bridge_containers(self.app.state, host)

            resources = self.registry.register(self.app, prefix)
            document: OpenApiDocument = self.publisher.publish(self.app, prefix, resources)
        except RestBridgeError as exc:
            logger.error("bootstrap_failed", **exc.to_dict())
            raise
        except Exception as exc:
            logger.error("bootstrap_failed", error=str(exc), error_type=type(exc).__name__)
            raise

        self.app.state.resource_registry = self.registry
        setattr(self.app.state, BOOTSTRAP_STATE_ATTR, BootstrapState.READY)
        logger.info(
            "bootstrap_completed",
            namespace=self.registry.namespace,
            resources=len(resources),
            operations=len(document.operations),
        )
        return True
