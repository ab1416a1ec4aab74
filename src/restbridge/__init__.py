"""
restbridge - composition root for a container-bridged REST API.

The package is organised in three layers:

- ``restbridge.core``: errors, settings, logging, the application service
  container and health primitives.
- ``restbridge.api``: the FastAPI server context, host container, container
  bridge, resource registry, OpenAPI publisher and the bootstrap.
- ``restbridge.rest``: the built-in resource namespace scanned at startup.
"""

__version__ = "0.1.0"
