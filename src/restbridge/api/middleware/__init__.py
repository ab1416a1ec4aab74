"""ASGI middleware and exception handlers for the REST server."""
