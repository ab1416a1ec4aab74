"""A namespace exercising request-scoped host bindings."""
