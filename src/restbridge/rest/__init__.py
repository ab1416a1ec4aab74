"""
Built-in REST resources.

Every module in this package is imported by the resource scan and registers
its router with :func:`restbridge.api.resources.register_resource`.
"""
