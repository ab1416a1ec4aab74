"""
CLI layer for restbridge.

Entry point::

    restbridge --help
"""

from restbridge.cli.app import app

__all__ = ["app"]
