"""
Server settings.

All values can be overridden via environment variables prefixed with
``RESTBRIDGE_``.  The OpenAPI metadata block is nested, so its fields use the
``__`` delimiter (``RESTBRIDGE_OPENAPI__TITLE``).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from restbridge import __version__


class OpenApiSettings(BaseModel):
    """Static metadata for the published API descriptor.

    Each value only affects descriptor content or formatting, never dispatch.
    """

    title: str = Field(default="restbridge REST API", description="Descriptor title")
    version: str = Field(default=__version__, description="Semantic version of the API")
    description: str = Field(
        default="REST API providing programmatic access to the services "
        "wired into the application container.",
        description="Human readable description",
    )
    contact_name: str = Field(default="restbridge maintainers")
    contact_url: str = Field(default="https://github.com/restbridge/restbridge")
    license_name: str = Field(default="Apache License 2.0")
    license_url: str = Field(default="https://www.apache.org/licenses/LICENSE-2.0")
    server_url: str | None = Field(
        default=None,
        description="Base server URL; defaults to the API prefix",
    )
    server_description: str = Field(default="restbridge REST API")
    pretty_print: bool = Field(default=True, description="Indent the JSON document")
    docs_enabled: bool = Field(default=True, description="Serve Swagger UI under {prefix}/docs")


class RestBridgeSettings(BaseSettings):
    """Settings for the REST server.

    Order of precedence (highest to lowest):
        1. Environment variables (``RESTBRIDGE_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    debug: bool = Field(default=False, description="Expose exception details in 500 responses")
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool | None = Field(
        default=None,
        description="JSON log lines; None picks JSON when stdout is not a TTY",
    )

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api", description="URL prefix of the API root")
    resource_namespace: str = Field(
        default="restbridge.rest",
        description="Dotted module path scanned for resources and documentation",
    )
    openapi: OpenApiSettings = Field(default_factory=OpenApiSettings)

    model_config: dict[str, Any] = {
        "env_prefix": "RESTBRIDGE_",
        "env_file": ".env",
        "extra": "ignore",
        "env_nested_delimiter": "__",
    }

    @field_validator("api_prefix")
    @classmethod
    def _normalise_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value

    @field_validator("resource_namespace")
    @classmethod
    def _require_namespace(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("resource_namespace must not be empty")
        return value


@lru_cache(maxsize=1)
def get_settings() -> RestBridgeSettings:
    """Cached settings, loaded once per process."""
    return RestBridgeSettings()
