"""
API descriptor publisher: OpenAPI document served as JSON and YAML.

The descriptor metadata (title, version, contact, license, server) comes from
static configuration; the paths section is generated by introspecting the
resources discovered in the configured namespace, the same namespace the
:class:`~restbridge.api.resources.ResourceRegistry` makes dispatchable.  The
document is built once per process and never re-scanned.

Endpoints (relative to the API root, excluded from the document itself):
    GET /openapi.json   OpenAPI document, JSON
    GET /openapi.yaml   OpenAPI document, YAML
    GET /docs           Swagger UI (when enabled)
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import yaml
from fastapi import APIRouter, FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import HTMLResponse, Response

from restbridge.api.resources import Resource, discover_resources
from restbridge.core.logging import get_logger

logger = get_logger(__name__)

NAMESPACE_EXTENSION = "x-resource-namespace"


# ── Descriptor ───────────────────────────────────────────────────────────


class Contact(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str | None = None


class License(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str | None = None


class Server(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    description: str | None = None


class ApiDescriptor(BaseModel):
    """Immutable metadata describing the published API surface."""

    model_config = ConfigDict(frozen=True)

    title: str
    version: str
    description: str = ""
    contact: Contact | None = None
    license: License | None = None
    servers: tuple[Server, ...] = Field(default_factory=tuple)
    resource_namespace: str


def build_descriptor(settings: Any) -> ApiDescriptor:
    """Build the descriptor from :class:`~restbridge.core.settings.RestBridgeSettings`."""
    meta = settings.openapi
    server_url = meta.server_url or settings.api_prefix or "/"
    return ApiDescriptor(
        title=meta.title,
        version=meta.version,
        description=meta.description,
        contact=Contact(name=meta.contact_name, url=meta.contact_url),
        license=License(name=meta.license_name, url=meta.license_url),
        servers=(Server(url=server_url, description=meta.server_description),),
        resource_namespace=settings.resource_namespace,
    )


# ── Document ─────────────────────────────────────────────────────────────


class OpenApiDocument:
    """A generated OpenAPI document and its two serialised forms."""

    def __init__(self, descriptor: ApiDescriptor, spec: dict[str, Any], pretty_print: bool = True) -> None:
        self.descriptor = descriptor
        self.spec = spec
        self.pretty_print = pretty_print
        self._json: str | None = None
        self._yaml: str | None = None

    @property
    def operations(self) -> list[tuple[str, str]]:
        """``(METHOD, path)`` pairs listed in the document."""
        return [
            (method.upper(), path)
            for path, item in self.spec.get("paths", {}).items()
            for method in item
        ]

    def to_json(self) -> str:
        if self._json is None:
            if self.pretty_print:
                self._json = json.dumps(self.spec, indent=2, ensure_ascii=False)
            else:
                self._json = json.dumps(self.spec, separators=(",", ":"), ensure_ascii=False)
        return self._json

    def to_yaml(self) -> str:
        if self._yaml is None:
            self._yaml = yaml.safe_dump(
                self.spec,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        return self._yaml


class ApiDescriptorPublisher:
    """Builds the OpenAPI document for a namespace and serves it."""

    def __init__(self, descriptor: ApiDescriptor, *, pretty_print: bool = True, docs_enabled: bool = True) -> None:
        self.descriptor = descriptor
        self.pretty_print = pretty_print
        self.docs_enabled = docs_enabled

    @property
    def namespace(self) -> str:
        return self.descriptor.resource_namespace

    def build(self, resources: Iterable[Resource] | None = None) -> OpenApiDocument:
        """Generate the document from *resources* (scanned from the namespace by default)."""
        if resources is None:
            resources = discover_resources(self.namespace)

        surface = APIRouter()
        for resource in resources:
            surface.include_router(resource.router)

        d = self.descriptor
        spec = get_openapi(
            title=d.title,
            version=d.version,
            description=d.description,
            routes=surface.routes,
            servers=[s.model_dump(exclude_none=True) for s in d.servers] or None,
            contact=d.contact.model_dump(exclude_none=True) if d.contact else None,
            license_info=d.license.model_dump(exclude_none=True) if d.license else None,
        )
        spec[NAMESPACE_EXTENSION] = d.resource_namespace
        return OpenApiDocument(d, spec, pretty_print=self.pretty_print)

    def publish(self, app: FastAPI, prefix: str = "", resources: Iterable[Resource] | None = None) -> OpenApiDocument:
        """Build the document and register the endpoints serving it."""
        document = self.build(resources)
        router = APIRouter(include_in_schema=False)

        @router.get("/openapi.json")
        def openapi_json() -> Response:
            return Response(content=document.to_json(), media_type="application/json")

        @router.get("/openapi.yaml")
        def openapi_yaml() -> Response:
            return Response(content=document.to_yaml(), media_type="application/yaml")

        if self.docs_enabled:
            @router.get("/docs")
            def swagger_ui() -> HTMLResponse:
                return get_swagger_ui_html(
                    openapi_url=f"{prefix}/openapi.json",
                    title=f"{document.descriptor.title} - Swagger UI",
                )

        app.include_router(router, prefix=prefix)
        app.openapi_schema = document.spec
        app.state.openapi_document = document

        logger.info(
            "openapi_published",
            namespace=self.namespace,
            operations=len(document.operations),
            path=f"{prefix}/openapi.json",
        )
        return document
