"""Application info resource."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel

from restbridge.api.deps import Inject
from restbridge.api.resources import register_resource
from restbridge.core.container import ApplicationInfo

router = APIRouter(prefix="/info", tags=["info"])


class ApplicationInfoSchema(BaseModel):
    name: str
    version: str
    title: str
    resource_namespace: str


@router.get("", response_model=ApplicationInfoSchema)
def get_info(info: Annotated[ApplicationInfo, Inject(ApplicationInfo)]) -> ApplicationInfoSchema:
    """Name and version of the running application."""
    return ApplicationInfoSchema(
        name=info.name,
        version=info.version,
        title=info.title,
        resource_namespace=info.resource_namespace,
    )


register_resource(router)
