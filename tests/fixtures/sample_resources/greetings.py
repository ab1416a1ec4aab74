"""Greeting resource."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel

from restbridge.api.deps import Inject
from restbridge.api.resources import register_resource
from sample_resources.services import Greeter

router = APIRouter(prefix="/greetings", tags=["greetings"])


class Greeting(BaseModel):
    message: str


@router.get("/{name}", response_model=Greeting)
def greet(name: str, greeter: Annotated[Greeter, Inject(Greeter)]) -> Greeting:
    """Greet someone by name."""
    return Greeting(message=greeter.greet(name))


register_resource(router)
