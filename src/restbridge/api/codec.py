"""
JSON codec feature for resource request and response bodies.

Responses of every registered resource are rendered with the codec's
response class; request bodies that fail validation are answered with a
``422`` RFC 7807 problem document listing the offending fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from restbridge.api.middleware.errors import problem_response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map request-body/parameter validation errors to a problem response."""
    errors = [
        {
            "code": str(err.get("type", "invalid")).upper(),
            "message": str(err.get("msg", "")),
            "field": ".".join(str(part) for part in err.get("loc", ())) or None,
        }
        for err in exc.errors()
    ]
    return problem_response(
        status=422,
        title="Validation Failed",
        detail="The request could not be decoded.",
        instance=str(request.url),
        errors=errors,
    )


@dataclass(frozen=True)
class JsonCodecFeature:
    """Response class used for resource bodies plus the request-side error mapping."""

    response_class: type[Response] = field(default=JSONResponse)

    def install(self, app: FastAPI) -> None:
        app.add_exception_handler(RequestValidationError, request_validation_handler)
