"""Translate engine errors and request failures into JSON envelopes."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from ..errors import VedicEngineError

ERROR_STATUS: Mapping[str, int] = {
    "VALIDATION_ERROR": 422,
    "PLACE_NOT_FOUND": 404,
    "COMPUTATION_RANGE": 422,
    "BACKEND_UNAVAILABLE": 503,
}


class ErrorEnvelope(BaseModel):
    """Standardized error payload returned by the public API."""

    code: str = Field(description="Machine readable error code.")
    message: str = Field(description="Human friendly summary of the error.")
    details: Any | None = Field(
        default=None, description="Optional structured details that expand on the error."
    )


def _status_to_code(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).name.upper()
    except ValueError:
        return "ERROR"


async def engine_error_handler(_: Request, exc: VedicEngineError) -> ORJSONResponse:
    envelope = ErrorEnvelope(**exc.as_dict())
    status_code = ERROR_STATUS.get(exc.code, 500)
    return ORJSONResponse(status_code=status_code, content=envelope.model_dump())


async def http_exception_handler(_: Request, exc: HTTPException) -> ORJSONResponse:
    if isinstance(exc.detail, Mapping):
        envelope = ErrorEnvelope(
            code=str(exc.detail.get("code") or _status_to_code(exc.status_code)),
            message=str(exc.detail.get("message") or HTTPStatus(exc.status_code).phrase),
            details=exc.detail.get("details"),
        )
    else:
        envelope = ErrorEnvelope(
            code=_status_to_code(exc.status_code),
            message=str(exc.detail or HTTPStatus(exc.status_code).phrase),
        )
    return ORJSONResponse(status_code=exc.status_code, content=envelope.model_dump())


async def validation_exception_handler(
    _: Request, exc: RequestValidationError
) -> ORJSONResponse:
    envelope = ErrorEnvelope(
        code="VALIDATION_ERROR",
        message="Request validation failed.",
        details=[
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ],
    )
    return ORJSONResponse(status_code=422, content=envelope.model_dump())


def install_error_handlers(app: FastAPI) -> None:
    """Register shared exception handlers on the provided FastAPI app."""

    app.add_exception_handler(VedicEngineError, engine_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


__all__ = [
    "ERROR_STATUS",
    "ErrorEnvelope",
    "engine_error_handler",
    "http_exception_handler",
    "install_error_handlers",
    "validation_exception_handler",
]
