"""Map domain errors onto HTTP responses."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dealledger.domain.errors import ConflictError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

log = getLogger(__name__)


def _error_body(detail: str, field: str | None = None) -> dict[str, str]:
    body = {"detail": detail}
    if field:
        body["field"] = field
    return body


async def _validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(str(exc), exc.field),
    )


async def _request_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=_error_body("invalid request")
        )
    first = errors[0]
    # drop the "body"/"query"/"path" prefix so the field reads like the payload key
    location = [str(part) for part in first.get("loc", ())][1:]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(str(first.get("msg", "invalid value")), ".".join(location) or None),
    )


async def _not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(str(exc)))


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    log.warning("Conflict on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_body(str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ConflictError, _conflict)
