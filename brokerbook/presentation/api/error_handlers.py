"""Exception handlers turning domain errors into the JSON error envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from brokerbook.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    RecordStoreError,
    StorageUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: list[tuple[type[RecordStoreError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    body = {"success": False, "error": message, **extra}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def record_store_error_handler(request: Request, exc: RecordStoreError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _STATUS_CODES if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    extra: dict = {}
    if isinstance(exc, ValidationError) and exc.field:
        extra["field"] = exc.field
    if exc.retryable:
        extra["retryable"] = True
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(status_code, str(exc), **extra)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return error_response(status.HTTP_400_BAD_REQUEST, message, details=errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordStoreError, record_store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
