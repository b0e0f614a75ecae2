"""Translate domain failures into the JSON error body.

Every non-2xx response is ``{timestamp, status, error, message}``;
request validation failures add a ``details`` map of field to message.
"""
import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filevault.exceptions import (
    Conflict,
    FileVaultError,
    InvalidInput,
    NotFound,
    QuotaExceeded,
    StorageError,
    Unauthorized,
)
from filevault.schemas.error import ErrorResponse

log = logging.getLogger(__name__)

# most specific first
ERROR_MAP: list[tuple[type[FileVaultError], int, str]] = [
    (QuotaExceeded, 400, "File too large"),
    (InvalidInput, 400, "Invalid argument"),
    (NotFound, 404, "Not found"),
    (Unauthorized, 401, "Authentication failed"),
    (Conflict, 409, "Conflict"),
    (StorageError, 500, "File storage error"),
]


def error_response(status: int, error: str, message: str, details: dict[str, str] | None = None) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status,
        error=error,
        message=message,
        details=details,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content=jsonable_encoder(body, exclude_none=True),
        headers=headers,
    )


def classify(exc: FileVaultError) -> tuple[int, str]:
    for exc_type, status, error in ERROR_MAP:
        if isinstance(exc, exc_type):
            return status, error
    return 500, "Internal server error"


async def handle_domain_error(request: Request, exc: FileVaultError) -> JSONResponse:
    status, error = classify(exc)
    if status >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(status, error, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details[".".join(loc) or "request"] = err.get("msg", "Invalid value")
    return error_response(400, "Validation failed", "Invalid input data", details)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        error = HTTPStatus(exc.status_code).phrase
    except ValueError:
        error = "Error"
    return error_response(exc.status_code, error, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "Unexpected error", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FileVaultError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
