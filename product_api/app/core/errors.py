"""
Error envelopes and application exception handlers.

Every error leaves the API as ``{"status": <HTTP status text>,
"message": <text>}`` with a bare ``application/json`` content type,
while successful bodies use ``UTF8JSONResponse``.  Handlers raise
``HTTPException`` as usual; the functions here only render them.
Validation failures detected by FastAPI's routing layer (a path id
that is not an integer, a body that is not JSON or has a field of the
wrong type) become 400 responses instead of FastAPI's default 422.
"""

import logging
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_ID = "Invalid id"
INVALID_BODY = "Invalid body"
INTERNAL_ERROR = "internal server error"


class UTF8JSONResponse(JSONResponse):
    """JSON response advertising its charset, used for success bodies."""

    media_type = "application/json; charset=utf-8"


def error_response(status_code: int, message: Optional[str] = None,
                   headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Build the ``{status, message}`` envelope for ``status_code``."""
    return JSONResponse(
        status_code=status_code,
        content={"status": HTTPStatus(status_code).phrase, "message": message},
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    # A bad path id wins over body problems on the same request.
    if any(tuple(error.get("loc", ()))[:1] == ("path",) for error in errors):
        return INVALID_ID
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if error.get("type") == "json_invalid" or loc == ("body",):
            return INVALID_BODY
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in tuple(first.get("loc", ()))[1:])
    if not field:
        return INVALID_BODY
    return f"Invalid {field}: {first.get('msg', 'invalid value')}"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message: Any = exc.detail
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # The traceback is logged by RequestLoggingMiddleware; never echo it.
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
