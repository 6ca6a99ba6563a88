"""
Exception handlers for the OAuth relay API.

Every error body has the shape ``{"error": <message>, ...details}``. Responses
carry an ``X-Request-ID`` header, plus the endpoint's CORS headers when the
route computed them before failing.
"""

import logging
import traceback
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from oauth_relay.config import get_settings
from oauth_relay.exceptions import RelayError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid4())


def create_error_response(
    request: Request,
    request_id: str,
    message: str,
    status_code: int,
    details: dict = None,
    headers: dict = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content = {"error": message}
    if details:
        content.update(details)

    response_headers = dict(getattr(request.state, "cors_headers", None) or {})
    if headers:
        response_headers.update(headers)
    response_headers["X-Request-ID"] = request_id

    return JSONResponse(
        status_code=status_code, content=content, headers=response_headers
    )


async def relay_exception_handler(
    request: Request,
    exc: RelayError,
) -> JSONResponse:
    """
    Handle all RelayError exceptions.
    """
    request_id = _request_id(request)

    logger.warning(
        f"Request error: {exc.code}",
        extra={
            "request_id": request_id,
            "error_code": exc.code,
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    return create_error_response(
        request,
        request_id=request_id,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request validation failures in the relay error shape."""
    request_id = _request_id(request)
    errors = [
        {"field": ".".join(map(str, error["loc"])), "message": error["msg"]}
        for error in exc.errors()
    ]
    logger.info(
        "Rejected request parameters",
        extra={"request_id": request_id, "path": request.url.path},
    )

    return create_error_response(
        request,
        request_id=request_id,
        message="Request validation failed",
        status_code=422,
        details={"validation_errors": errors},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """
    Handle standard HTTP exceptions (404, 405, ...).
    """
    return create_error_response(
        request,
        request_id=_request_id(request),
        message=str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Handle all unhandled exceptions.
    """
    request_id = _request_id(request)
    settings = get_settings()

    # Exception messages may echo provider payloads; log the type only.
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=True,
    )

    if settings.debug:
        details = {
            "exception_type": type(exc).__name__,
            "traceback": traceback.format_exc().split("\n"),
        }
    else:
        details = None

    return create_error_response(
        request,
        request_id=request_id,
        message="Internal server error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        details=details,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.
    """
    app.add_exception_handler(RelayError, relay_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
