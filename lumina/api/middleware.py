"""API middleware and error handlers.

Provides:
- Request context: correlation ID, structured request log, crash envelope
- Consistent error envelopes for Lumina and HTTP errors
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from lumina.exceptions import LuminaError, ProductNotFoundError, ProductValidationError

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


# ============================================================================
# Error Envelope
# ============================================================================


def error_body(
    request: Request, error_code: str, message: str, details: list | dict | None = None
) -> dict:
    """Build the standard error envelope."""
    return {
        "error_code": error_code,
        "message": message,
        "details": details if details is not None else [],
        "request_id": getattr(request.state, "request_id", None),
    }


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unhandled exception and answer with the 500 envelope."""
    logger.error(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(request, "INTERNAL_ERROR", "An internal error occurred"),
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )


# ============================================================================
# Request Context Middleware
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with a correlation ID and log its outcome.

    The ID is taken from the `X-Request-ID` header or generated, bound into
    the structlog context while the request runs, and echoed on the
    response. Handler crashes are answered here with the 500 envelope so
    they keep the header too. The completion log line carries the catalog
    version the request left behind.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                response = internal_error_response(request, e)

            catalog = getattr(request.app.state, "catalog", None)
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                catalog_version=catalog.version if catalog is not None else None,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# Error Handlers
# ============================================================================


LUMINA_ERROR_STATUS = {
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    ProductValidationError: 422,
}


async def lumina_error_handler(request: Request, exc: LuminaError) -> JSONResponse:
    """Map Lumina errors to their HTTP status."""
    status_code = LUMINA_ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(
        "Request failed",
        path=request.url.path,
        error_code=exc.error_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_body(request, exc.error_code, exc.message, exc.details),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap HTTP errors, including router 404/405s, in the envelope."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "NOT_FOUND" if exc.status_code == 404 else "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, error_code, message, details),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle exceptions that escape the request context middleware."""
    return internal_error_response(request, exc)


def setup_middleware(app: FastAPI) -> None:
    """Configure middleware and exception handlers for the application.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(LuminaError, lumina_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
