"""Global error hierarchy and FastAPI exception handlers.

All proxy-specific errors extend ProxyError. The FastAPI exception handlers
catch these errors (plus Starlette HTTP exceptions and unhandled exceptions)
and return a JSON-RPC style error object: { error: { message, code } }.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# JSON-RPC 2.0 error codes used by the proxy
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
INTERNAL_ERROR = -32603


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class ProxyError(Exception):
    """Base error for all proxy-specific errors."""

    status_code: int = 500
    rpc_code: int = INTERNAL_ERROR
    message: str = "Internal error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class EmptyPoolError(ProxyError):
    """No upstream endpoints configured: the pool cannot be built."""

    message = "At least one RPC endpoint must be configured"


class InvalidJsonError(ProxyError):
    """Inbound body is not valid JSON."""

    status_code = 400
    rpc_code = PARSE_ERROR
    message = "Parse error"


class PayloadTooLargeError(ProxyError):
    """Inbound body exceeds the configured size limit."""

    status_code = 413
    rpc_code = INVALID_REQUEST
    message = "Request body too large"


class MethodNotAllowedError(ProxyError):
    """HTTP method not supported on the route."""

    status_code = 405
    rpc_code = INVALID_REQUEST
    message = "Method not allowed"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def rpc_error_body(message: str, code: int) -> dict:
    """Build the JSON-RPC error object returned to callers."""
    return {"error": {"message": message, "code": code}}


def error_response(status_code: int, message: str, code: int) -> JSONResponse:
    """Build a JSON-RPC error response."""
    return JSONResponse(status_code=status_code, content=rpc_error_body(message, code))


async def _proxy_error_handler(_request: Request, exc: ProxyError) -> JSONResponse:
    """Handle ProxyError subclasses."""
    return error_response(exc.status_code, exc.message, exc.rpc_code)


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render routing errors (404, 405, ...) in the JSON-RPC error shape."""
    if exc.status_code == 405:
        err = MethodNotAllowedError()
        response = error_response(err.status_code, err.message, err.rpc_code)
    else:
        response = error_response(exc.status_code, str(exc.detail), INVALID_REQUEST)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return error_response(500, ProxyError.message, INTERNAL_ERROR)


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(ProxyError, _proxy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
