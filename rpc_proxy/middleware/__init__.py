"""HTTP middleware and the JSON-RPC error hierarchy."""

from rpc_proxy.middleware.access_log import AccessLogMiddleware
from rpc_proxy.middleware.body_limit import BodySizeLimitMiddleware
from rpc_proxy.middleware.error_handler import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    EmptyPoolError,
    InvalidJsonError,
    MethodNotAllowedError,
    PayloadTooLargeError,
    ProxyError,
    error_response,
    register_error_handlers,
    rpc_error_body,
)
from rpc_proxy.middleware.request_id import RequestIdMiddleware

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_REQUEST",
    "PARSE_ERROR",
    "AccessLogMiddleware",
    "BodySizeLimitMiddleware",
    "EmptyPoolError",
    "InvalidJsonError",
    "MethodNotAllowedError",
    "PayloadTooLargeError",
    "ProxyError",
    "RequestIdMiddleware",
    "error_response",
    "register_error_handlers",
    "rpc_error_body",
]
