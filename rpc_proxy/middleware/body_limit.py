"""Inbound body size limit middleware.

Rejects requests whose declared ``Content-Length`` exceeds the configured
limit before the body is read. Bodies sent without a length (chunked) are
counted by the RPC route while they stream in.
"""

from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from rpc_proxy.middleware.error_handler import (
    InvalidJsonError,
    PayloadTooLargeError,
    error_response,
)

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Starlette middleware enforcing ``max_body_bytes`` on inbound requests."""

    def __init__(self, app, max_body_bytes: int) -> None:  # noqa: ANN001
        super().__init__(app)
        self._max_body_bytes = max_body_bytes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        declared = request.headers.get("content-length")
        if declared is None:
            return await call_next(request)

        try:
            length = int(declared)
        except ValueError:
            return error_response(
                InvalidJsonError.status_code,
                "Invalid Content-Length header",
                InvalidJsonError.rpc_code,
            )

        if length > self._max_body_bytes:
            logger.warning(
                "Rejected request body of %d bytes (limit %d)",
                length,
                self._max_body_bytes,
                extra={"path": request.url.path},
            )
            return error_response(
                PayloadTooLargeError.status_code,
                PayloadTooLargeError.message,
                PayloadTooLargeError.rpc_code,
            )

        return await call_next(request)
