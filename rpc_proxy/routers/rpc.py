"""JSON-RPC forwarding endpoint.

- POST /rpc: forward the JSON body to the upstream pool

Other methods on /rpc are answered with 405 by the error handlers.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

from rpc_proxy.middleware.error_handler import InvalidJsonError, PayloadTooLargeError

if TYPE_CHECKING:
    from rpc_proxy.forwarding.forwarder import RequestForwarder


def _reject_constant(name: str) -> None:
    # NaN, Infinity and -Infinity are not JSON and cannot be re-encoded upstream
    raise ValueError(f"non-standard JSON constant: {name}")


async def read_limited_body(request: Request, max_body_bytes: int) -> bytes:
    """Read the request body, stopping as soon as it exceeds ``max_body_bytes``."""
    received = bytearray()
    async for chunk in request.stream():
        received += chunk
        if len(received) > max_body_bytes:
            raise PayloadTooLargeError()
    return bytes(received)


def create_rpc_router(
    *,
    forwarder: RequestForwarder,
    max_body_bytes: int,
) -> APIRouter:
    """Factory that creates the RPC router with injected dependencies.

    Parameters
    ----------
    forwarder:
        RequestForwarder that drives delivery across the pool.
    max_body_bytes:
        Upper bound on the inbound body, counted while streaming so that
        chunked uploads are cut off once they cross it.
    """
    rpc_router = APIRouter(tags=["rpc"])

    @rpc_router.post("/rpc")
    async def forward(request: Request) -> Response:
        """Forward the payload unchanged and relay the upstream answer."""
        body = await read_limited_body(request, max_body_bytes)

        try:
            payload = json.loads(body, parse_constant=_reject_constant)
        except ValueError as exc:
            raise InvalidJsonError() from exc

        outcome = await forwarder.handle(payload)
        return Response(
            content=outcome.content,
            status_code=outcome.status_code,
            media_type=outcome.media_type,
        )

    return rpc_router
