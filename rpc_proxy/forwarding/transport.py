"""Outbound HTTP transport to upstream RPC endpoints.

A received non-2xx response raises ``UpstreamHTTPError`` carrying the upstream
status and body. A failure with no response at all (DNS, connect, timeout,
protocol error) raises ``UpstreamTransportError``. The retry driver branches
on that distinction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from rpc_proxy.pool.types import Endpoint

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class UpstreamResponse:
    """A successful (2xx) upstream reply, body kept as raw bytes."""

    status_code: int
    content: bytes
    media_type: str = DEFAULT_MEDIA_TYPE


class UpstreamHTTPError(Exception):
    """Upstream answered with an error status."""

    def __init__(self, status_code: int, content: bytes, media_type: str = DEFAULT_MEDIA_TYPE) -> None:
        self.status_code = status_code
        self.content = content
        self.media_type = media_type
        super().__init__(f"Upstream returned HTTP {status_code}")


class UpstreamTransportError(Exception):
    """No response was received from the upstream."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class HttpTransport:
    """Posts JSON payloads to upstream endpoints over a shared ``httpx.AsyncClient``.

    Parameters
    ----------
    timeout_seconds:
        Overall per-request timeout applied by the client.
    client:
        Pre-built client, e.g. one wrapping ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def send(self, endpoint: Endpoint, payload: Any) -> UpstreamResponse:
        """POST ``payload`` as JSON to ``endpoint`` and return the 2xx reply."""
        try:
            response = await self._client.post(
                endpoint.url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise UpstreamTransportError(str(exc) or exc.__class__.__name__) from exc

        media_type = response.headers.get("content-type", DEFAULT_MEDIA_TYPE)
        if not response.is_success:
            raise UpstreamHTTPError(response.status_code, response.content, media_type)

        return UpstreamResponse(response.status_code, response.content, media_type)

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.debug("Upstream HTTP client closed")
