"""Helpers shared by unit and property tests: fake clock and fake upstreams."""

from __future__ import annotations

import json
from typing import Callable

import httpx

from rpc_proxy.forwarding.transport import HttpTransport

ENDPOINT_URLS = [
    "https://node-a.example.com/v2/key-a",
    "https://node-b.example.com/v2/key-b",
    "https://node-c.example.com/v2/key-c",
]

PAYLOAD = {"jsonrpc": "2.0", "id": 1, "method": "eth_chainId", "params": []}
RPC_OK = {"jsonrpc": "2.0", "id": 1, "result": "0xa86a"}
RATE_LIMITED = {
    "jsonrpc": "2.0",
    "id": 1,
    "error": {"code": -32005, "message": "daily request count exceeded, request rate limited"},
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def json_response(status_code: int, body: object) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"content-type": "application/json"},
    )


def mock_transport(
    handler: Callable[[httpx.Request], httpx.Response],
) -> HttpTransport:
    """HttpTransport whose client answers every request with ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(client=client)


def routed_transport(
    routes: dict[str, Callable[[httpx.Request], httpx.Response]],
    calls: list[str] | None = None,
) -> HttpTransport:
    """HttpTransport dispatching on the request URL; records visited URLs in ``calls``."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(url)
        return routes[url](request)

    return mock_transport(handler)


def always(status_code: int, body: object) -> Callable[[httpx.Request], httpx.Response]:
    """Route handler that always answers with the same JSON response."""
    return lambda _request: json_response(status_code, body)
