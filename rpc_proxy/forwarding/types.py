"""Outcome model returned by the request forwarder."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from rpc_proxy.forwarding.transport import DEFAULT_MEDIA_TYPE
from rpc_proxy.middleware.error_handler import INTERNAL_ERROR, rpc_error_body
from rpc_proxy.pool.types import Endpoint


class OutcomeKind(str, Enum):
    """Terminal state of one forwarded request."""

    SUCCESS = "success"
    UPSTREAM_ERROR = "upstream_error"  # upstream error passed through verbatim
    TRANSPORT_ERROR = "transport_error"  # no upstream response
    EXHAUSTED = "exhausted"  # every attempt was rate limited


@dataclass(frozen=True)
class Outcome:
    """Status and body to return to the caller, plus how it was reached."""

    kind: OutcomeKind
    status_code: int
    content: bytes
    media_type: str = DEFAULT_MEDIA_TYPE
    attempts: int = 0
    endpoint: Endpoint | None = None

    @classmethod
    def error(
        cls,
        kind: OutcomeKind,
        message: str,
        *,
        status_code: int = 500,
        code: int = INTERNAL_ERROR,
        attempts: int = 0,
        endpoint: Endpoint | None = None,
    ) -> Outcome:
        """Build a synthesized JSON-RPC error outcome."""
        return cls(
            kind=kind,
            status_code=status_code,
            content=json.dumps(rpc_error_body(message, code)).encode(),
            attempts=attempts,
            endpoint=endpoint,
        )

    def json(self) -> object:
        """Decode the body; raises ``ValueError`` when it is not JSON."""
        return json.loads(self.content)
