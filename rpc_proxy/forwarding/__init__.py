"""Forwarding package: outbound transport and the rate-limit retry driver."""

from rpc_proxy.forwarding.forwarder import EXHAUSTED_MESSAGE, RequestForwarder
from rpc_proxy.forwarding.transport import (
    HttpTransport,
    UpstreamHTTPError,
    UpstreamResponse,
    UpstreamTransportError,
)
from rpc_proxy.forwarding.types import Outcome, OutcomeKind

__all__ = [
    "EXHAUSTED_MESSAGE",
    "HttpTransport",
    "Outcome",
    "OutcomeKind",
    "RequestForwarder",
    "UpstreamHTTPError",
    "UpstreamResponse",
    "UpstreamTransportError",
]
