"""Retry driver: delivers one inbound call across the endpoint pool.

Only rate-limit failures are retried, each time on the next endpoint the pool
selects, for at most one attempt per configured endpoint. Any other upstream
error is passed through verbatim and a failure with no upstream response is
reported as a JSON-RPC internal error; neither is retried.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from rpc_proxy.forwarding.transport import (
    HttpTransport,
    UpstreamHTTPError,
    UpstreamTransportError,
)
from rpc_proxy.forwarding.types import Outcome, OutcomeKind
from rpc_proxy.pool.manager import EndpointPool
from rpc_proxy.resilience.rate_limit import RateLimitClassifier

logger = logging.getLogger(__name__)

EXHAUSTED_MESSAGE = "All RPC endpoints are currently unavailable due to rate limits"


class RequestForwarder:
    """Forwards opaque JSON payloads to the pool, rotating away from rate-limited endpoints.

    Parameters
    ----------
    pool:
        Shared endpoint pool; selection and demotion go through it.
    transport:
        Outbound transport, anything with ``async send(endpoint, payload)``.
    classifier:
        Rate-limit predicate applied to failed upstream responses.
    """

    def __init__(
        self,
        pool: EndpointPool,
        transport: HttpTransport,
        classifier: RateLimitClassifier | None = None,
    ) -> None:
        self._pool = pool
        self._transport = transport
        self._classifier = classifier or RateLimitClassifier()

    async def handle(self, payload: Any) -> Outcome:
        """Forward ``payload`` and return the outcome for the caller."""
        max_attempts = self._pool.size

        for attempt in range(1, max_attempts + 1):
            endpoint = self._pool.select_endpoint()
            log_extra = {
                "endpoint": endpoint.label,
                "endpoint_index": endpoint.index,
                "attempt": attempt,
            }
            logger.debug(
                "Forwarding request to endpoint %d: %s",
                endpoint.index,
                endpoint.label,
                extra=log_extra,
            )
            started = time.perf_counter()

            try:
                response = await self._transport.send(endpoint, payload)

            except UpstreamHTTPError as exc:
                if self._classifier.is_rate_limited(exc.status_code, exc.content):
                    self._pool.mark_unavailable(endpoint)
                    continue

                logger.error(
                    "Error with endpoint %d: upstream returned HTTP %d",
                    endpoint.index,
                    exc.status_code,
                    extra={**log_extra, "status_code": exc.status_code},
                )
                return Outcome(
                    kind=OutcomeKind.UPSTREAM_ERROR,
                    status_code=exc.status_code,
                    content=exc.content,
                    media_type=exc.media_type,
                    attempts=attempt,
                    endpoint=endpoint,
                )

            except UpstreamTransportError as exc:
                logger.error(
                    "Error with endpoint %d: %s",
                    endpoint.index,
                    exc.message,
                    extra={**log_extra, "error_reason": exc.message},
                )
                return Outcome.error(
                    OutcomeKind.TRANSPORT_ERROR,
                    f"RPC Error: {exc.message}",
                    attempts=attempt,
                    endpoint=endpoint,
                )

            logger.debug(
                "Endpoint %d answered HTTP %d",
                endpoint.index,
                response.status_code,
                extra={
                    **log_extra,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return Outcome(
                kind=OutcomeKind.SUCCESS,
                status_code=response.status_code,
                content=response.content,
                media_type=response.media_type,
                attempts=attempt,
                endpoint=endpoint,
            )

        logger.error(
            "All %d RPC endpoints rate limited, giving up",
            max_attempts,
            extra={"attempt": max_attempts},
        )
        return Outcome.error(
            OutcomeKind.EXHAUSTED, EXHAUSTED_MESSAGE, attempts=max_attempts
        )
