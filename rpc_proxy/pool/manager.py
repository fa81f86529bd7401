"""Endpoint pool manager with round-robin selection and rate-limit demotion.

Endpoints are loaded once from an ordered list of URLs and never resized.
Selection scans round-robin from a shared cursor, skipping demoted endpoints.
A demoted endpoint becomes selectable again once the recovery window has
passed since its last failure; recovery is evaluated lazily at selection time,
there is no background task.

Selection never raises: when every endpoint is demoted and still inside its
window, the endpoint at the scan's starting position is returned anyway and
the caller is left to receive the upstream error.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from rpc_proxy.middleware.error_handler import EmptyPoolError
from rpc_proxy.pool.types import Endpoint, EndpointHealth, PoolSnapshot

logger = logging.getLogger(__name__)

DEFAULT_RECOVERY_WINDOW_SECONDS = 300.0


class EndpointPool:
    """Owns the upstream endpoints, their health records and the shared cursor.

    Parameters
    ----------
    urls:
        Upstream addresses in pool order. Must not be empty.
    recovery_window_seconds:
        Time after a demotion before the endpoint is eligible again.
    clock:
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        urls: list[str],
        recovery_window_seconds: float = DEFAULT_RECOVERY_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not urls:
            raise EmptyPoolError()

        self._endpoints: tuple[Endpoint, ...] = tuple(
            Endpoint(index=i, url=url) for i, url in enumerate(urls)
        )
        self._health: list[EndpointHealth] = [EndpointHealth() for _ in urls]
        self._next_index: int = 0
        self._current_index: int = 0
        self._recovery_window_seconds = recovery_window_seconds
        self._clock = clock
        self._lock = threading.Lock()

        logger.info("Endpoint pool initialized with %d endpoints", len(self._endpoints))

    @property
    def size(self) -> int:
        return len(self._endpoints)

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        return self._endpoints

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_endpoint(self) -> Endpoint:
        """Return the next available endpoint, scanning round-robin from the cursor.

        A demoted endpoint whose recovery window has elapsed is restored and
        returned. If nothing qualifies after a full scan, the endpoint at the
        starting position is returned.
        """
        with self._lock:
            pool_size = len(self._endpoints)
            start = self._next_index
            now = self._clock()

            for offset in range(pool_size):
                index = (start + offset) % pool_size
                health = self._health[index]

                if health.available:
                    return self._take(index)

                if self._recovered(health, now):
                    health.available = True
                    logger.info(
                        "Endpoint %d restored after recovery window: %s",
                        index,
                        self._endpoints[index].label,
                    )
                    return self._take(index)

            logger.warning(
                "No endpoint available, falling back to endpoint %d: %s",
                start,
                self._endpoints[start].label,
            )
            return self._take(start)

    def _take(self, index: int) -> Endpoint:
        # Caller holds the lock.
        self._current_index = index
        self._next_index = (index + 1) % len(self._endpoints)
        return self._endpoints[index]

    def _recovered(self, health: EndpointHealth, now: float) -> bool:
        if health.last_failure_time is None:
            return False
        return now - health.last_failure_time >= self._recovery_window_seconds

    # ------------------------------------------------------------------
    # Health tracking
    # ------------------------------------------------------------------

    def mark_unavailable(self, endpoint: Endpoint) -> None:
        """Demote an endpoint after a rate-limit failure and bump its failure counter."""
        with self._lock:
            health = self._health[endpoint.index]
            health.available = False
            health.last_failure_time = self._clock()
            health.failure_count += 1
            failures = health.failure_count

        logger.warning(
            "Endpoint %d marked unavailable due to rate limit: %s (failures: %d)",
            endpoint.index,
            endpoint.label,
            failures,
            extra={"endpoint": endpoint.label, "endpoint_index": endpoint.index},
        )

    def is_available(self, endpoint: Endpoint) -> bool:
        with self._lock:
            return self._health[endpoint.index].available

    def failure_count(self, endpoint: Endpoint) -> int:
        with self._lock:
            return self._health[endpoint.index].failure_count

    # ------------------------------------------------------------------
    # Stats / metrics
    # ------------------------------------------------------------------

    def health_snapshot(self) -> PoolSnapshot:
        """Return availability counts and the current cursor for the health endpoint."""
        with self._lock:
            return PoolSnapshot(
                available_count=sum(1 for h in self._health if h.available),
                total_count=len(self._endpoints),
                current_index=self._current_index,
            )

    def get_stats(self) -> dict:
        """Return per-endpoint statistics for the metrics endpoint."""
        with self._lock:
            now = self._clock()
            per_endpoint = [
                {
                    "index": endpoint.index,
                    "endpoint": endpoint.label,
                    "available": health.available,
                    "failure_count": health.failure_count,
                    "seconds_since_failure": (
                        round(now - health.last_failure_time, 3)
                        if health.last_failure_time is not None
                        else None
                    ),
                }
                for endpoint, health in zip(self._endpoints, self._health)
            ]
            available = sum(1 for h in self._health if h.available)
            current_index = self._current_index

        return {
            "total": len(per_endpoint),
            "available": available,
            "unavailable": len(per_endpoint) - available,
            "current_index": current_index,
            "recovery_window_seconds": self._recovery_window_seconds,
            "endpoints": per_endpoint,
        }
