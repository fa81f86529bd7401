"""Liveness and pool statistics endpoints.

- GET /health: service status, pool snapshot, uptime and memory
- GET /readiness: 200 only when at least one endpoint is available
- GET /metrics: per-endpoint pool statistics
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import psutil
from fastapi import APIRouter, Response

from rpc_proxy.models.responses import HealthStatus, MemoryUsage, ReadinessStatus

if TYPE_CHECKING:
    from rpc_proxy.pool.manager import EndpointPool


def create_health_router(*, pool: EndpointPool) -> APIRouter:
    """Factory that creates the health router with the injected endpoint pool."""

    health_router = APIRouter(tags=["health"])
    process = psutil.Process()

    @health_router.get("/health")
    async def health() -> dict:
        """Pool snapshot plus process uptime and memory."""
        snapshot = pool.health_snapshot()
        memory = process.memory_info()

        return HealthStatus(
            available_endpoints=snapshot.available_count,
            total_endpoints=snapshot.total_count,
            current_endpoint=snapshot.current_index,
            uptime=round(time.time() - process.create_time(), 3),
            memory=MemoryUsage(rss=memory.rss, vms=memory.vms),
        ).model_dump(by_alias=True)

    @health_router.get("/readiness")
    async def readiness(response: Response) -> dict:
        """Readiness probe: 200 iff at least one endpoint is currently available."""
        snapshot = pool.health_snapshot()
        is_ready = snapshot.available_count > 0

        if not is_ready:
            response.status_code = 503

        return ReadinessStatus(
            ready=is_ready,
            available_endpoints=snapshot.available_count,
            total_endpoints=snapshot.total_count,
        ).model_dump(by_alias=True)

    @health_router.get("/metrics")
    async def metrics() -> dict:
        """Per-endpoint availability and failure counters."""
        return pool.get_stats()

    return health_router
