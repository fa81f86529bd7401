"""Response models for the health endpoints.

Field names are camelCase on the wire to stay compatible with existing
monitoring that polls ``/health``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class MemoryUsage(BaseModel):
    """Process memory in bytes."""

    rss: int
    vms: int


class HealthStatus(BaseModel):
    """Body of ``GET /health``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = "ok"
    available_endpoints: int
    total_endpoints: int
    current_endpoint: int
    uptime: float  # seconds since process start
    memory: MemoryUsage


class ReadinessStatus(BaseModel):
    """Body of ``GET /readiness``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ready: bool
    available_endpoints: int
    total_endpoints: int
