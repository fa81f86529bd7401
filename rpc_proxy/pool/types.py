"""Endpoint data models for the pool manager."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass(frozen=True)
class Endpoint:
    """One upstream RPC provider address and its position in the pool."""

    index: int
    url: str

    @property
    def label(self) -> str:
        """Address safe for logs: provider URLs often carry an API key in the path."""
        parsed = urlparse(self.url)
        if not parsed.scheme or not parsed.hostname:
            return f"endpoint-{self.index}"
        host = parsed.hostname
        if parsed.port:
            host = f"{host}:{parsed.port}"
        return f"{parsed.scheme}://{host}"


@dataclass
class EndpointHealth:
    """Mutable health record, owned by the pool manager."""

    available: bool = True
    last_failure_time: float | None = None  # monotonic seconds
    failure_count: int = 0


@dataclass(frozen=True)
class PoolSnapshot:
    """Read-only view of the pool used by the health endpoint."""

    available_count: int
    total_count: int
    current_index: int
