"""Public models for the RPC proxy."""

from rpc_proxy.models.responses import HealthStatus, MemoryUsage, ReadinessStatus

__all__ = ["HealthStatus", "MemoryUsage", "ReadinessStatus"]
