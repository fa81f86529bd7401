"""Endpoint pool package: round-robin selection with demotion and lazy recovery."""

from rpc_proxy.pool.manager import EndpointPool
from rpc_proxy.pool.types import Endpoint, EndpointHealth, PoolSnapshot

__all__ = ["Endpoint", "EndpointHealth", "EndpointPool", "PoolSnapshot"]
