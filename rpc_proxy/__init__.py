"""Rate-limit aware forwarding proxy for pools of JSON-RPC endpoints."""

__version__ = "1.0.0"
