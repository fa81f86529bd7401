"""Resilience components for the RPC proxy."""

from rpc_proxy.resilience.rate_limit import RateLimitClassifier, extract_error_message

__all__ = ["RateLimitClassifier", "extract_error_message"]
