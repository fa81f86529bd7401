"""Configuration module: environment-driven settings."""

from rpc_proxy.config.settings import RpcProxySettings

__all__ = ["RpcProxySettings"]
