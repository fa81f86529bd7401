"""Pydantic Settings for the RPC proxy.

All environment variables use the RPC_PROXY_ prefix.
Example: RPC_PROXY_PORT=8888, RPC_PROXY_ENDPOINTS=https://a.example,https://b.example

The legacy names ``AVALANCHE_RPC_ENDPOINTS`` and ``PORT`` are still honoured,
and a ``.env`` file in the working directory is read when present.
"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rpc_proxy.resilience.rate_limit import DEFAULT_MARKERS


class RpcProxySettings(BaseSettings):
    """RPC proxy configuration validated from environment variables."""

    # Upstream pool (comma-separated URLs, order is significant)
    endpoints: str = Field(
        validation_alias=AliasChoices("RPC_PROXY_ENDPOINTS", "AVALANCHE_RPC_ENDPOINTS"),
    )

    # Service
    host: str = "0.0.0.0"
    port: int = Field(
        default=8888,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("RPC_PROXY_PORT", "PORT"),
    )
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    access_log: bool = True
    max_body_bytes: int = Field(default=100 * 1024, ge=1)  # body-parser default

    # Pool policy
    recovery_window_seconds: float = Field(default=300.0, gt=0)  # 5 minutes

    # Outbound transport
    upstream_timeout_seconds: float = Field(default=30.0, gt=0)

    # Rate-limit classification
    rate_limit_status_codes: list[int] = [429]
    rate_limit_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MARKERS)
    )
    rate_limit_case_sensitive: bool = True

    model_config = SettingsConfigDict(
        env_prefix="RPC_PROXY_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("endpoints")
    @classmethod
    def _require_endpoints(cls, value: str) -> str:
        urls = [part.strip() for part in value.split(",") if part.strip()]
        if not urls:
            raise ValueError("at least one RPC endpoint must be configured")
        return ",".join(urls)

    @property
    def endpoint_list(self) -> list[str]:
        """Configured upstream URLs in pool order."""
        return self.endpoints.split(",")
