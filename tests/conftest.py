"""Shared test fixtures for the RPC proxy test suite."""

from __future__ import annotations

import pytest

from rpc_proxy.config.settings import RpcProxySettings
from rpc_proxy.pool.manager import EndpointPool
from tests.support import ENDPOINT_URLS, FakeClock


# ---------------------------------------------------------------------------
# Keep the host environment out of settings
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_proxy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove endpoint/port variables that would leak into RpcProxySettings."""
    for key in ("RPC_PROXY_ENDPOINTS", "AVALANCHE_RPC_ENDPOINTS", "RPC_PROXY_PORT", "PORT"):
        monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> RpcProxySettings:
    """Test settings with safe defaults."""
    return RpcProxySettings(
        endpoints=",".join(ENDPOINT_URLS),
        access_log=False,
        max_body_bytes=4096,
    )


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pool(clock: FakeClock) -> EndpointPool:
    return EndpointPool(ENDPOINT_URLS, recovery_window_seconds=300, clock=clock)

