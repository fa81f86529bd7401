"""FastAPI application factory with lifespan management.

Startup: validate settings, build the endpoint pool, rate-limit classifier,
upstream transport and forwarder, mount routers and middleware.
Shutdown: close the upstream HTTP client.

Run with ``python -m rpc_proxy`` or
``uvicorn rpc_proxy.main:create_app --factory``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rpc_proxy import __version__
from rpc_proxy.config.settings import RpcProxySettings
from rpc_proxy.forwarding.forwarder import RequestForwarder
from rpc_proxy.forwarding.transport import HttpTransport
from rpc_proxy.middleware.access_log import AccessLogMiddleware
from rpc_proxy.middleware.body_limit import BodySizeLimitMiddleware
from rpc_proxy.middleware.error_handler import register_error_handlers
from rpc_proxy.middleware.request_id import RequestIdMiddleware
from rpc_proxy.pool.manager import EndpointPool
from rpc_proxy.resilience.rate_limit import RateLimitClassifier
from rpc_proxy.routers.health import create_health_router
from rpc_proxy.routers.rpc import create_rpc_router

logger = logging.getLogger(__name__)


def create_app(
    settings: RpcProxySettings | None = None,
    *,
    transport: HttpTransport | None = None,
    pool: EndpointPool | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Loads ``RpcProxySettings`` eagerly when none are given, so a missing or
    empty endpoint list fails at startup rather than on the first request.
    ``transport`` and ``pool`` may be injected (tests, embedding).
    """
    settings = settings or RpcProxySettings()  # type: ignore[call-arg]

    pool = pool or EndpointPool(
        settings.endpoint_list,
        recovery_window_seconds=settings.recovery_window_seconds,
    )
    transport = transport or HttpTransport(
        timeout_seconds=settings.upstream_timeout_seconds
    )
    classifier = RateLimitClassifier(
        status_codes=settings.rate_limit_status_codes,
        markers=settings.rate_limit_markers,
        case_sensitive=settings.rate_limit_case_sensitive,
    )
    forwarder = RequestForwarder(pool, transport, classifier)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: startup and shutdown logic."""
        logger.info(
            "RPC proxy ready with %d endpoints on port %d",
            pool.size,
            settings.port,
        )
        yield

        # --- Shutdown ---
        logger.info("Shutting down RPC proxy")
        await transport.aclose()
        logger.info("RPC proxy shut down")

    app = FastAPI(
        title="RPC Proxy",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pool = pool
    app.state.forwarder = forwarder

    # Register error handlers
    register_error_handlers(app)

    # Middleware (order: request_id → access log → body limit)
    # Note: Starlette middleware is applied in reverse order of add_middleware calls
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    if settings.access_log:
        app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Mount routers
    app.include_router(create_health_router(pool=pool))
    app.include_router(
        create_rpc_router(forwarder=forwarder, max_body_bytes=settings.max_body_bytes)
    )

    return app
