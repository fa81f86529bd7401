"""HTTP routers: RPC forwarding and health endpoints."""
