"""Command-line entry point: ``python -m rpc_proxy``."""

from __future__ import annotations

import uvicorn

from rpc_proxy.config.settings import RpcProxySettings
from rpc_proxy.logging_config import configure_logging
from rpc_proxy.main import create_app


def main() -> None:
    settings = RpcProxySettings()  # type: ignore[call-arg]
    configure_logging(settings.log_level, settings.log_format)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
