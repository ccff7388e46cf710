"""Weightview server entry point — ``python -m weightview.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from weightview.core.config.settings import get_settings
from weightview.core.server.app import create_app


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def run() -> None:
    """Start the Weightview MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.weightview_log_level.upper(), logging.INFO)
    )

    logger = logging.getLogger(__name__)
    if not settings.weightview_allow_insecure_bind and not _is_loopback_host(
        settings.weightview_host
    ):
        raise RuntimeError(
            "Refusing to bind Weightview to a non-loopback host without an auth layer. "
            "Set WEIGHTVIEW_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    logger.info(
        "Starting Weightview server on %s:%d",
        settings.weightview_host,
        settings.weightview_port,
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.weightview_host,
        port=settings.weightview_port,
    )


if __name__ == "__main__":
    run()
