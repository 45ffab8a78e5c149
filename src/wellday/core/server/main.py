"""Wellday server entry point: ``python -m wellday.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from wellday.core.config.settings import Settings, get_settings
from wellday.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_bind(settings: Settings) -> None:
    """Refuse a public bind unless it is explicitly allowed."""
    if settings.wellday_allow_insecure_bind or _is_loopback_host(settings.wellday_host):
        return
    raise RuntimeError(
        f"Refusing to bind the Wellday server to non-loopback host {settings.wellday_host!r} "
        "without an auth layer. Set WELLDAY_ALLOW_INSECURE_BIND=true to override (unsafe)."
    )


def run() -> None:
    """Start the Wellday advisor MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.wellday_log_level.upper(), logging.INFO))

    _check_bind(settings)
    logger.info(
        "Starting Wellday advisor server on %s:%d",
        settings.wellday_host,
        settings.wellday_port,
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.wellday_host,
        port=settings.wellday_port,
    )


if __name__ == "__main__":
    run()
