"""Application entrypoint for the crypto portfolio tracker MCP server."""

from __future__ import annotations

import asyncio
import logging
import sys

from mcp.server.fastmcp import FastMCP

from crypto_tracker.config.settings import Settings, get_settings
from crypto_tracker.portfolio.store import InMemoryPortfolioStore, JsonFilePortfolioStore, PortfolioStore
from crypto_tracker.providers.coingecko import CoinGeckoClient
from crypto_tracker.tools.registry import build_tool_services, register_all_tools

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if configured_mode in {"stdio", "sse", "streamable"}:
        return configured_mode
    return "stdio"


def configure_logging(level: str) -> None:
    # stdout carries the stdio protocol
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_store(settings: Settings) -> PortfolioStore:
    if settings.portfolio_store_path:
        return JsonFilePortfolioStore(settings.portfolio_store_path)
    return InMemoryPortfolioStore()


def build_server(settings: Settings) -> FastMCP:
    price_client = CoinGeckoClient(
        settings.pricing_base_url,
        timeout_seconds=settings.request_timeout_seconds,
        min_interval_seconds=settings.price_min_interval_seconds,
        throttle_listing=settings.throttle_listing,
    )
    mcp = FastMCP(name=settings.app_name)
    register_all_tools(mcp, build_tool_services(price_client, build_store(settings)))
    return mcp


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    mcp = build_server(settings)
    mode = resolve_transport_mode(settings.transport_mode)
    LOGGER.info(
        "starting server: name=%s mode=%s min_interval_seconds=%s",
        settings.app_name,
        mode,
        settings.price_min_interval_seconds,
    )
    if mode == "stdio":
        await mcp.run_stdio_async()
    elif mode == "streamable":
        await mcp.run_streamable_http_async()
    else:
        await mcp.run_sse_async()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
