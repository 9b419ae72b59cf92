"""Price-domain MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from crypto_tracker.tools.common import parse_asset_ids, run_tool

if TYPE_CHECKING:
    from crypto_tracker.tools.registry import ToolServices


def register_market_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Get the current USD price of one asset (e.g. bitcoin).")
    def get_price(asset_id: str) -> str:
        return run_tool(
            "get_price",
            None,
            lambda: {"asset_id": asset_id, "price": services.prices.fetch_price(asset_id)},
        )

    @mcp.tool(description="Get current USD prices for comma-separated asset ids in one request.")
    def get_prices(asset_ids: str) -> str:
        return run_tool("get_prices", None, lambda: services.prices.fetch_many_prices(parse_asset_ids(asset_ids)))

    @mcp.tool(description="List the top assets by market cap supported by the pricing service.")
    def list_supported_assets() -> str:
        return run_tool("list_supported_assets", None, services.prices.list_supported_assets)
