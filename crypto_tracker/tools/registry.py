"""Domain tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from crypto_tracker.portfolio.portfolio_service import PortfolioService
from crypto_tracker.portfolio.store import PortfolioStore
from crypto_tracker.providers.base import PriceClient
from crypto_tracker.tools.market_tools import register_market_tools
from crypto_tracker.tools.portfolio_tools import register_portfolio_tools


@dataclass
class ToolServices:
    prices: PriceClient
    portfolio: PortfolioService


def build_tool_services(price_client: PriceClient, store: PortfolioStore) -> ToolServices:
    return ToolServices(prices=price_client, portfolio=PortfolioService(store, price_client))


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_market_tools(mcp, services)
    register_portfolio_tools(mcp, services)
