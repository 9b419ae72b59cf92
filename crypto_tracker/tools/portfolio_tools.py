"""Portfolio-domain MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from crypto_tracker.errors import ErrorKind, ValidationError
from crypto_tracker.portfolio.models import Holding
from crypto_tracker.tools.common import parse_asset_ids, run_tool

if TYPE_CHECKING:
    from crypto_tracker.tools.registry import ToolServices


def _number(item: dict[str, Any], field: str, kind: ErrorKind) -> float:
    value = item.get(field)
    try:
        return float(value)
    except (TypeError, ValueError) as error:
        raise ValidationError(field, value, kind) from error


def _holding_from_item(item: dict[str, Any]) -> Holding:
    asset_id = str(item.get("asset_id") or "").strip()
    return Holding(
        asset_id=asset_id,
        name=str(item.get("name") or asset_id).strip(),
        quantity=_number(item, "quantity", ErrorKind.INVALID_QUANTITY),
        buy_price=_number(item, "buy_price", ErrorKind.INVALID_PRICE),
    )


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Show a user's holdings valued at current prices.")
    def view_portfolio(user_key: str) -> str:
        return run_tool("view_portfolio", user_key, lambda: services.portfolio.overview(user_key))

    @mcp.tool(description="Add a holding; an asset already held has its quantity increased.")
    def add_holding(user_key: str, asset_id: str, name: str, quantity: float, buy_price: float) -> str:
        return run_tool(
            "add_holding",
            user_key,
            lambda: services.portfolio.add_holding(user_key, asset_id, name, quantity, buy_price),
        )

    @mcp.tool(
        description=(
            "Add several holdings (asset_id, name, quantity, buy_price) one at a time; "
            "a rejected item stops the batch and earlier items stay added."
        )
    )
    def add_holdings(user_key: str, holdings: list[dict[str, Any]]) -> str:
        added: list[str] = []

        def _call() -> dict[str, Any]:
            count = services.portfolio.add_holdings(
                user_key,
                (_holding_from_item(item) for item in holdings),
                on_commit=lambda holding: added.append(holding.asset_id),
            )
            return {"ok": True, "holdings_added": count, "asset_ids": added}

        return run_tool(
            "add_holdings",
            user_key,
            _call,
            failure_extra=lambda: {"holdings_added": len(added), "asset_ids": added},
        )

    @mcp.tool(description="Import holdings from a CSV or Excel file (Asset_ID, Name, Quantity, Buy_Price).")
    def import_holdings(user_key: str, file_path: str) -> str:
        return run_tool("import_holdings", user_key, lambda: services.portfolio.import_holdings_file(user_key, file_path))

    @mcp.tool(description="Total USD value of a user's portfolio at current prices.")
    def portfolio_total_value(user_key: str) -> str:
        return run_tool(
            "portfolio_total_value",
            user_key,
            lambda: {"user_key": user_key, "total_value": round(services.portfolio.total_value(user_key), 2)},
        )

    @mcp.tool(description="Unrealized profit/loss per asset; optionally limited to comma-separated asset ids.")
    def portfolio_profit_loss(user_key: str, asset_ids: str = "") -> str:
        return run_tool(
            "portfolio_profit_loss",
            user_key,
            lambda: services.portfolio.profit_loss(user_key, parse_asset_ids(asset_ids)),
        )
