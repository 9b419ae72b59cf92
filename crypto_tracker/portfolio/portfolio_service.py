"""Portfolio use-case orchestration service."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable, Iterable, Sequence

from crypto_tracker.portfolio.data_loader import frame_to_holdings, load_holdings_file
from crypto_tracker.portfolio.models import Holding, Portfolio
from crypto_tracker.portfolio.store import PortfolioStore
from crypto_tracker.portfolio.validation import validate_holding, validate_holdings_frame
from crypto_tracker.portfolio.valuation import calculate_profit_loss, calculate_total_value, value_holdings
from crypto_tracker.providers.base import PriceClient

LOGGER = logging.getLogger(__name__)


def _json_validation_error(errors: list[dict[str, Any]]) -> dict[str, Any]:
    return {"ok": False, "error": {"type": "validation_error", "errors": errors}}


class PortfolioService:
    def __init__(self, store: PortfolioStore, price_client: PriceClient) -> None:
        self.store = store
        self.price_client = price_client

    def get_portfolio(self, user_key: str) -> Portfolio:
        return self.store.get(user_key)

    def add_holding(
        self,
        user_key: str,
        asset_id: str,
        name: str,
        quantity: float,
        buy_price: float,
    ) -> Holding:
        holding = Holding(
            asset_id=asset_id.strip(),
            name=(name or asset_id).strip(),
            quantity=quantity,
            buy_price=buy_price,
        )
        self.add_holdings(user_key, [holding])
        return holding

    def add_holdings(
        self,
        user_key: str,
        holdings: Iterable[Holding],
        on_commit: Callable[[Holding], None] | None = None,
    ) -> int:
        """Validate and commit holdings one at a time.

        A rejected holding stops the batch; the ones before it stay committed.
        ``on_commit`` is called after each holding reaches the store.
        """
        committed = 0
        for holding in holdings:
            validate_holding(holding)
            self.store.upsert_holding(user_key, holding)
            committed += 1
            if on_commit is not None:
                on_commit(holding)
        LOGGER.info("holdings added: user=%s count=%s", user_key, committed)
        return committed

    def import_holdings_file(self, user_key: str, file_path: str) -> dict[str, Any]:
        frame = load_holdings_file(file_path)
        issues = validate_holdings_frame(frame)
        if issues:
            return _json_validation_error([asdict(issue) for issue in issues])
        committed = self.add_holdings(user_key, frame_to_holdings(frame))
        return {"ok": True, "file_path": file_path, "holdings_added": committed}

    def total_value(self, user_key: str) -> float:
        return calculate_total_value(self.store.get(user_key), self.price_client)

    def profit_loss(self, user_key: str, asset_ids: Sequence[str] | None = None) -> dict[str, Any]:
        per_asset = calculate_profit_loss(self.store.get(user_key), self.price_client, asset_ids)
        return {"per_asset": per_asset, "total": sum(per_asset.values())}

    def overview(self, user_key: str) -> dict[str, Any]:
        portfolio = self.store.get(user_key)
        rows = value_holdings(portfolio, self.price_client)
        unpriced = [row.asset_id for row in rows if row.current_price is None]
        payload: dict[str, Any] = {
            "user_key": user_key,
            "updated_at": portfolio.updated_at.isoformat() if portfolio.updated_at else None,
            "holdings": [asdict(row) for row in rows],
            "market_value": sum(row.market_value for row in rows if row.market_value is not None),
        }
        if unpriced:
            payload["warning"] = f"No current price for: {', '.join(unpriced)}"
        return payload
