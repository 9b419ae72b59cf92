"""Portfolio valuation over a price client.

Each computation issues exactly one batched price request. Valuation is
all-or-nothing: a held asset without a quote fails the whole computation.
"""

from __future__ import annotations

import logging
from typing import Sequence

from crypto_tracker.errors import ErrorKind, PortfolioError, TrackerError
from crypto_tracker.portfolio.models import HoldingValuation, Portfolio
from crypto_tracker.providers.base import PriceClient

LOGGER = logging.getLogger(__name__)

TOTAL_VALUE_OP = "calculate total value"
PROFIT_LOSS_OP = "calculate profit/loss"


def _fetch_prices(client: PriceClient, asset_ids: list[str], operation: str) -> dict[str, float]:
    try:
        return client.fetch_many_prices(asset_ids)
    except TrackerError as error:
        raise PortfolioError(operation, None, error) from error


def calculate_total_value(portfolio: Portfolio, client: PriceClient) -> float:
    if portfolio.is_empty:
        return 0.0

    asset_ids = portfolio.asset_ids()
    prices = _fetch_prices(client, asset_ids, TOTAL_VALUE_OP)

    total = 0.0
    for holding in portfolio.holdings:
        price = prices.get(holding.asset_id)
        if price is None:
            raise PortfolioError(TOTAL_VALUE_OP, holding.asset_id, ErrorKind.PRICE_NOT_AVAILABLE)
        total += holding.quantity * price
    LOGGER.debug("total value computed: user=%s assets=%s total=%.2f", portfolio.user_key, len(asset_ids), total)
    return total


def calculate_profit_loss(
    portfolio: Portfolio,
    client: PriceClient,
    asset_ids: Sequence[str] | None = None,
) -> dict[str, float]:
    """Per-asset unrealized profit/loss, ``(price - buy_price) * quantity``.

    ``asset_ids`` restricts the result; ``None`` or an empty selection means
    every held asset. Requested assets that are not held are skipped.
    """
    requested = list(dict.fromkeys(a.strip() for a in asset_ids or [] if a and a.strip()))
    if not requested:
        requested = portfolio.asset_ids()
    if not requested:
        raise PortfolioError(PROFIT_LOSS_OP, None, ErrorKind.EMPTY_PORTFOLIO)

    prices = _fetch_prices(client, requested, PROFIT_LOSS_OP)

    result: dict[str, float] = {}
    for asset_id in requested:
        lots = [holding for holding in portfolio.holdings if holding.asset_id == asset_id]
        if not lots:
            continue
        price = prices.get(asset_id)
        if price is None:
            raise PortfolioError(PROFIT_LOSS_OP, asset_id, ErrorKind.PRICE_NOT_AVAILABLE)
        result[asset_id] = sum((price - lot.buy_price) * lot.quantity for lot in lots)
    LOGGER.debug("profit/loss computed: user=%s requested=%s priced=%s", portfolio.user_key, len(requested), len(result))
    return result


def value_holdings(portfolio: Portfolio, client: PriceClient) -> list[HoldingValuation]:
    """Per-holding view; holdings without a quote keep ``None`` figures."""
    if portfolio.is_empty:
        return []
    prices = _fetch_prices(client, portfolio.asset_ids(), "view")
    rows: list[HoldingValuation] = []
    for holding in portfolio.holdings:
        price = prices.get(holding.asset_id)
        rows.append(
            HoldingValuation(
                asset_id=holding.asset_id,
                name=holding.name,
                quantity=holding.quantity,
                buy_price=holding.buy_price,
                current_price=price,
                market_value=holding.quantity * price if price is not None else None,
                profit_loss=(price - holding.buy_price) * holding.quantity if price is not None else None,
            )
        )
    return rows
