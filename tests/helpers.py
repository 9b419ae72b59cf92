"""Test doubles and builders shared across the suite."""

from __future__ import annotations

import json
from typing import Any, Sequence

from crypto_tracker.portfolio.models import Holding, Portfolio
from crypto_tracker.providers.base import PriceClient


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload if payload is not None else {})


class FakeSession:
    """Stands in for ``requests.Session``; replays queued responses or errors."""

    def __init__(self, *outcomes: FakeResponse | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.calls.append((url, timeout))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class StaticPriceClient(PriceClient):
    def __init__(self, prices: dict[str, float] | None = None, error: Exception | None = None) -> None:
        self.prices = prices or {}
        self.error = error
        self.requests: list[list[str]] = []

    def fetch_price(self, asset_id: str) -> float:
        if self.error is not None:
            raise self.error
        return self.prices[asset_id]

    def fetch_many_prices(self, asset_ids: Sequence[str]) -> dict[str, float]:
        self.requests.append(list(asset_ids))
        if self.error is not None:
            raise self.error
        return {asset_id: self.prices[asset_id] for asset_id in asset_ids if asset_id in self.prices}

    def list_supported_assets(self) -> dict[str, str]:
        return {"bitcoin": "Bitcoin", "ethereum": "Ethereum"}


def holding(asset_id: str, name: str, quantity: float, buy_price: float) -> Holding:
    return Holding(asset_id=asset_id, name=name, quantity=quantity, buy_price=buy_price)


def make_portfolio(*holdings: Holding) -> Portfolio:
    return Portfolio(user_key="test@example.com", holdings=list(holdings))
