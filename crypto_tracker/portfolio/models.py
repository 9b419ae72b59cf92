"""Typed portfolio models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Holding:
    asset_id: str
    name: str
    quantity: float
    buy_price: float
    added_at: datetime = field(default_factory=utc_now)


@dataclass
class Portfolio:
    user_key: str
    holdings: list[Holding] = field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.holdings

    def asset_ids(self) -> list[str]:
        """Distinct held asset ids in first-seen order."""
        return list(dict.fromkeys(holding.asset_id for holding in self.holdings))

    def find(self, asset_id: str) -> Holding | None:
        for holding in self.holdings:
            if holding.asset_id == asset_id:
                return holding
        return None


@dataclass
class HoldingValuation:
    asset_id: str
    name: str
    quantity: float
    buy_price: float
    current_price: float | None = None
    market_value: float | None = None
    profit_loss: float | None = None


@dataclass
class ValidationIssue:
    field: str
    message: str
    row: int | None = None
    code: str = "invalid_value"
