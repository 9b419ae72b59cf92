"""Portfolio persistence boundary.

Stores keep at most one entry per asset for a user: upserting an asset that
is already held adds to its quantity, anything else is appended.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from threading import Lock
from typing import Any, Iterable

from crypto_tracker.errors import DatabaseError, ErrorKind
from crypto_tracker.portfolio.models import Holding, Portfolio, utc_now

LOGGER = logging.getLogger(__name__)
COLLECTION = "portfolios"


class PortfolioStore(ABC):
    @abstractmethod
    def get(self, user_key: str) -> Portfolio:
        """Return the user's portfolio, or an empty one if none exists yet."""

    @abstractmethod
    def upsert_holding(self, user_key: str, holding: Holding) -> None:
        """Add ``holding`` to the user's portfolio."""

    def upsert_holdings(self, user_key: str, holdings: Iterable[Holding]) -> int:
        """Apply ``upsert_holding`` item by item; earlier items stay on failure."""
        count = 0
        for holding in holdings:
            self.upsert_holding(user_key, holding)
            count += 1
        return count


def merge_holding(portfolio: Portfolio, holding: Holding) -> None:
    existing = portfolio.find(holding.asset_id)
    if existing is not None:
        existing.quantity += holding.quantity
    else:
        portfolio.holdings.append(copy.copy(holding))
    portfolio.updated_at = utc_now()


class InMemoryPortfolioStore(PortfolioStore):
    """Thread-safe in-process store."""

    def __init__(self) -> None:
        self._data: dict[str, Portfolio] = {}
        self._lock = Lock()
        self._closed = False

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise DatabaseError(operation, COLLECTION, ErrorKind.DATABASE_CONNECTION)

    def get(self, user_key: str) -> Portfolio:
        with self._lock:
            self._ensure_open("find")
            portfolio = self._data.get(user_key)
            if portfolio is None:
                return Portfolio(user_key=user_key)
            return copy.deepcopy(portfolio)

    def upsert_holding(self, user_key: str, holding: Holding) -> None:
        with self._lock:
            self._ensure_open("update")
            portfolio = self._data.setdefault(user_key, Portfolio(user_key=user_key))
            merge_holding(portfolio, holding)

    def close(self) -> None:
        with self._lock:
            self._closed = True


def _holding_to_dict(holding: Holding) -> dict[str, Any]:
    return {
        "coin_id": holding.asset_id,
        "coin_name": holding.name,
        "quantity": holding.quantity,
        "buy_price": holding.buy_price,
        "added_at": holding.added_at.isoformat(),
    }


def _holding_from_dict(raw: dict[str, Any]) -> Holding:
    return Holding(
        asset_id=str(raw["coin_id"]),
        name=str(raw.get("coin_name") or raw["coin_id"]),
        quantity=float(raw["quantity"]),
        buy_price=float(raw["buy_price"]),
        added_at=datetime.fromisoformat(raw["added_at"]) if raw.get("added_at") else utc_now(),
    )


def _portfolio_from_dict(user_key: str, raw: dict[str, Any]) -> Portfolio:
    updated = raw.get("updated_at")
    return Portfolio(
        user_key=user_key,
        holdings=[_holding_from_dict(item) for item in raw.get("holdings") or []],
        updated_at=datetime.fromisoformat(updated) if updated else None,
    )


def _portfolio_to_dict(portfolio: Portfolio) -> dict[str, Any]:
    return {
        "user_email": portfolio.user_key,
        "holdings": [_holding_to_dict(item) for item in portfolio.holdings],
        "updated_at": portfolio.updated_at.isoformat() if portfolio.updated_at else None,
    }


class JsonFilePortfolioStore(PortfolioStore):
    """Keeps every user's portfolio in one JSON document on disk."""

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)
        self._lock = Lock()

    def _read(self, operation: str) -> dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as error:
            LOGGER.error("portfolio store read failed: path=%s error=%s", self.path, error)
            raise DatabaseError(operation, COLLECTION, error, kind=ErrorKind.DATABASE_CONNECTION) from error
        if not isinstance(data, dict):
            raise DatabaseError(
                operation,
                COLLECTION,
                ValueError("store document must be a JSON object"),
                kind=ErrorKind.DATABASE_CONNECTION,
            )
        return data

    def _write(self, operation: str, data: dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".portfolios-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as error:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            LOGGER.error("portfolio store write failed: path=%s error=%s", self.path, error)
            raise DatabaseError(operation, COLLECTION, error, kind=ErrorKind.DATABASE_CONNECTION) from error

    def get(self, user_key: str) -> Portfolio:
        with self._lock:
            raw = self._read("find").get(user_key)
        if not isinstance(raw, dict):
            return Portfolio(user_key=user_key)
        try:
            return _portfolio_from_dict(user_key, raw)
        except (KeyError, TypeError, ValueError) as error:
            raise DatabaseError("find", COLLECTION, error, kind=ErrorKind.DATABASE_CONNECTION) from error

    def upsert_holding(self, user_key: str, holding: Holding) -> None:
        with self._lock:
            data = self._read("update")
            raw = data.get(user_key)
            try:
                portfolio = _portfolio_from_dict(user_key, raw) if isinstance(raw, dict) else Portfolio(user_key)
            except (KeyError, TypeError, ValueError) as error:
                raise DatabaseError("update", COLLECTION, error, kind=ErrorKind.DATABASE_CONNECTION) from error
            merge_holding(portfolio, holding)
            data[user_key] = _portfolio_to_dict(portfolio)
            self._write("update", data)
