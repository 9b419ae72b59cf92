"""CoinGecko adapter."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from crypto_tracker.errors import APIError, ErrorKind, ValidationError
from crypto_tracker.providers.base import PriceClient
from crypto_tracker.providers.http import fetch_json
from crypto_tracker.utils.rate_limit import MinIntervalRateLimiter

LOGGER = logging.getLogger(__name__)

PRICE_ENDPOINT = "simple/price"
MARKETS_ENDPOINT = "coins/markets"
QUOTE_CURRENCY = "usd"
MARKETS_PAGE_SIZE = 100


def _to_price(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    price = float(value)
    return price if price > 0 else None


def _unique(asset_ids: Sequence[str]) -> list[str]:
    seen: dict[str, None] = {}
    for asset_id in asset_ids:
        clean = str(asset_id).strip()
        if clean:
            seen.setdefault(clean, None)
    return list(seen)


class CoinGeckoClient(PriceClient):
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        min_interval_seconds: float = 1.5,
        throttle_listing: bool = False,
        session: requests.Session | None = None,
        rate_limiter: MinIntervalRateLimiter | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.throttle_listing = throttle_listing
        self.session = session
        self.rate_limiter = rate_limiter or MinIntervalRateLimiter(min_interval_seconds)

    def _quotes(self, asset_ids: list[str]) -> dict[str, Any]:
        self.rate_limiter.wait_turn()
        data = fetch_json(
            self.base_url,
            PRICE_ENDPOINT,
            {"ids": ",".join(asset_ids), "vs_currencies": QUOTE_CURRENCY},
            timeout_seconds=self.timeout_seconds,
            session=self.session,
        )
        return data if isinstance(data, dict) else {}

    def fetch_price(self, asset_id: str) -> float:
        asset_id = str(asset_id).strip()
        if not asset_id:
            raise ValidationError("asset_id", asset_id, ErrorKind.COIN_NOT_FOUND)
        data = self._quotes([asset_id])
        entry = data.get(asset_id)
        price = _to_price(entry.get(QUOTE_CURRENCY)) if isinstance(entry, dict) else None
        if price is None:
            raise APIError(PRICE_ENDPOINT, 0, ErrorKind.PRICE_NOT_AVAILABLE)
        return price

    def fetch_many_prices(self, asset_ids: Sequence[str]) -> dict[str, float]:
        requested = _unique(asset_ids)
        if not requested:
            raise ValidationError("asset_ids", list(asset_ids), ErrorKind.EMPTY_HOLDINGS)
        data = self._quotes(requested)
        prices: dict[str, float] = {}
        for asset_id in requested:
            entry = data.get(asset_id)
            price = _to_price(entry.get(QUOTE_CURRENCY)) if isinstance(entry, dict) else None
            if price is not None:
                prices[asset_id] = price
        missing = len(requested) - len(prices)
        if missing:
            LOGGER.info("quotes missing from upstream response: requested=%s missing=%s", len(requested), missing)
        return prices

    def list_supported_assets(self) -> dict[str, str]:
        if self.throttle_listing:
            self.rate_limiter.wait_turn()
        data = fetch_json(
            self.base_url,
            MARKETS_ENDPOINT,
            {
                "vs_currency": QUOTE_CURRENCY,
                "order": "market_cap_desc",
                "per_page": MARKETS_PAGE_SIZE,
                "page": 1,
            },
            timeout_seconds=self.timeout_seconds,
            session=self.session,
            classify_rate_limit=False,
        )
        if not isinstance(data, list):
            return {}
        assets: dict[str, str] = {}
        for item in data:
            if not isinstance(item, dict):
                continue
            asset_id = str(item.get("id") or "").strip()
            if not asset_id:
                continue
            assets[asset_id] = str(item.get("name") or asset_id)
        return assets
