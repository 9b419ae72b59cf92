"""Price client capability interface.

The valuation engine and the service layer depend only on ``PriceClient``;
the CoinGecko client is the reference backend and tests plug in their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class PriceClient(ABC):
    """Spot prices in USD for assets identified by a stable string id."""

    @abstractmethod
    def fetch_price(self, asset_id: str) -> float:
        """Return the current price of one asset."""

    @abstractmethod
    def fetch_many_prices(self, asset_ids: Sequence[str]) -> dict[str, float]:
        """Return prices for the requested ids the upstream actually quoted.

        Ids without a quote are left out of the mapping; deciding whether that
        is fatal belongs to the caller.
        """

    @abstractmethod
    def list_supported_assets(self) -> dict[str, str]:
        """Return a mapping of asset id to display name."""
