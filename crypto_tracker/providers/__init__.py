"""Price client interface and backends."""

from crypto_tracker.providers.base import PriceClient
from crypto_tracker.providers.coingecko import CoinGeckoClient

__all__ = ["PriceClient", "CoinGeckoClient"]
