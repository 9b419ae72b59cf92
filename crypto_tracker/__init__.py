"""Crypto portfolio tracker: rate-limited price client and portfolio valuation."""
