"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the tracker server."""

    pricing_base_url: str
    app_name: str = "crypto-portfolio-tracker"
    app_version: str = "1.0.0"
    transport_mode: str = "stdio"
    request_timeout_seconds: float = 10.0
    price_min_interval_seconds: float = 1.5
    throttle_listing: bool = False
    portfolio_store_path: str | None = None
    log_level: str = "INFO"


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()

    base_url = (os.getenv("PRICING_BASE_URL") or os.getenv("URL") or "").strip()
    if not base_url:
        raise ConfigurationError("PRICING_BASE_URL not set in environment")

    return Settings(
        pricing_base_url=base_url.rstrip("/"),
        transport_mode=os.getenv("TRANSPORT_MODE", "stdio").strip().lower(),
        request_timeout_seconds=_as_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), 10.0),
        price_min_interval_seconds=_as_float(os.getenv("PRICE_MIN_INTERVAL_SECONDS"), 1.5),
        throttle_listing=_as_bool(os.getenv("THROTTLE_LISTING"), False),
        portfolio_store_path=os.getenv("PORTFOLIO_STORE_PATH") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )
