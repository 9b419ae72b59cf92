"""Portfolio domain package."""

from crypto_tracker.portfolio.models import Holding, Portfolio
from crypto_tracker.portfolio.portfolio_service import PortfolioService

__all__ = ["Holding", "Portfolio", "PortfolioService"]
