"""Portfolio analysis domain package."""

from portfolio_analyst.portfolio.models import AnalyticsResult, Holding, Position

__all__ = ["AnalyticsResult", "Holding", "Position"]
