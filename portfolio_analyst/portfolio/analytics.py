"""Single entry point over the core and risk analytics."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Mapping

from portfolio_analyst.portfolio.analytics_core import (
    calculate_holding_return,
    calculate_portfolio_ytd,
    calculate_weighted_dividend_yield,
    calculate_total_value,
    calculate_weighted_beta,
    classify_risk,
)
from portfolio_analyst.portfolio.analytics_risk import (
    RISK_FREE_RATE,
    TRADING_DAYS,
    build_value_history,
    calculate_daily_returns,
    calculate_mean_return,
    calculate_sharpe_ratio,
    calculate_volatility,
    to_value_points,
)
from portfolio_analyst.portfolio.models import AnalyticsResult, Holding, ValuePoint


def compute_analytics(
    holdings: Iterable[Holding],
    rates: Mapping[str, float] | None = None,
    risk_free_rate: float = RISK_FREE_RATE,
    start: date | datetime | str | None = None,
) -> AnalyticsResult:
    """Derive every portfolio statistic from an immutable set of holdings.

    Missing prices, betas, FX rates or history never raise: each gap falls
    back to its default and the affected figure degrades towards zero.
    """
    holdings = list(holdings)
    weighted_beta = calculate_weighted_beta(holdings, rates)
    history = build_value_history(holdings, rates, start=start)
    returns = calculate_daily_returns(history)
    mean_daily = calculate_mean_return(returns)
    return AnalyticsResult(
        total_value=calculate_total_value(holdings, rates),
        weighted_beta=weighted_beta,
        risk_label=classify_risk(weighted_beta),
        annualized_std_dev=calculate_volatility(returns),
        mean_daily_return=mean_daily,
        annualized_return=mean_daily * TRADING_DAYS,
        sharpe_ratio=calculate_sharpe_ratio(returns, risk_free_rate),
        portfolio_ytd=calculate_portfolio_ytd(holdings, rates),
        dividend_yield=calculate_weighted_dividend_yield(holdings, rates),
        per_holding_return=[calculate_holding_return(holding) for holding in holdings],
        historical_values=[ValuePoint(date=day, value=value) for day, value in to_value_points(history)],
    )
