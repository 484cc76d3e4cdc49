"""Exposure, beta and per-holding return analytics."""

from __future__ import annotations

import math
from typing import Callable, Iterable, Mapping

from portfolio_analyst.portfolio.models import Holding, HoldingReturn, RiskLabel

LOW_RISK_BETA = 0.8
HIGH_RISK_BETA = 1.2


def resolve_fx_rate(rates: Mapping[str, float] | None, currency: str | None) -> float:
    """Rate converting ``currency`` into the reporting currency, 1.0 when unknown."""
    if not rates or not currency:
        return 1.0
    rate = rates.get(currency)
    if not rate or not math.isfinite(rate):
        return 1.0
    return float(rate)


def holding_value(holding: Holding, rates: Mapping[str, float] | None = None) -> float:
    return holding.quantity * holding.resolved_price * resolve_fx_rate(rates, holding.currency)


def calculate_total_value(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> float:
    return float(sum(holding_value(holding, rates) for holding in holdings))


def calculate_weighted_beta(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> float:
    total = 0.0
    weighted = 0.0
    for holding in holdings:
        value = holding_value(holding, rates)
        total += value
        weighted += value * holding.resolved_beta
    return weighted / total if total > 0 else 0.0


def classify_risk(beta: float) -> RiskLabel:
    if beta < LOW_RISK_BETA:
        return "Low"
    if beta > HIGH_RISK_BETA:
        return "High"
    return "Medium"


def calculate_holding_return(holding: Holding) -> HoldingReturn:
    price = holding.resolved_price
    cost = holding.cost_basis
    percent = (price - cost) / cost * 100.0 if cost else None
    return HoldingReturn(
        symbol=holding.symbol,
        absolute=(price - cost) * holding.quantity,
        percent=percent,
        value=holding.quantity * price,
    )


def _value_weighted(
    holdings: Iterable[Holding], rates: Mapping[str, float] | None, metric: Callable[[Holding], float | None]
) -> float:
    total = 0.0
    weighted = 0.0
    for holding in holdings:
        value = holding_value(holding, rates)
        total += value
        weighted += value * (metric(holding) or 0.0)
    return weighted / total if total > 0 else 0.0


def calculate_portfolio_ytd(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> float:
    return _value_weighted(holdings, rates, lambda holding: holding.ytd_return)


def calculate_weighted_dividend_yield(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> float:
    """Trailing dividend yield in percent, weighted by converted value; a missing yield counts as 0."""
    return _value_weighted(holdings, rates, lambda holding: holding.dividend_yield)
