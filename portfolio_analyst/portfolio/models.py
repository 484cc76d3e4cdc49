"""Typed portfolio models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal

RiskLabel = Literal["Low", "Medium", "High"]
DEFAULT_BETA = 1.0


@dataclass(frozen=True)
class PricePoint:
    date: str
    close: float


@dataclass(frozen=True)
class Position:
    """A position as entered by the user, before market data is attached."""

    symbol: str
    quantity: float
    buy_price: float


@dataclass(frozen=True)
class Holding:
    """One position with whatever market data could be fetched for it.

    ``current_price`` and ``beta`` stay ``None`` when unknown; the resolved
    properties supply the defaults used by every calculation.
    """

    symbol: str
    quantity: float
    cost_basis: float
    current_price: float | None = None
    beta: float | None = None
    historical_series: tuple[PricePoint, ...] = ()
    currency: str = "USD"
    sector: str | None = None
    country: str | None = None
    ytd_return: float = 0.0
    dividend_yield: float | None = None

    @property
    def resolved_price(self) -> float:
        price = self.current_price
        if price and math.isfinite(price):
            return float(price)
        return float(self.cost_basis or 0.0)

    @property
    def resolved_beta(self) -> float:
        beta = self.beta
        if beta and math.isfinite(beta):
            return float(beta)
        return DEFAULT_BETA


@dataclass(frozen=True)
class HoldingReturn:
    symbol: str
    absolute: float
    percent: float | None
    value: float


@dataclass(frozen=True)
class ValuePoint:
    date: str
    value: float


@dataclass
class AnalyticsResult:
    total_value: float = 0.0
    weighted_beta: float = 0.0
    risk_label: RiskLabel = "Low"
    annualized_std_dev: float = 0.0
    mean_daily_return: float = 0.0
    annualized_return: float = 0.0
    sharpe_ratio: float = 0.0
    portfolio_ytd: float = 0.0
    dividend_yield: float = 0.0
    per_holding_return: list[HoldingReturn] = field(default_factory=list)
    historical_values: list[ValuePoint] = field(default_factory=list)


@dataclass
class ValidationIssue:
    field: str
    message: str
    row: int | None = None
    code: str = "invalid_value"
