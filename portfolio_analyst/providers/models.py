"""Normalized market-data records handed to the analytics core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from portfolio_analyst.portfolio.models import PricePoint

ProviderName = Literal["fmp"]


@dataclass
class Quote:
    symbol: str
    price: float
    change_percent: float = 0.0
    name: str | None = None
    # trailing twelve months, percent
    dividend_yield: float | None = None
    source: ProviderName = "fmp"


@dataclass
class SymbolDetail:
    symbol: str
    sector: str = "Unknown"
    country: str = "Unknown"
    currency: str = "USD"
    beta: float = 1.0
    ytd_return: float = 0.0
    historical: list[PricePoint] = field(default_factory=list)
    source: ProviderName = "fmp"


@dataclass
class DividendEvent:
    symbol: str
    date: str | None = None
    payment_date: str | None = None
    dividend: float | None = None
    source: ProviderName = "fmp"


@dataclass
class FinancialSnapshot:
    """Latest record of each statement, keyed by the provider's field names."""

    symbol: str
    income: dict[str, Any] = field(default_factory=dict)
    balance: dict[str, Any] = field(default_factory=dict)
    cashflow: dict[str, Any] = field(default_factory=dict)
    ratios: dict[str, Any] = field(default_factory=dict)
    currency: str = "USD"
    source: ProviderName = "fmp"
