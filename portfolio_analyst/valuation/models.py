"""Typed valuation models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from portfolio_analyst.lib.numeric import as_float
from portfolio_analyst.providers.models import FinancialSnapshot
from portfolio_analyst.valuation.formulas import DEFAULT_DCF_YEARS, DEFAULT_REFERENCE_PE


@dataclass(frozen=True)
class ValuationAssumptions:
    wacc: float = 0.10
    growth_rate: float = 0.05
    terminal_growth: float = 0.025
    reference_pe: float = DEFAULT_REFERENCE_PE
    years: int = DEFAULT_DCF_YEARS

    @property
    def dividend_growth(self) -> float:
        return self.terminal_growth

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ValuationInputs:
    price: float = 0.0
    fcf: float = 0.0
    cash: float = 0.0
    debt: float = 0.0
    shares: float = 0.0
    eps: float = 0.0
    book_value_per_share: float = 0.0
    dividend_per_share: float = 0.0
    currency: str = "USD"

    @classmethod
    def from_snapshot(cls, snapshot: FinancialSnapshot, price: float) -> "ValuationInputs":
        income, balance = snapshot.income, snapshot.balance
        shares = as_float(income.get("weightedAverageShsOutDil")) or as_float(income.get("weightedAverageShsOut"))
        equity = as_float(balance.get("totalStockholdersEquity"))
        dividend_yield = as_float(snapshot.ratios.get("dividendYield"))
        return cls(
            price=price,
            fcf=as_float(snapshot.cashflow.get("freeCashFlow")),
            cash=as_float(balance.get("cashAndCashEquivalents")),
            debt=as_float(balance.get("totalDebt")),
            shares=shares,
            eps=as_float(income.get("eps")),
            book_value_per_share=equity / shares if shares else 0.0,
            dividend_per_share=dividend_yield * price,
            currency=snapshot.currency,
        )


@dataclass
class ValuationEstimate:
    model_name: str
    fair_value_per_share: float | None
    assumptions: dict[str, Any] = field(default_factory=dict)

    @property
    def computable(self) -> bool:
        return self.fair_value_per_share is not None and self.fair_value_per_share > 0


@dataclass
class ValuationSummary:
    symbol: str
    price: float
    currency: str
    estimates: list[ValuationEstimate]
    average_fair_value: float | None
    assessment: str | None
    upside_percent: float | None
