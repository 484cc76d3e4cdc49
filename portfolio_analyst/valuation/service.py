"""Valuation orchestration: four models, their average and a price assessment."""

from __future__ import annotations

import asyncio
import logging

from portfolio_analyst.providers.models import FinancialSnapshot, Quote
from portfolio_analyst.services.base import (
    ServiceContext,
    cached_call,
    fail_soft_async,
    run_sync,
    validate_symbol,
)
from portfolio_analyst.valuation.formulas import (
    calculate_dcf,
    calculate_ddm,
    calculate_graham_number,
    calculate_pe_valuation,
)
from portfolio_analyst.valuation.models import (
    ValuationAssumptions,
    ValuationEstimate,
    ValuationInputs,
    ValuationSummary,
)

LOGGER = logging.getLogger(__name__)


def build_estimates(inputs: ValuationInputs, assumptions: ValuationAssumptions) -> list[ValuationEstimate]:
    return [
        ValuationEstimate(
            model_name="DCF (Discounted Cash Flow)",
            fair_value_per_share=calculate_dcf(
                inputs.fcf,
                assumptions.growth_rate,
                assumptions.wacc,
                assumptions.terminal_growth,
                inputs.cash,
                inputs.debt,
                inputs.shares,
                years=assumptions.years,
            ),
            assumptions={
                "wacc": assumptions.wacc,
                "growth_rate": assumptions.growth_rate,
                "terminal_growth": assumptions.terminal_growth,
                "years": assumptions.years,
            },
        ),
        ValuationEstimate(
            model_name="Graham Number",
            fair_value_per_share=calculate_graham_number(inputs.eps, inputs.book_value_per_share),
        ),
        ValuationEstimate(
            model_name="Dividend Discount Model",
            fair_value_per_share=calculate_ddm(
                inputs.dividend_per_share, assumptions.dividend_growth, assumptions.wacc
            ),
            assumptions={"discount_rate": assumptions.wacc, "growth_rate": assumptions.dividend_growth},
        ),
        ValuationEstimate(
            model_name=f"P/E Multiple ({assumptions.reference_pe:g}x)",
            fair_value_per_share=calculate_pe_valuation(inputs.eps, assumptions.reference_pe),
            assumptions={"reference_pe": assumptions.reference_pe},
        ),
    ]


def average_fair_value(estimates: list[ValuationEstimate]) -> float | None:
    valid = [estimate.fair_value_per_share for estimate in estimates if estimate.computable]
    if not valid:
        return None
    return sum(valid) / len(valid)  # type: ignore[arg-type]


def assess_valuation(price: float, average: float | None) -> str | None:
    if not average or not price:
        return None
    diff = (price - average) / average * 100.0
    if diff > 20:
        return "Overvalued"
    if diff > 5:
        return "Slightly Overvalued"
    if diff < -20:
        return "Undervalued"
    if diff < -5:
        return "Slightly Undervalued"
    return "Fair Value"


def run_valuation(
    inputs: ValuationInputs,
    assumptions: ValuationAssumptions | None = None,
    symbol: str = "",
) -> ValuationSummary:
    assumptions = assumptions or ValuationAssumptions()
    estimates = build_estimates(inputs, assumptions)
    average = average_fair_value(estimates)
    upside = (average - inputs.price) / inputs.price * 100.0 if average and inputs.price else None
    return ValuationSummary(
        symbol=symbol,
        price=inputs.price,
        currency=inputs.currency,
        estimates=estimates,
        average_fair_value=average,
        assessment=assess_valuation(inputs.price, average),
        upside_percent=upside,
    )


class ValuationService:
    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx

    def _quote(self, symbol: str) -> Quote | None:
        fmp = self.ctx.fmp()
        if fmp is None:
            return None
        return cached_call(self.ctx, f"valuation:quote:{symbol}", lambda: fmp.get_quote(symbol))

    def _snapshot(self, symbol: str) -> FinancialSnapshot | None:
        fmp = self.ctx.fmp()
        if fmp is None:
            return None
        return cached_call(self.ctx, f"valuation:snapshot:{symbol}", lambda: fmp.get_financial_snapshot(symbol))

    async def value_company_async(
        self, symbol: str, assumptions: ValuationAssumptions | None = None
    ) -> ValuationSummary:
        symbol = validate_symbol(symbol)
        quote, snapshot = await asyncio.gather(
            fail_soft_async("valuation_quote", symbol, lambda: self._quote(symbol), Quote(symbol=symbol, price=0.0)),
            fail_soft_async(
                "valuation_snapshot", symbol, lambda: self._snapshot(symbol), FinancialSnapshot(symbol=symbol)
            ),
        )
        inputs = ValuationInputs.from_snapshot(snapshot, quote.price)
        summary = run_valuation(inputs, assumptions, symbol=symbol)
        LOGGER.info(
            "valuation complete: symbol=%s models=%s average=%s",
            symbol,
            sum(1 for estimate in summary.estimates if estimate.computable),
            summary.average_fair_value,
        )
        return summary

    def value_company(self, symbol: str, assumptions: ValuationAssumptions | None = None) -> ValuationSummary:
        return run_sync(lambda: self.value_company_async(symbol, assumptions))
