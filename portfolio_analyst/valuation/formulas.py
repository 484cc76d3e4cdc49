"""Closed-form per-share fair value estimators.

Rates are decimal fractions (0.10 for 10%). Each estimator returns ``None``
when its inputs make the model undefined instead of raising, so callers can
drop it from the cross-model average. A discount rate at or below -100% is
undefined for every model.
"""

from __future__ import annotations

import math

GRAHAM_MULTIPLIER = 22.5
DEFAULT_REFERENCE_PE = 20.0
DEFAULT_DCF_YEARS = 5


def calculate_dcf(
    fcf: float,
    growth_rate: float,
    wacc: float,
    terminal_growth: float,
    cash: float,
    debt: float,
    shares: float,
    years: int = DEFAULT_DCF_YEARS,
) -> float | None:
    if shares <= 0 or wacc <= -1 or wacc <= terminal_growth or years < 1:
        return None
    enterprise_value = 0.0
    projected = fcf
    for period in range(1, years + 1):
        projected *= 1 + growth_rate
        enterprise_value += projected / (1 + wacc) ** period
    terminal_value = projected * (1 + terminal_growth) / (wacc - terminal_growth)
    enterprise_value += terminal_value / (1 + wacc) ** years
    return (enterprise_value + cash - debt) / shares


def calculate_graham_number(eps: float, book_value_per_share: float) -> float | None:
    if eps <= 0 or book_value_per_share <= 0:
        return None
    return math.sqrt(GRAHAM_MULTIPLIER * eps * book_value_per_share)


def calculate_ddm(dividend_per_share: float, growth_rate: float, discount_rate: float) -> float | None:
    """Gordon growth on next year's dividend, ``D0 * (1 + g)``."""
    if discount_rate <= -1 or discount_rate <= growth_rate:
        return None
    next_dividend = dividend_per_share * (1 + growth_rate)
    return next_dividend / (discount_rate - growth_rate)


def calculate_pe_valuation(eps: float, reference_pe: float = DEFAULT_REFERENCE_PE) -> float:
    return eps * reference_pe
