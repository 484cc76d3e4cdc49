import math

import pytest

from portfolio_analyst.providers.models import FinancialSnapshot
from portfolio_analyst.valuation.formulas import (
    calculate_dcf,
    calculate_ddm,
    calculate_graham_number,
    calculate_pe_valuation,
)
from portfolio_analyst.valuation.models import ValuationAssumptions, ValuationEstimate, ValuationInputs
from portfolio_analyst.valuation.service import assess_valuation, average_fair_value, run_valuation


def test_dcf_matches_manual_projection() -> None:
    value = calculate_dcf(100.0, 0.05, 0.10, 0.025, cash=50.0, debt=20.0, shares=10.0, years=2)
    fcf1, fcf2 = 105.0, 110.25
    terminal = fcf2 * 1.025 / 0.075
    expected = (fcf1 / 1.1 + fcf2 / 1.1**2 + terminal / 1.1**2 + 50.0 - 20.0) / 10.0
    assert value == pytest.approx(expected)


def test_dcf_non_computable_inputs() -> None:
    assert calculate_dcf(100.0, 0.05, 0.025, 0.025, 0.0, 0.0, 10.0) is None
    assert calculate_dcf(100.0, 0.05, 0.10, 0.025, 0.0, 0.0, 0.0) is None


def test_graham_number() -> None:
    assert calculate_graham_number(2.0, 20.0) == pytest.approx(math.sqrt(22.5 * 2.0 * 20.0))
    assert calculate_graham_number(-1.0, 20.0) is None
    assert calculate_graham_number(2.0, 0.0) is None


def test_discount_rate_at_or_below_minus_one_is_not_computable() -> None:
    assert calculate_dcf(100.0, 0.05, -1.0, -2.0, 0.0, 0.0, 10.0) is None
    assert calculate_dcf(100.0, 0.05, -1.5, -2.0, 0.0, 0.0, 10.0) is None
    assert calculate_ddm(2.0, -2.0, -1.0) is None
    summary = run_valuation(
        ValuationInputs(price=50.0, fcf=1000.0, shares=100.0, eps=2.0, book_value_per_share=10.0),
        ValuationAssumptions(wacc=-1.0, terminal_growth=-2.0),
        symbol="XYZ",
    )
    by_name = {estimate.model_name: estimate for estimate in summary.estimates}
    assert by_name["DCF (Discounted Cash Flow)"].fair_value_per_share is None


def test_ddm_and_pe() -> None:
    assert calculate_ddm(2.0, 0.03, 0.08) == pytest.approx(2.0 * 1.03 / 0.05)
    assert calculate_ddm(2.0, 0.08, 0.08) is None
    assert calculate_pe_valuation(3.0) == 60.0
    assert calculate_pe_valuation(3.0, 15.0) == 45.0


def test_average_excludes_non_computable_estimates() -> None:
    estimates = [
        ValuationEstimate("DCF", None),
        ValuationEstimate("Graham", None),
        ValuationEstimate("DDM", 0.0),
        ValuationEstimate("P/E", 60.0),
        ValuationEstimate("Other", 40.0),
    ]
    assert average_fair_value(estimates) == pytest.approx(50.0)
    assert average_fair_value([ValuationEstimate("DCF", None)]) is None


def test_assess_valuation_thresholds() -> None:
    assert assess_valuation(130.0, 100.0) == "Overvalued"
    assert assess_valuation(110.0, 100.0) == "Slightly Overvalued"
    assert assess_valuation(100.0, 100.0) == "Fair Value"
    assert assess_valuation(90.0, 100.0) == "Slightly Undervalued"
    assert assess_valuation(70.0, 100.0) == "Undervalued"
    assert assess_valuation(100.0, None) is None


def test_run_valuation_with_wacc_equal_terminal_growth() -> None:
    inputs = ValuationInputs(price=50.0, fcf=1000.0, shares=100.0, eps=-1.0, book_value_per_share=10.0)
    summary = run_valuation(inputs, ValuationAssumptions(wacc=0.03, terminal_growth=0.03), symbol="XYZ")
    by_name = {estimate.model_name: estimate for estimate in summary.estimates}
    assert by_name["DCF (Discounted Cash Flow)"].fair_value_per_share is None
    assert by_name["Graham Number"].fair_value_per_share is None
    assert by_name["Dividend Discount Model"].fair_value_per_share is None
    assert by_name["P/E Multiple (20x)"].computable is False
    assert summary.average_fair_value is None
    assert summary.assessment is None
    assert summary.upside_percent is None


def test_inputs_from_snapshot() -> None:
    snapshot = FinancialSnapshot(
        symbol="XYZ",
        income={"weightedAverageShsOutDil": 100.0, "eps": 2.0, "reportedCurrency": "EUR"},
        balance={"totalStockholdersEquity": 1000.0, "cashAndCashEquivalents": 50.0, "totalDebt": 20.0},
        cashflow={"freeCashFlow": 300.0},
        ratios={"dividendYield": 0.02},
        currency="EUR",
    )
    inputs = ValuationInputs.from_snapshot(snapshot, price=40.0)
    assert inputs.shares == 100.0
    assert inputs.book_value_per_share == 10.0
    assert inputs.dividend_per_share == pytest.approx(0.8)
    assert inputs.currency == "EUR"
    summary = run_valuation(inputs, symbol="XYZ")
    assert summary.average_fair_value is not None
    assert summary.upside_percent == pytest.approx((summary.average_fair_value - 40.0) / 40.0 * 100.0)


def test_empty_snapshot_yields_zero_inputs() -> None:
    inputs = ValuationInputs.from_snapshot(FinancialSnapshot(symbol="XYZ"), price=0.0)
    assert inputs.shares == 0.0
    assert inputs.book_value_per_share == 0.0
    assert run_valuation(inputs).average_fair_value is None
