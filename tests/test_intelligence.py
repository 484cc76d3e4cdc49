import pytest

from portfolio_analyst.portfolio.intelligence import build_health_report, generate_summary
from portfolio_analyst.portfolio.models import Holding, PricePoint


def _series(*closes: float) -> tuple[PricePoint, ...]:
    return tuple(PricePoint(f"2024-01-{idx + 1:02d}", close) for idx, close in enumerate(closes))


def test_health_report_weights_and_concentration() -> None:
    holdings = [
        Holding("AAA", 3, 100, current_price=100, beta=1.5, historical_series=_series(80.0, 90.0, 100.0)),
        Holding("BBB", 1, 100, current_price=100, beta=0.5, historical_series=_series(100.0, 100.0)),
    ]
    report = build_health_report(holdings)
    assert report.total_value == pytest.approx(400.0)
    weights = {item.symbol: item.weight for item in report.holdings}
    assert weights == {"AAA": pytest.approx(0.75), "BBB": pytest.approx(0.25)}
    assert report.concentration_index == pytest.approx(0.75**2 + 0.25**2)
    assert report.diversification_score == pytest.approx((1 - 0.625) * 100)
    assert report.weighted_beta == pytest.approx(0.75 * 1.5 + 0.25 * 0.5)
    assert report.portfolio_return_1y == pytest.approx(0.75 * 25.0)
    types = [rec.type for rec in report.recommendations]
    assert "warning" in types
    assert "info" in types


def test_health_report_loss_alert() -> None:
    report = build_health_report([Holding("DOWN", 10, 100, current_price=70)])
    assert [rec.type for rec in report.recommendations] == ["alert"]
    assert "30.0%" in report.recommendations[0].message


def test_health_report_empty_portfolio() -> None:
    report = build_health_report([])
    assert report.total_value == 0.0
    assert report.recommendations == []
    assert "no market value" in generate_summary(report, 0.0, 0.0)


def test_generate_summary_mentions_tilt() -> None:
    report = build_health_report([Holding("AAA", 1, 100, current_price=100)])
    summary = generate_summary(report, weighted_beta=1.5, sharpe_ratio=0.8)
    assert "growth/aggressive" in summary
    assert "Sharpe 0.80" in summary
