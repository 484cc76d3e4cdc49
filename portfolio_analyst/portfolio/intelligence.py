"""Portfolio health scoring, recommendations and summary generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal, Mapping

from portfolio_analyst.portfolio.analytics_core import holding_value
from portfolio_analyst.portfolio.analytics_risk import calculate_holding_volatility
from portfolio_analyst.portfolio.models import Holding

RecommendationType = Literal["warning", "risk", "alert", "info"]
HealthLevel = Literal["Low", "Medium", "High"]

CONCENTRATION_LIMIT = 0.4
LOSS_ALERT_PERCENT = -20.0
LOW_DIVERSIFICATION = 40.0


@dataclass
class HoldingHealth:
    symbol: str
    current_value: float
    weight: float
    return_1y: float
    volatility: float
    beta: float
    gain_loss_percent: float


@dataclass
class Recommendation:
    type: RecommendationType
    message: str


@dataclass
class HealthReport:
    total_value: float = 0.0
    portfolio_return_1y: float = 0.0
    concentration_index: float = 0.0
    diversification_score: float = 0.0
    weighted_volatility: float = 0.0
    weighted_beta: float = 0.0
    risk_score: float = 0.0
    risk_level: HealthLevel = "Low"
    holdings: list[HoldingHealth] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)


def _holding_health(holding: Holding, rates: Mapping[str, float] | None) -> HoldingHealth:
    value = holding_value(holding, rates)
    price = holding.resolved_price
    cost = holding.quantity * holding.cost_basis
    native_value = holding.quantity * price
    closes = [point.close for point in holding.historical_series]
    return_1y = 0.0
    if closes and closes[0] > 0:
        return_1y = (price - closes[0]) / closes[0] * 100.0
    return HoldingHealth(
        symbol=holding.symbol,
        current_value=value,
        weight=0.0,
        return_1y=return_1y,
        volatility=calculate_holding_volatility(closes),
        beta=holding.resolved_beta,
        gain_loss_percent=(native_value - cost) / cost * 100.0 if cost > 0 else 0.0,
    )


def _risk_level(risk_score: float) -> HealthLevel:
    if risk_score > 60:
        return "High"
    if risk_score > 30:
        return "Medium"
    return "Low"


def _recommendations(report: HealthReport) -> list[Recommendation]:
    out: list[Recommendation] = []
    multiple = len(report.holdings) > 1
    for item in report.holdings:
        if multiple and item.weight > CONCENTRATION_LIMIT:
            out.append(
                Recommendation(
                    "warning",
                    f"{item.symbol} is {item.weight * 100:.1f}% of the portfolio. Consider diversifying.",
                )
            )
    if report.risk_level == "High":
        out.append(
            Recommendation(
                "risk",
                "The portfolio is highly volatile. Consider balancing it with less volatile assets "
                "(bonds, ETFs, dividend stocks).",
            )
        )
    for item in report.holdings:
        if item.gain_loss_percent < LOSS_ALERT_PERCENT:
            out.append(
                Recommendation(
                    "alert",
                    f"{item.symbol} is down {abs(item.gain_loss_percent):.1f}%. Review whether to keep the position.",
                )
            )
    if multiple and report.diversification_score < LOW_DIVERSIFICATION:
        out.append(Recommendation("info", "Diversification score is low. Add uncorrelated assets."))
    return out


def build_health_report(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> HealthReport:
    items = [_holding_health(holding, rates) for holding in holdings]
    total_value = sum(item.current_value for item in items)
    if total_value == 0:
        return HealthReport()

    report = HealthReport(total_value=total_value, holdings=items)
    hhi = 0.0
    for item in items:
        item.weight = item.current_value / total_value
        report.portfolio_return_1y += item.weight * item.return_1y
        report.weighted_volatility += item.weight * item.volatility
        report.weighted_beta += item.weight * item.beta
        hhi += item.weight**2
    report.concentration_index = hhi
    report.diversification_score = (1.0 - hhi) * 100.0
    report.risk_score = min(100.0, report.weighted_volatility * 2.0)
    report.risk_level = _risk_level(report.risk_score)
    report.recommendations = _recommendations(report)
    return report


def generate_summary(report: HealthReport, weighted_beta: float, sharpe_ratio: float) -> str:
    if report.total_value == 0:
        return "Portfolio has no market value yet; add positions or wait for prices to load."
    tilt = "growth/aggressive" if weighted_beta > 1.2 else "defensive" if weighted_beta < 0.8 else "balanced"
    concentration_note = (
        "Concentration risk detected."
        if any(rec.type == "warning" for rec in report.recommendations)
        else "Exposure appears reasonably distributed."
    )
    return (
        f"Portfolio risk is {report.risk_level.lower()} (score {report.risk_score:.1f}/100) with a {tilt} tilt "
        f"(beta {weighted_beta:.2f}, Sharpe {sharpe_ratio:.2f}). "
        f"Diversification score is {report.diversification_score:.1f}/100. {concentration_note}"
    )
