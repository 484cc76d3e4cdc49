"""Dividend income received in a calendar year."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping

from portfolio_analyst.portfolio.analytics_core import resolve_fx_rate
from portfolio_analyst.portfolio.models import Holding
from portfolio_analyst.providers.models import DividendEvent

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class DividendIncome:
    year: int
    total: float = 0.0
    monthly: list[dict[str, float | str]] = field(default_factory=list)


def _event_date(event: DividendEvent) -> date | None:
    raw = event.payment_date or event.date
    if not raw:
        return None
    try:
        return datetime.strptime(raw[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def calculate_dividend_income(
    holdings: Iterable[Holding],
    events_by_symbol: Mapping[str, list[DividendEvent]],
    rates: Mapping[str, float] | None = None,
    year: int | None = None,
) -> DividendIncome:
    """Sum dividends paid in ``year``, by payment date when known."""
    year = year or date.today().year
    monthly = [0.0] * 12
    total = 0.0
    for holding in holdings:
        rate = resolve_fx_rate(rates, holding.currency)
        for event in events_by_symbol.get(holding.symbol, []):
            paid_on = _event_date(event)
            if paid_on is None or paid_on.year != year or event.dividend is None:
                continue
            amount = event.dividend * holding.quantity * rate
            total += amount
            monthly[paid_on.month - 1] += amount
    return DividendIncome(
        year=year,
        total=total,
        monthly=[{"month": name, "value": value} for name, value in zip(MONTH_NAMES, monthly)],
    )
