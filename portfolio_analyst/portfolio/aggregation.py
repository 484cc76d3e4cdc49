"""Category grouping of holdings and sheet rows for allocation charts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, TypeVar

from portfolio_analyst.portfolio.analytics_core import holding_value, resolve_fx_rate
from portfolio_analyst.portfolio.models import Holding

R = TypeVar("R")
DEFAULT_SHEET_LABEL = "Altro"
DEFAULT_HOLDING_LABEL = "Unknown"


@dataclass(frozen=True)
class AggregationBucket:
    category: str
    total_value: float


def _label(raw: object, default_label: str) -> str:
    if isinstance(raw, str) and raw:
        return raw
    return default_label


def aggregate(
    records: Iterable[R],
    key: Callable[[R], object],
    value: Callable[[R], float],
    default_label: str = DEFAULT_SHEET_LABEL,
) -> list[AggregationBucket]:
    """Sum ``value`` per ``key`` category, keeping first-seen category order."""
    totals: dict[str, float] = {}
    for record in records:
        category = _label(key(record), default_label)
        totals[category] = totals.get(category, 0.0) + float(value(record))
    return [AggregationBucket(category=category, total_value=total) for category, total in totals.items()]


def positive_buckets(buckets: Iterable[AggregationBucket]) -> list[AggregationBucket]:
    return [bucket for bucket in buckets if bucket.total_value > 0]


def _by_holding_field(
    holdings: Iterable[Holding],
    rates: Mapping[str, float] | None,
    key: Callable[[Holding], object],
) -> list[AggregationBucket]:
    return aggregate(
        holdings,
        key=key,
        value=lambda holding: holding_value(holding, rates),
        default_label=DEFAULT_HOLDING_LABEL,
    )


def allocation_by_symbol(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> list[AggregationBucket]:
    return _by_holding_field(holdings, rates, lambda h: h.symbol)


def allocation_by_sector(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> list[AggregationBucket]:
    return _by_holding_field(holdings, rates, lambda h: h.sector)


def allocation_by_country(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> list[AggregationBucket]:
    return _by_holding_field(holdings, rates, lambda h: h.country)


def allocation_by_currency(holdings: Iterable[Holding], rates: Mapping[str, float] | None = None) -> list[AggregationBucket]:
    return _by_holding_field(holdings, rates, lambda h: h.currency)


def performance_by_symbol(
    holdings: Iterable[Holding], rates: Mapping[str, float] | None = None
) -> list[dict[str, float | str]]:
    """Invested capital against current value per symbol, in the reporting currency."""
    rows: list[dict[str, float | str]] = []
    for holding in holdings:
        rate = resolve_fx_rate(rates, holding.currency)
        rows.append(
            {
                "symbol": holding.symbol,
                "invested": holding.quantity * holding.cost_basis * rate,
                "value": holding.quantity * holding.resolved_price * rate,
            }
        )
    return rows
