"""Historical value series, volatility and Sharpe analytics."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from portfolio_analyst.portfolio.analytics_core import resolve_fx_rate
from portfolio_analyst.portfolio.models import Holding, PricePoint

TRADING_DAYS = 252
RISK_FREE_RATE = 0.02
CHART_RANGES = ("1Y", "2Y", "5Y", "YTD", "ALL")


def _closes_by_date(series: Sequence[PricePoint]) -> pd.Series:
    if not series:
        return pd.Series(dtype=float, index=pd.DatetimeIndex([]))
    dates = [point.date.split("T")[0] if point.date else "" for point in series]
    index = pd.to_datetime(dates, format="%Y-%m-%d", errors="coerce")
    closes = pd.Series([float(point.close) for point in series], index=index, dtype=float)
    closes = closes[closes.index.notna()].dropna()
    # a date reported twice keeps its last observation
    return closes[~closes.index.duplicated(keep="last")]


def build_value_history(
    holdings: Iterable[Holding],
    rates: Mapping[str, float] | None = None,
    start: date | datetime | str | None = None,
) -> pd.Series:
    """Total portfolio value per date with forward-filled closes.

    Dates are the union of every holding's observations. A holding contributes
    nothing until its first observation inside the window, then its last known
    close until a newer one appears.
    """
    holdings = list(holdings)
    if not holdings:
        return pd.Series(dtype=float, name="value")
    columns = {idx: _closes_by_date(holding.historical_series) for idx, holding in enumerate(holdings)}
    frame = pd.DataFrame(columns).sort_index()
    if frame.empty:
        return pd.Series(dtype=float, name="value")
    if start is not None:
        frame = frame[frame.index >= pd.Timestamp(start)]
    frame = frame.ffill().fillna(0.0)
    units = pd.Series(
        {idx: holding.quantity * resolve_fx_rate(rates, holding.currency) for idx, holding in enumerate(holdings)},
        dtype=float,
    )
    return frame.mul(units, axis=1).sum(axis=1).rename("value")


def calculate_daily_returns(values: pd.Series) -> pd.Series:
    if len(values) < 2:
        return pd.Series(dtype=float)
    previous = values.shift(1)
    valid = previous > 0
    return ((values[valid] - previous[valid]) / previous[valid]).astype(float)


def calculate_mean_return(returns: pd.Series) -> float:
    if returns.empty:
        return 0.0
    return float(returns.mean())


def calculate_volatility(returns: pd.Series) -> float:
    if returns.empty:
        return 0.0
    return float(returns.std(ddof=0) * np.sqrt(TRADING_DAYS))


def calculate_sharpe_ratio(returns: pd.Series, risk_free_rate: float = RISK_FREE_RATE) -> float:
    vol = calculate_volatility(returns)
    if vol <= 0:
        return 0.0
    mean_annual = calculate_mean_return(returns) * TRADING_DAYS
    return (mean_annual - risk_free_rate) / vol


def calculate_holding_volatility(closes: Sequence[float]) -> float:
    """Annualized volatility of a single price series, in percent."""
    if len(closes) < 2:
        return 0.0
    returns = calculate_daily_returns(pd.Series(list(closes), dtype=float))
    return calculate_volatility(returns) * 100.0


def range_start(chart_range: str, as_of: date | None = None) -> pd.Timestamp | None:
    normalized = chart_range.strip().upper()
    if normalized not in CHART_RANGES:
        raise ValueError(f"chart_range must be one of {', '.join(CHART_RANGES)}.")
    if normalized == "ALL":
        return None
    today = pd.Timestamp(as_of or date.today()).normalize()
    if normalized == "YTD":
        return pd.Timestamp(year=today.year, month=1, day=1)
    years = int(normalized[0])
    return today - pd.DateOffset(years=years)


def to_value_points(values: pd.Series) -> list[tuple[str, float]]:
    return [(timestamp.strftime("%Y-%m-%d"), float(value)) for timestamp, value in values.items()]
