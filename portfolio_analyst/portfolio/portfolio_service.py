"""Portfolio analytics orchestration service."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict
from datetime import date
from typing import Any

from portfolio_analyst.portfolio.aggregation import (
    allocation_by_country,
    allocation_by_currency,
    allocation_by_sector,
    allocation_by_symbol,
    performance_by_symbol,
    positive_buckets,
)
from portfolio_analyst.portfolio.analytics import compute_analytics
from portfolio_analyst.portfolio.analytics_risk import RISK_FREE_RATE, range_start
from portfolio_analyst.portfolio.dividends import DividendIncome, calculate_dividend_income
from portfolio_analyst.portfolio.intelligence import build_health_report, generate_summary
from portfolio_analyst.portfolio.models import Holding, Position
from portfolio_analyst.providers.models import DividendEvent, Quote, SymbolDetail
from portfolio_analyst.services.base import ServiceContext, cached_call, fail_soft_async, run_sync

LOGGER = logging.getLogger(__name__)


def build_holding(position: Position, quote: Quote | None, detail: SymbolDetail) -> Holding:
    return Holding(
        symbol=position.symbol,
        quantity=position.quantity,
        cost_basis=position.buy_price,
        current_price=quote.price if quote else None,
        beta=detail.beta,
        historical_series=tuple(detail.historical),
        currency=detail.currency,
        sector=detail.sector,
        country=detail.country,
        ytd_return=detail.ytd_return,
        dividend_yield=quote.dividend_yield if quote else None,
    )


class PortfolioService:
    """Fetches market data for a set of positions and derives analytics.

    Every lookup is independent: quotes, details and FX rates are requested
    concurrently and any failure degrades only the affected holding (price
    falls back to cost basis, beta to 1, FX rate to 1).
    """

    def __init__(self, ctx: ServiceContext, risk_free_rate: float = RISK_FREE_RATE) -> None:
        self.ctx = ctx
        self.risk_free_rate = risk_free_rate

    def _fetch_quote(self, symbol: str) -> Quote | None:
        fmp = self.ctx.fmp()
        if fmp is None:
            return None
        return cached_call(self.ctx, f"portfolio:quote:{symbol}", lambda: fmp.get_quote(symbol))

    def _fetch_detail(self, symbol: str) -> SymbolDetail | None:
        fmp = self.ctx.fmp()
        if fmp is None:
            return None
        return cached_call(self.ctx, f"portfolio:detail:{symbol}", lambda: fmp.get_symbol_detail(symbol))

    def _fetch_fx_rate(self, currency: str) -> float | None:
        if currency == self.ctx.base_currency:
            return 1.0
        fmp = self.ctx.fmp()
        if fmp is None:
            return None
        return cached_call(
            self.ctx,
            f"portfolio:fx:{currency}{self.ctx.base_currency}",
            lambda: fmp.get_fx_rate(currency, self.ctx.base_currency),
        )

    def _fetch_dividends(self, symbol: str) -> list[DividendEvent] | None:
        fmp = self.ctx.fmp()
        if fmp is None:
            return None
        return cached_call(self.ctx, f"portfolio:dividends:{symbol}", lambda: fmp.get_dividends(symbol))

    async def build_holdings_async(self, positions: list[Position]) -> tuple[list[Holding], dict[str, float]]:
        started = time.perf_counter()
        symbols = sorted({position.symbol for position in positions})
        quotes, details = await asyncio.gather(
            asyncio.gather(
                *[fail_soft_async("quote", symbol, lambda s=symbol: self._fetch_quote(s), None) for symbol in symbols]
            ),
            asyncio.gather(
                *[
                    fail_soft_async(
                        "detail", symbol, lambda s=symbol: self._fetch_detail(s), SymbolDetail(symbol=symbol)
                    )
                    for symbol in symbols
                ]
            ),
        )
        quote_map = dict(zip(symbols, quotes))
        detail_map = dict(zip(symbols, details))

        currencies = sorted({detail.currency for detail in details})
        rates = await asyncio.gather(
            *[fail_soft_async("fx", currency, lambda c=currency: self._fetch_fx_rate(c), 1.0) for currency in currencies]
        )
        rate_map = dict(zip(currencies, rates))

        holdings = [build_holding(p, quote_map.get(p.symbol), detail_map[p.symbol]) for p in positions]
        LOGGER.info(
            "market data resolved: symbols=%s priced=%s currencies=%s latency_ms=%s",
            len(symbols),
            sum(1 for quote in quotes if quote is not None),
            len(currencies),
            round((time.perf_counter() - started) * 1000, 2),
        )
        return holdings, rate_map

    async def analyze_async(
        self, positions: list[Position], chart_range: str = "1Y", as_of: date | None = None
    ) -> dict[str, Any]:
        start = range_start(chart_range, as_of)
        holdings, rates = await self.build_holdings_async(positions)
        analytics = compute_analytics(holdings, rates, risk_free_rate=self.risk_free_rate, start=start)
        health = build_health_report(holdings, rates)
        return {
            "ok": True,
            "base_currency": self.ctx.base_currency,
            "chart_range": chart_range.upper(),
            "fx_rates": rates,
            "analytics": asdict(analytics),
            "allocation": {
                "by_symbol": [asdict(b) for b in positive_buckets(allocation_by_symbol(holdings, rates))],
                "by_sector": [asdict(b) for b in positive_buckets(allocation_by_sector(holdings, rates))],
                "by_country": [asdict(b) for b in positive_buckets(allocation_by_country(holdings, rates))],
                "by_currency": [asdict(b) for b in positive_buckets(allocation_by_currency(holdings, rates))],
            },
            "performance": performance_by_symbol(holdings, rates),
            "health": asdict(health),
            "summary": generate_summary(health, analytics.weighted_beta, analytics.sharpe_ratio),
        }

    async def dividends_async(self, positions: list[Position], year: int | None = None) -> DividendIncome:
        holdings, rates = await self.build_holdings_async(positions)
        symbols = sorted({holding.symbol for holding in holdings})
        histories = await asyncio.gather(
            *[fail_soft_async("dividends", s, lambda s=s: self._fetch_dividends(s), []) for s in symbols]
        )
        return calculate_dividend_income(holdings, dict(zip(symbols, histories)), rates, year=year)

    def analyze(self, positions: list[Position], chart_range: str = "1Y") -> dict[str, Any]:
        return run_sync(lambda: self.analyze_async(positions, chart_range))

    def dividends(self, positions: list[Position], year: int | None = None) -> DividendIncome:
        return run_sync(lambda: self.dividends_async(positions, year))
