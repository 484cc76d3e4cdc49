"""Financial Modeling Prep adapter."""

from __future__ import annotations

from datetime import date
from typing import Any
from urllib.parse import quote_plus

from portfolio_analyst.lib.numeric import as_float
from portfolio_analyst.portfolio.models import PricePoint
from portfolio_analyst.providers.http import ProviderError, fetch_json
from portfolio_analyst.providers.models import DividendEvent, FinancialSnapshot, Quote, SymbolDetail

# FMP has served the TTM yield under both spellings
DIVIDEND_YIELD_KEYS = ("dividendYielPercentageTTM", "dividendYieldPercentageTTM")


class FmpClient:
    def __init__(self, api_key: str, timeout_seconds: float = 15.0) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.base = "https://financialmodelingprep.com/api/v3"

    def _get(self, path: str) -> object:
        sep = "&" if "?" in path else "?"
        url = f"{self.base}{path}{sep}apikey={self.api_key}"
        return fetch_json(url, provider="fmp", timeout_seconds=self.timeout_seconds)

    @staticmethod
    def _first(data: object) -> dict[str, Any] | None:
        if not isinstance(data, list) or not data:
            return None
        return data[0] if isinstance(data[0], dict) else None

    @staticmethod
    def _as_str(value: object) -> str | None:
        return value if isinstance(value, str) and value else None

    def get_quote(self, symbol: str) -> Quote | None:
        item = self._first(self._get(f"/quote/{quote_plus(symbol)}"))
        if not item:
            return None
        price = as_float(item.get("price"))
        if price <= 0:
            return None
        try:
            dividend_yield = self.get_dividend_yield(symbol)
        except ProviderError:
            # a quote stays usable without its ratios
            dividend_yield = None
        return Quote(
            symbol=symbol,
            price=price,
            change_percent=as_float(item.get("changesPercentage")),
            name=self._as_str(item.get("name")),
            dividend_yield=dividend_yield,
        )

    def get_dividend_yield(self, symbol: str) -> float | None:
        ratios = self._first(self._get(f"/ratios-ttm/{quote_plus(symbol)}")) or {}
        return next((as_float(ratios[key]) for key in DIVIDEND_YIELD_KEYS if as_float(ratios.get(key))), None)

    def get_profile(self, symbol: str) -> dict[str, Any] | None:
        return self._first(self._get(f"/profile/{quote_plus(symbol)}"))

    def get_historical_closes(self, symbol: str) -> list[PricePoint]:
        data = self._get(f"/historical-price-full/{quote_plus(symbol)}?serietype=line")
        rows = data.get("historical") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            return []
        points: list[PricePoint] = []
        for item in rows:
            if not isinstance(item, dict):
                continue
            day = self._as_str(item.get("date"))
            close = as_float(item.get("close"))
            if day is None or close <= 0:
                continue
            points.append(PricePoint(date=day, close=close))
        # FMP lists newest first
        points.sort(key=lambda point: point.date)
        return points

    def get_symbol_detail(self, symbol: str, today: date | None = None) -> SymbolDetail:
        profile = self.get_profile(symbol) or {}
        history = self.get_historical_closes(symbol)
        year = str((today or date.today()).year)
        start_of_year = next((point for point in history if point.date.startswith(year)), None)
        ytd = 0.0
        if start_of_year is not None and history:
            ytd = (history[-1].close - start_of_year.close) / start_of_year.close * 100.0
        return SymbolDetail(
            symbol=symbol,
            sector=self._as_str(profile.get("sector")) or "Unknown",
            country=self._as_str(profile.get("country")) or "Unknown",
            currency=self._as_str(profile.get("currency")) or "USD",
            beta=as_float(profile.get("beta")) or 1.0,
            ytd_return=ytd,
            historical=history,
        )

    def get_fx_rate(self, currency: str, base: str = "USD") -> float | None:
        """Units of ``base`` per unit of ``currency``."""
        if currency == base:
            return 1.0
        direct = self._first(self._get(f"/quote/{quote_plus(currency + base)}"))
        price = as_float(direct.get("price")) if direct else 0.0
        if price > 0:
            return price
        inverted = self._first(self._get(f"/quote/{quote_plus(base + currency)}"))
        price = as_float(inverted.get("price")) if inverted else 0.0
        return 1.0 / price if price > 0 else None

    def get_dividends(self, symbol: str) -> list[DividendEvent]:
        data = self._get(f"/historical-price-full/stock_dividend/{quote_plus(symbol)}")
        historical = data.get("historical") if isinstance(data, dict) else None
        if not isinstance(historical, list):
            return []
        out: list[DividendEvent] = []
        for item in historical:
            if not isinstance(item, dict):
                continue
            amount = item.get("dividend")
            out.append(
                DividendEvent(
                    symbol=symbol,
                    date=self._as_str(item.get("date")),
                    payment_date=self._as_str(item.get("paymentDate")),
                    dividend=float(amount) if isinstance(amount, (int, float)) else None,
                )
            )
        return out

    def get_financial_snapshot(self, symbol: str) -> FinancialSnapshot:
        encoded = quote_plus(symbol)
        income = self._first(self._get(f"/income-statement/{encoded}?limit=1")) or {}
        return FinancialSnapshot(
            symbol=symbol,
            income=income,
            balance=self._first(self._get(f"/balance-sheet-statement/{encoded}?limit=1")) or {},
            cashflow=self._first(self._get(f"/cash-flow-statement/{encoded}?limit=1")) or {},
            ratios=self._first(self._get(f"/ratios/{encoded}?limit=1")) or {},
            currency=self._as_str(income.get("reportedCurrency")) or "USD",
        )
