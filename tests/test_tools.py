import asyncio
import json
from types import SimpleNamespace

import pytest
from mcp.server.fastmcp import FastMCP

from portfolio_analyst.cache.ttl_cache import TTLCache
from portfolio_analyst.portfolio.dividends import DividendIncome
from portfolio_analyst.services.base import ServiceContext
from portfolio_analyst.tools.feed_tools import register_feed_tools
from portfolio_analyst.tools.portfolio_tools import register_portfolio_tools
from portfolio_analyst.tools.registry import build_tool_services, register_all_tools
from portfolio_analyst.tools.valuation_tools import register_valuation_tools
from portfolio_analyst.valuation.models import ValuationEstimate, ValuationSummary


class _MockPortfolioService:
    def __init__(self) -> None:
        self.ctx = SimpleNamespace(base_currency="EUR")
        self.received = None

    def analyze(self, positions, chart_range: str = "1Y"):
        self.received = (positions, chart_range)
        return {"ok": True, "count": len(positions), "chart_range": chart_range}

    def dividends(self, positions, year=None):
        monthly = [{"month": "Jan", "value": 3.0}]
        return DividendIncome(year=year or 2024, total=3.0, monthly=monthly)


class _MockValuationService:
    def value_company(self, symbol: str, assumptions):
        return ValuationSummary(
            symbol=symbol.upper(),
            price=50.0,
            currency="USD",
            estimates=[ValuationEstimate("P/E Multiple (20x)", 60.0), ValuationEstimate("Graham Number", None)],
            average_fair_value=60.0,
            assessment="Slightly Undervalued",
            upside_percent=20.0,
        )


def _call_tool_result_string(mcp: FastMCP, name: str, arguments: dict[str, object]) -> str:
    _, metadata = asyncio.run(mcp.call_tool(name, arguments))
    return str(metadata.get("result") or "")


def _services(**overrides) -> SimpleNamespace:
    values = {"portfolio": _MockPortfolioService(), "valuation": _MockValuationService(), "log_events": False}
    values.update(overrides)
    return SimpleNamespace(**values)


def test_analyze_portfolio_tool_parses_positions() -> None:
    services = _services()
    mcp = FastMCP(name="test-portfolio-tools")
    register_portfolio_tools(mcp, services)
    positions = json.dumps([{"symbol": "aapl", "quantity": 2, "buy_price": 100}])
    payload = json.loads(_call_tool_result_string(mcp, "analyze_portfolio", {"positions_json": positions}))
    assert payload == {"ok": True, "count": 1, "chart_range": "1Y"}
    assert services.portfolio.received[0][0].symbol == "AAPL"


def test_analyze_portfolio_tool_rejects_bad_input() -> None:
    mcp = FastMCP(name="test-portfolio-tools-bad")
    register_portfolio_tools(mcp, _services())
    with pytest.raises(Exception):
        asyncio.run(mcp.call_tool("analyze_portfolio", {"positions_json": "not json"}))


def test_portfolio_dividends_tool_reports_total() -> None:
    mcp = FastMCP(name="test-dividend-tools")
    register_portfolio_tools(mcp, _services())
    positions = json.dumps([{"symbol": "KO", "quantity": 2, "buy_price": 50}])
    payload = json.loads(
        _call_tool_result_string(mcp, "portfolio_dividends", {"positions_json": positions, "year": 2024})
    )
    assert payload["total"] == 3.0
    assert payload["currency"] == "EUR"
    assert "Total: €3.00" in payload["report"]


def test_value_company_tool_renders_report() -> None:
    mcp = FastMCP(name="test-valuation-tools")
    register_valuation_tools(mcp, _services())
    payload = json.loads(_call_tool_result_string(mcp, "value_company", {"symbol": "msft", "wacc": 0.09}))
    assert payload["symbol"] == "MSFT"
    assert payload["assumptions"]["wacc"] == 0.09
    assert "Graham Number: N/A" in payload["report"]
    assert "Assessment: Slightly Undervalued" in payload["report"]


def test_sheet_allocation_tool(tmp_path) -> None:
    path = tmp_path / "bonds.csv"
    path.write_text(
        'Codice,Nome,Titolo,Rating,Valore\nIT1,BTP,Italia,BBB,"€ 1.000,00"\nDE1,Bund,Germania,AAA,"€ 500,00"\n',
        encoding="utf-8",
    )
    mcp = FastMCP(name="test-feed-tools")
    register_feed_tools(mcp, _services())
    payload = json.loads(
        _call_tool_result_string(
            mcp, "sheet_allocation", {"file_path": str(path), "feed": "Bonds", "category": "rating"}
        )
    )
    assert payload["buckets"] == [
        {"category": "BBB", "total_value": 1000.0},
        {"category": "AAA", "total_value": 500.0},
    ]
    assert payload["total"] == 1500.0


def test_sheet_allocation_tool_rejects_unknown_feed(tmp_path) -> None:
    mcp = FastMCP(name="test-feed-tools-bad")
    register_feed_tools(mcp, _services())
    with pytest.raises(Exception):
        asyncio.run(mcp.call_tool("sheet_allocation", {"file_path": str(tmp_path), "feed": "crypto", "category": "x"}))


def test_register_all_tools() -> None:
    ctx = ServiceContext(providers={}, cache=TTLCache())
    services = build_tool_services(ctx, log_tool_events=False)
    mcp = FastMCP(name="test-registry")
    register_all_tools(mcp, services)
    names = {tool.name for tool in asyncio.run(mcp.list_tools())}
    assert {"analyze_portfolio", "portfolio_dividends", "value_company", "sheet_allocation", "sheet_trend"} <= names
