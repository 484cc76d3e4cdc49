"""Portfolio-domain MCP tools."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_analyst.lib.formatters import format_response, line_money
from portfolio_analyst.portfolio.validation import parse_positions
from portfolio_analyst.runtime.monitoring import tool_event
from portfolio_analyst.tools.common import dump_payload

if TYPE_CHECKING:
    from portfolio_analyst.tools.registry import ToolServices


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(
        description=(
            "Analyze a portfolio given as a JSON list of {symbol, quantity, buy_price}. "
            "chart_range is one of 1Y, 2Y, 5Y, YTD, ALL."
        )
    )
    def analyze_portfolio(positions_json: str, chart_range: str = "1Y") -> str:
        with tool_event("analyze_portfolio", enabled=services.log_events):
            positions = parse_positions(positions_json)
            payload = services.portfolio.analyze(positions, chart_range=chart_range)
            return dump_payload(payload)

    @mcp.tool(description="Dividend income received in a calendar year, with a monthly breakdown.")
    def portfolio_dividends(positions_json: str, year: int | None = None) -> str:
        with tool_event("portfolio_dividends", enabled=services.log_events):
            positions = parse_positions(positions_json)
            income = services.portfolio.dividends(positions, year=year)
            currency = services.portfolio.ctx.base_currency
            report = format_response(
                title=f"Dividend income {income.year}",
                lines=[line_money(str(month["month"]), float(month["value"]), currency) for month in income.monthly]
                + [line_money("Total", income.total, currency)],
                source="fmp",
            )
            return dump_payload({**asdict(income), "currency": currency, "report": report})
