"""Company valuation MCP tools."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_analyst.lib.formatters import format_response, line_money, line_number, line_percent
from portfolio_analyst.runtime.monitoring import tool_event
from portfolio_analyst.tools.common import dump_payload
from portfolio_analyst.valuation.models import ValuationAssumptions, ValuationSummary

if TYPE_CHECKING:
    from portfolio_analyst.tools.registry import ToolServices


def render_valuation(summary: ValuationSummary) -> str:
    lines = [line_money("Price", summary.price, summary.currency)]
    for estimate in summary.estimates:
        value = estimate.fair_value_per_share if estimate.computable else None
        lines.append(line_money(estimate.model_name, value, summary.currency))
    computed = sum(1 for estimate in summary.estimates if estimate.computable)
    lines.append(line_number("Models computed", computed, decimals=0))
    lines.append(line_money("Average fair value", summary.average_fair_value, summary.currency))
    lines.append(line_percent("Upside", summary.upside_percent))
    lines.append(f"Assessment: {summary.assessment or 'n/a'}")
    return format_response(title=f"{summary.symbol} valuation", lines=lines, source="fmp")


def register_valuation_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(
        description=(
            "Estimate fair value per share with DCF, Graham number, dividend discount and P/E models. "
            "Rates are decimals, e.g. wacc=0.10."
        )
    )
    def value_company(
        symbol: str,
        wacc: float = 0.10,
        growth_rate: float = 0.05,
        terminal_growth: float = 0.025,
    ) -> str:
        with tool_event("value_company", symbol=symbol, enabled=services.log_events):
            assumptions = ValuationAssumptions(wacc=wacc, growth_rate=growth_rate, terminal_growth=terminal_growth)
            summary = services.valuation.value_company(symbol, assumptions)
            payload = asdict(summary)
            payload["assumptions"] = assumptions.as_dict()
            payload["report"] = render_valuation(summary)
            return dump_payload(payload)
