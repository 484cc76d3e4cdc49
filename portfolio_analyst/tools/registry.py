"""Domain tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from portfolio_analyst.portfolio.analytics_risk import RISK_FREE_RATE
from portfolio_analyst.portfolio.portfolio_service import PortfolioService
from portfolio_analyst.services.base import ServiceContext
from portfolio_analyst.tools.feed_tools import register_feed_tools
from portfolio_analyst.tools.portfolio_tools import register_portfolio_tools
from portfolio_analyst.tools.valuation_tools import register_valuation_tools
from portfolio_analyst.valuation.service import ValuationService


@dataclass
class ToolServices:
    portfolio: PortfolioService
    valuation: ValuationService
    log_events: bool = True


def build_tool_services(
    ctx: ServiceContext, log_tool_events: bool = True, risk_free_rate: float = RISK_FREE_RATE
) -> ToolServices:
    return ToolServices(
        portfolio=PortfolioService(ctx, risk_free_rate=risk_free_rate),
        valuation=ValuationService(ctx),
        log_events=log_tool_events,
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_portfolio_tools(mcp, services)
    register_valuation_tools(mcp, services)
    register_feed_tools(mcp, services)
