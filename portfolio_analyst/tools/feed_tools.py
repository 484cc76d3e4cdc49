"""Spreadsheet feed MCP tools."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from portfolio_analyst.feeds.loader import load_sheet_rows, load_sheet_values
from portfolio_analyst.feeds.schema import FEEDS, feed_allocation, feed_totals, parse_trend
from portfolio_analyst.runtime.monitoring import tool_event
from portfolio_analyst.tools.common import dump_payload, ensure_choice

if TYPE_CHECKING:
    from portfolio_analyst.tools.registry import ToolServices


def register_feed_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(
        description=(
            "Allocation totals from a spreadsheet CSV export. feed is one of stocks, funds, bonds, assets; "
            "category is a field of that feed such as sector, country or rating."
        )
    )
    def sheet_allocation(file_path: str, feed: str, category: str) -> str:
        with tool_event("sheet_allocation", enabled=services.log_events):
            schema = FEEDS[ensure_choice(feed, FEEDS, "feed")]
            rows = load_sheet_rows(file_path)
            buckets = feed_allocation(rows, schema, category.strip().lower())
            return dump_payload(
                {
                    "feed": schema.name,
                    "category": category.strip().lower(),
                    "buckets": [asdict(bucket) for bucket in buckets],
                    "total": sum(bucket.total_value for bucket in buckets),
                    "totals": feed_totals(rows, schema),
                }
            )

    @mcp.tool(description="Value trend points (date, value) from a spreadsheet CSV export.")
    def sheet_trend(file_path: str, date_column: int = 0, value_column: int = 6) -> str:
        with tool_event("sheet_trend", enabled=services.log_events):
            points = parse_trend(load_sheet_values(file_path), date_position=date_column, value_position=value_column)
            return dump_payload({"points": [{"date": day, "value": value} for day, value in points]})
