"""Application entrypoint for the Portfolio Analyst MCP server."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.server.fastmcp import FastMCP
from starlette.responses import JSONResponse, Response

from portfolio_analyst.cache.ttl_cache import TTLCache
from portfolio_analyst.config.settings import Settings, get_settings
from portfolio_analyst.providers.fmp import FmpClient
from portfolio_analyst.services.base import ServiceContext
from portfolio_analyst.tools.registry import build_tool_services, register_all_tools

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("PORT"):
        return "http"
    return "stdio"


def build_server(settings: Settings) -> FastMCP:
    fmp_client = FmpClient(settings.fmp_api_key, settings.request_timeout_seconds) if settings.fmp_api_key else None
    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    service_ctx = ServiceContext(
        providers={"fmp": fmp_client},
        cache=TTLCache(default_ttl_seconds=settings.cache_ttl_seconds),
        cache_ttl_seconds=settings.cache_ttl_seconds,
        base_currency=settings.base_currency,
    )
    services = build_tool_services(
        service_ctx, log_tool_events=settings.log_tool_events, risk_free_rate=settings.risk_free_rate
    )
    register_all_tools(mcp, services)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: object) -> Response:
        tools = await mcp.list_tools()
        return JSONResponse(
            {
                "status": "ok",
                "service": settings.app_name,
                "version": settings.app_version,
                "base_currency": settings.base_currency,
                "market_data": fmp_client is not None,
                "tool_count": len(tools),
            }
        )

    if fmp_client is None:
        LOGGER.warning("no market data provider configured: set FMP_API_KEY; prices fall back to cost basis")
    return mcp


async def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    mcp = build_server(settings)
    resolved_mode = resolve_transport_mode(settings.transport_mode)
    LOGGER.info("starting server: name=%s mode=%s", settings.app_name, resolved_mode)
    if resolved_mode == "stdio":
        await mcp.run_stdio_async()
    else:
        await mcp.run_streamable_http_async()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
