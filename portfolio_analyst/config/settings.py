"""Runtime configuration read from the process environment (and `.env`)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

N = TypeVar("N", int, float)
_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Settings:
    # server
    app_name: str = "portfolio-analyst"
    app_version: str = "1.0.0"
    transport_mode: str = "auto"
    host: str = "0.0.0.0"
    port: int = 8000
    mcp_path: str = "/mcp"
    health_path: str = "/health"
    # market data
    fmp_api_key: str | None = None
    request_timeout_seconds: float = 15.0
    cache_ttl_seconds: int = 60
    # analytics
    base_currency: str = "USD"
    risk_free_rate: float = 0.02
    # observability
    log_level: str = "INFO"
    log_tool_events: bool = True


def _parse(raw: str | None, cast: Callable[[str], N], default: N) -> N:
    if not raw:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        return default


def _as_int(raw: str | None, default: int) -> int:
    return _parse(raw, int, default)


def _as_float(raw: str | None, default: float) -> float:
    return _parse(raw, float, default)


def _as_bool(raw: str | None, default: bool) -> bool:
    if not raw:
        return default
    return raw.strip().lower() in _TRUTHY


def _as_code(raw: str | None, default: str) -> str:
    return (raw or "").strip().upper() or default


def get_settings() -> Settings:
    load_dotenv()
    env = os.environ.get
    return Settings(
        app_name=env("APP_NAME") or Settings.app_name,
        transport_mode=(env("TRANSPORT_MODE") or Settings.transport_mode).strip().lower(),
        host=env("HOST") or Settings.host,
        port=_as_int(env("PORT"), Settings.port),
        mcp_path=env("MCP_PATH") or Settings.mcp_path,
        health_path=env("HEALTH_PATH") or Settings.health_path,
        fmp_api_key=env("FMP_API_KEY") or None,
        request_timeout_seconds=_as_float(env("REQUEST_TIMEOUT_SECONDS"), Settings.request_timeout_seconds),
        cache_ttl_seconds=_as_int(env("CACHE_TTL_SECONDS"), Settings.cache_ttl_seconds),
        base_currency=_as_code(env("BASE_CURRENCY"), Settings.base_currency),
        risk_free_rate=_as_float(env("RISK_FREE_RATE"), Settings.risk_free_rate),
        log_level=_as_code(env("LOG_LEVEL"), Settings.log_level),
        log_tool_events=_as_bool(env("LOG_TOOL_EVENTS"), Settings.log_tool_events),
    )
