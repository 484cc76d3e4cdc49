"""Shared service orchestration helpers."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, TypeVar

from portfolio_analyst.cache.ttl_cache import TTLCache
from portfolio_analyst.providers.fmp import FmpClient
from portfolio_analyst.providers.http import ProviderError

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9.\-^=]{0,14}$")
T = TypeVar("T")
LOGGER = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    providers: dict[str, object]
    cache: TTLCache
    cache_ttl_seconds: int = 60
    base_currency: str = "USD"

    def get_provider(self, name: str) -> object | None:
        return self.providers.get(name)

    def fmp(self) -> FmpClient | None:
        provider = self.get_provider("fmp")
        return provider if isinstance(provider, FmpClient) else None


def validate_symbol(symbol: str) -> str:
    clean = symbol.strip().upper()
    if not clean or not SYMBOL_PATTERN.match(clean):
        raise ValueError("Symbol must be 1-15 chars: A-Z, 0-9, dot, hyphen, caret or equals.")
    return clean


def cached_call(ctx: ServiceContext, cache_key: str, call: Callable[[], T | None]) -> T | None:
    return ctx.cache.get_or_set(cache_key, call, ttl_seconds=ctx.cache_ttl_seconds)  # type: ignore[return-value]


def fail_soft(operation: str, key: str, call: Callable[[], T | None], default: T) -> T:
    """Run a lookup, substituting ``default`` for a missing or failed result."""
    started = time.perf_counter()
    try:
        value = call()
    except ProviderError as error:
        LOGGER.warning(
            "lookup failed, using default: op=%s key=%s code=%s status=%s latency_ms=%s",
            operation,
            key,
            error.code,
            error.status,
            round((time.perf_counter() - started) * 1000, 2),
        )
        return default
    except Exception:
        LOGGER.exception("lookup unexpected failure, using default: op=%s key=%s", operation, key)
        return default
    if value is None:
        LOGGER.info("lookup returned no data, using default: op=%s key=%s", operation, key)
        return default
    return value


async def fail_soft_async(operation: str, key: str, call: Callable[[], T | None], default: T) -> T:
    return await asyncio.to_thread(fail_soft, operation, key, call, default)


def run_sync(factory: Callable[[], Coroutine[Any, Any, T]]) -> T:
    """Run a coroutine from sync code, even when called inside an event loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(factory())
    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(lambda: asyncio.run(factory())).result()
