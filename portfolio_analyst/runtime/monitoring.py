"""Structured tool event logging."""

from __future__ import annotations

import json
import sys
import time
from contextlib import contextmanager
from typing import Iterator


def log_tool_event(
    tool: str,
    symbol: str | None,
    latency_ms: float,
    success: bool,
    warning: str | None = None,
) -> None:
    payload = {
        "tool": tool,
        "symbol": symbol,
        "latency_ms": round(latency_ms, 3),
        "success": success,
        "timestamp": int(time.time()),
    }
    if warning:
        payload["warning"] = warning
    print(json.dumps(payload, ensure_ascii=True), file=sys.stderr)


@contextmanager
def tool_event(tool: str, symbol: str | None = None, enabled: bool = True) -> Iterator[None]:
    """Emit one event line for the wrapped tool call, failed calls included."""
    started = time.perf_counter()
    success = False
    try:
        yield
        success = True
    finally:
        if enabled:
            latency_ms = (time.perf_counter() - started) * 1000.0
            warning = "slow_response" if success and latency_ms > 2000 else None
            log_tool_event(tool=tool, symbol=symbol, latency_ms=latency_ms, success=success, warning=warning)
