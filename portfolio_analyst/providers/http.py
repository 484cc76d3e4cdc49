"""HTTP utilities and normalized provider errors."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

import requests
from requests.adapters import HTTPAdapter

from portfolio_analyst.providers.models import ProviderName

ProviderErrorCode = Literal["RATE_LIMIT", "AUTH", "NOT_FOUND", "UPSTREAM", "NETWORK", "BAD_RESPONSE"]

_SESSION = requests.Session()
_ADAPTER = HTTPAdapter(pool_connections=20, pool_maxsize=50)
_SESSION.mount("https://", _ADAPTER)
_SESSION.mount("http://", _ADAPTER)


@dataclass
class ProviderError(Exception):
    provider: ProviderName
    code: ProviderErrorCode
    message: str
    status: int | None = None

    def __str__(self) -> str:
        return self.message


def map_status_to_code(status: int) -> ProviderErrorCode:
    if status in {401, 403}:
        return "AUTH"
    if status == 404:
        return "NOT_FOUND"
    if status == 429:
        return "RATE_LIMIT"
    return "UPSTREAM"


def _decode(response: requests.Response, provider: ProviderName) -> Any:
    raw = response.text or ""
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as error:
        raise ProviderError(provider, "BAD_RESPONSE", "Provider returned non-JSON content.", response.status_code) from error


def fetch_json(
    url: str,
    provider: ProviderName,
    timeout_seconds: float = 15.0,
    headers: dict[str, str] | None = None,
) -> Any:
    """Fetch JSON once, mapping network, status and payload failures to ProviderError."""
    try:
        response = _SESSION.get(url, timeout=timeout_seconds, headers=headers)
    except requests.RequestException as error:
        raise ProviderError(provider, "NETWORK", "Provider request failed due to network error.") from error
    status = response.status_code
    if not response.ok:
        raise ProviderError(provider, map_status_to_code(status), f"Provider request failed with status {status}.", status)
    return _decode(response, provider)
