"""Plain-text report helpers shared by the tools."""

from __future__ import annotations

FINANCIAL_DISCLAIMER = "Informational use only. This is not financial advice."
MISSING = "n/a"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CHF": "Fr",
    "CAD": "C$",
    "AUD": "A$",
    "CNY": "¥",
}

_COMPACT_STEPS = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"))


def format_currency(value: float | None, currency: str = "USD") -> str:
    """Compact currency label, e.g. ``$1.50M`` or ``-€12.00K``."""
    if value is None:
        return "N/A"
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    scale, suffix = next(((step, label) for step, label in _COMPACT_STEPS if magnitude >= step), (1.0, ""))
    return f"{sign}{symbol}{magnitude / scale:.2f}{suffix}"


def format_response(
    title: str,
    lines: list[str],
    source: str | None = None,
    warning: str | None = None,
    include_disclaimer: bool = True,
) -> str:
    header = [title]
    header += [f"Source: {source}"] if source else []
    header += [f"Warning: {warning}"] if warning else []
    footer = ["---", FINANCIAL_DISCLAIMER] if include_disclaimer else []
    return "\n".join(header + list(lines) + footer)


def line_money(label: str, value: float | None, currency: str = "USD") -> str:
    return f"{label}: {format_currency(value, currency)}"


def line_number(label: str, value: float | None, decimals: int = 2) -> str:
    shown = MISSING if value is None else f"{value:.{decimals}f}"
    return f"{label}: {shown}"


def line_percent(label: str, value: float | None) -> str:
    shown = MISSING if value is None else f"{value:.2f}%"
    return f"{label}: {shown}"
