"""Locale-formatted number parsing for spreadsheet cells."""

from __future__ import annotations

import math
import re

_STRIP_PATTERN = re.compile(r"[€%\s]")
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def try_parse_locale_number(value: object) -> float | None:
    """Parse an Italian-formatted amount such as ``"€ 1.234,56"``.

    Returns ``None`` for anything that is not a string or has no numeric
    prefix once currency, percent and whitespace are stripped. Dots are
    thousands separators and the first comma is the decimal separator.
    """
    if not isinstance(value, str):
        return None
    clean = _STRIP_PATTERN.sub("", value).replace(".", "").replace(",", ".", 1)
    match = _LEADING_FLOAT.match(clean)
    if not match:
        return None
    try:
        number = float(match.group(0))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_locale_number(value: object) -> float:
    """Parse a formatted amount, falling back to 0.0.

    Non-string values (numbers included) also yield 0.0.
    """
    parsed = try_parse_locale_number(value)
    return parsed if parsed is not None else 0.0


def as_float(value: object, default: float = 0.0) -> float:
    """Lenient coercion for structured API fields."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default
