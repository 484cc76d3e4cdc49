"""Portfolio position input validation."""

from __future__ import annotations

import json

from portfolio_analyst.lib.numeric import as_float
from portfolio_analyst.portfolio.models import Position, ValidationIssue
from portfolio_analyst.services.base import validate_symbol

BUY_PRICE_KEYS = ("buy_price", "buyPrice", "cost_basis", "price")


def validate_positions_payload(payload: object) -> tuple[list[Position], list[ValidationIssue]]:
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as error:
            return [], [ValidationIssue(field="positions", code="invalid_json", message=f"Invalid JSON: {error.msg}")]
    if not isinstance(payload, list):
        return [], [
            ValidationIssue(field="positions", code="invalid_type", message="Positions must be a list of objects.")
        ]

    positions: list[Position] = []
    issues: list[ValidationIssue] = []
    for idx, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            issues.append(
                ValidationIssue(field="positions", row=idx, code="invalid_type", message="Position must be an object.")
            )
            continue
        raw_symbol = str(item.get("symbol") or "")
        try:
            symbol = validate_symbol(raw_symbol)
        except ValueError:
            issues.append(
                ValidationIssue(field="symbol", row=idx, code="invalid_symbol", message=f"Invalid ticker: {raw_symbol!r}")
            )
            continue
        quantity = as_float(item.get("quantity"))
        buy_price = as_float(next((item[key] for key in BUY_PRICE_KEYS if key in item), None))
        row_issues = [
            ValidationIssue(field=name, row=idx, code=code, message=f"{label} must not be negative: {value}")
            for name, code, label, value in (
                ("quantity", "invalid_quantity", "Quantity", quantity),
                ("buy_price", "invalid_buy_price", "Buy price", buy_price),
            )
            if value < 0
        ]
        if row_issues:
            issues.extend(row_issues)
            continue
        positions.append(Position(symbol=symbol, quantity=quantity, buy_price=buy_price))
    return positions, issues


def parse_positions(payload: object) -> list[Position]:
    """Validate position structure, coercing numeric fields leniently.

    Raises ``ValueError`` listing every issue found.
    """
    positions, issues = validate_positions_payload(payload)
    if issues:
        details = "; ".join(f"row {issue.row}: {issue.message}" if issue.row else issue.message for issue in issues)
        raise ValueError(f"[INVALID_POSITIONS] {details}")
    if not positions:
        raise ValueError("[INVALID_POSITIONS] At least one position is required.")
    return positions
