"""Spreadsheet feed schemas.

Sheet exports arrive as rows keyed by whatever header the sheet happens to
carry. Each feed declares its logical fields once; ``FeedSchema.resolve``
maps a raw row to those fields by trying header names, then a column
position, then the first cell carrying a marker such as ``€``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from portfolio_analyst.lib.numeric import parse_locale_number
from portfolio_analyst.portfolio.aggregation import (
    DEFAULT_SHEET_LABEL,
    AggregationBucket,
    aggregate,
    positive_buckets,
)

Row = Mapping[str, object]
TOTAL_MARKER = "TOTALE"
HEADER_MARKER = "Codice"


@dataclass(frozen=True)
class FieldSpec:
    candidates: tuple[str, ...] = ()
    position: int | None = None
    contains: str | None = None

    def pick(self, row: Row) -> object | None:
        for name in self.candidates:
            value = row.get(name)
            if value:
                return value
        if self.position is not None:
            values = list(row.values())
            if 0 <= self.position < len(values) and values[self.position]:
                return values[self.position]
        if self.contains:
            for value in row.values():
                if isinstance(value, str) and self.contains in value:
                    return value
        return None


@dataclass(frozen=True)
class FeedSchema:
    name: str
    fields: dict[str, FieldSpec] = field(default_factory=dict)

    def resolve(self, row: Row) -> dict[str, object | None]:
        return {logical: spec.pick(row) for logical, spec in self.fields.items()}


STOCKS_FEED = FeedSchema(
    name="stocks",
    fields={
        "name": FieldSpec(("Nome", "Titolo", "Name"), position=1),
        "sector": FieldSpec(("Settore", "Sector"), position=2),
        "country": FieldSpec(("Paese", "Country"), position=3),
        "value": FieldSpec(("Valore Mercato", "Valore Finale", "Valore"), contains="€"),
    },
)

FUNDS_FEED = FeedSchema(
    name="funds",
    fields={
        "name": FieldSpec(("Nome", "Name"), position=0),
        "sector": FieldSpec(("Settore", "Sector"), position=1),
        "value": FieldSpec(("Valore Mercato", "Valore ad oggi", "Valore"), contains="€"),
    },
)

BONDS_FEED = FeedSchema(
    name="bonds",
    fields={
        "name": FieldSpec(("Nome", "Name"), position=1),
        "country": FieldSpec(("Titolo", "Country"), position=2),
        "rating": FieldSpec(("Rating",), position=3),
        "value": FieldSpec(("Valore Mercato", "Valore Finale", "Valore"), contains="€"),
    },
)

ASSETS_FEED = FeedSchema(
    name="assets",
    fields={
        "name": FieldSpec(("ASSET", "Asset"), position=0),
        "value": FieldSpec(("Valore Finale", "Valore", "Value"), position=3),
        "profit_loss": FieldSpec(("Profit Loss", "PL Euro"), position=5),
        "profit_loss_percent": FieldSpec(("PL", "PL %"), position=6),
    },
)

FEEDS = {schema.name: schema for schema in (STOCKS_FEED, FUNDS_FEED, BONDS_FEED, ASSETS_FEED)}


def _first_value(row: Row) -> object | None:
    return next(iter(row.values()), None)


def _is_total_row(row: Row) -> bool:
    first = _first_value(row)
    return isinstance(first, str) and first.upper() == TOTAL_MARKER


def split_total_row(rows: Iterable[Row]) -> tuple[Row | None, list[Row]]:
    """Separate the sheet's ``TOTALE`` summary row from the data rows."""
    total: Row | None = None
    data: list[Row] = []
    for row in rows:
        if _is_total_row(row):
            if total is None:
                total = row
            continue
        data.append(row)
    return total, data


def data_rows(rows: Iterable[Row]) -> list[Row]:
    kept: list[Row] = []
    for row in rows:
        first = _first_value(row)
        if not first or first == HEADER_MARKER or _is_total_row(row):
            continue
        kept.append(row)
    return kept


def feed_allocation(rows: Iterable[Row], schema: FeedSchema, category_field: str) -> list[AggregationBucket]:
    if category_field not in schema.fields:
        raise ValueError(f"Feed '{schema.name}' has no field '{category_field}'.")
    resolved = [schema.resolve(row) for row in data_rows(rows)]
    buckets = aggregate(
        resolved,
        key=lambda record: record.get(category_field),
        value=lambda record: parse_locale_number(record.get("value")),
        default_label=DEFAULT_SHEET_LABEL,
    )
    return positive_buckets(buckets)


def feed_totals(rows: Iterable[Row], schema: FeedSchema = ASSETS_FEED) -> dict[str, float]:
    """Headline totals from the summary row, or summed data rows when it is missing."""
    total, data = split_total_row(rows)
    if total is not None:
        resolved = schema.resolve(total)
        return {
            "value": parse_locale_number(resolved.get("value")),
            "profit_loss": parse_locale_number(resolved.get("profit_loss")),
            "profit_loss_percent": parse_locale_number(resolved.get("profit_loss_percent")),
        }
    return {
        "value": sum(parse_locale_number(schema.resolve(row).get("value")) for row in data),
        "profit_loss": 0.0,
        "profit_loss_percent": 0.0,
    }


def parse_trend(
    rows: Sequence[Row | Sequence[object]], date_position: int = 0, value_position: int = 6
) -> list[tuple[str, float]]:
    """Read ``(date, value)`` points, skipping the header row and undated rows."""
    points: list[tuple[str, float]] = []
    for row in rows[1:]:
        values = list(row.values()) if isinstance(row, Mapping) else list(row)
        raw_date = values[date_position] if date_position < len(values) else None
        if not raw_date:
            continue
        raw_value = values[value_position] if value_position < len(values) else None
        points.append((str(raw_date), parse_locale_number(raw_value)))
    return points
