import pytest

from portfolio_analyst.feeds.loader import load_sheet_rows, load_sheet_values
from portfolio_analyst.feeds.schema import (
    ASSETS_FEED,
    BONDS_FEED,
    FUNDS_FEED,
    STOCKS_FEED,
    FieldSpec,
    data_rows,
    feed_allocation,
    feed_totals,
    parse_trend,
    split_total_row,
)


def _stock_rows() -> list[dict[str, object]]:
    return [
        {"Codice": "Codice", "Nome": "Nome", "Settore": "Settore", "Paese": "Paese", "Valore Mercato": "Valore"},
        {"Codice": "AAPL", "Nome": "Apple", "Settore": "Tech", "Paese": "USA", "Valore Mercato": "€ 1.000,00"},
        {"Codice": "MSFT", "Nome": "Microsoft", "Settore": "Tech", "Paese": "USA", "Valore Mercato": "€ 500,50"},
        {"Codice": "ENI", "Nome": "Eni", "Settore": "", "Paese": "Italia", "Valore Mercato": "€ 250,00"},
        {"Codice": "", "Nome": "", "Settore": "", "Paese": "", "Valore Mercato": ""},
        {"Codice": "totale", "Nome": "", "Settore": "", "Paese": "", "Valore Mercato": "€ 1.750,50"},
    ]


def test_field_spec_resolution_order() -> None:
    spec = FieldSpec(("Valore Mercato", "Valore"), position=2, contains="€")
    assert spec.pick({"Valore Mercato": "", "Valore": "10", "x": "€ 3"}) == "10"
    assert spec.pick({"a": "x", "b": "y", "c": "z"}) == "z"
    assert spec.pick({"a": "x", "b": "€ 5"}) == "€ 5"
    assert spec.pick({"a": "x"}) is None


def test_data_rows_drop_header_total_and_blank() -> None:
    rows = data_rows(_stock_rows())
    assert [row["Codice"] for row in rows] == ["AAPL", "MSFT", "ENI"]


def test_split_total_row() -> None:
    total, rows = split_total_row(_stock_rows())
    assert total is not None and total["Valore Mercato"] == "€ 1.750,50"
    assert len(rows) == 5


def test_stock_allocation_by_sector_and_country() -> None:
    sectors = feed_allocation(_stock_rows(), STOCKS_FEED, "sector")
    assert [(b.category, b.total_value) for b in sectors] == [("Tech", pytest.approx(1500.5)), ("Altro", 250.0)]
    countries = feed_allocation(_stock_rows(), STOCKS_FEED, "country")
    assert [b.category for b in countries] == ["USA", "Italia"]


def test_value_falls_back_to_euro_cell() -> None:
    rows = [
        {"ISIN": "IE00", "Settore": "Bond", "Prezzo": "12,00", "Controvalore": "€ 2.000,00"},
        {"ISIN": "LU00", "Settore": "", "Prezzo": "", "Controvalore": "€ 0,00"},
    ]
    buckets = feed_allocation(rows, FUNDS_FEED, "sector")
    assert [(b.category, b.total_value) for b in buckets] == [("Bond", 2000.0)]


def test_bond_allocation_uses_positional_rating() -> None:
    rows = [{"c": "IT01", "n": "BTP", "p": "Italia", "r": "BBB", "v": "€ 100,00"}]
    assert [b.category for b in feed_allocation(rows, BONDS_FEED, "rating")] == ["BBB"]


def test_unknown_category_field_raises() -> None:
    with pytest.raises(ValueError):
        feed_allocation(_stock_rows(), FUNDS_FEED, "country")


def test_feed_totals_prefer_summary_row() -> None:
    rows = [
        {"ASSET": "ETF A", "Qty": "1", "Prezzo": "1", "Valore Finale": "€ 100,00", "x": "", "Profit Loss": "€ 10,00", "PL": "10%"},
        {"ASSET": "TOTALE", "Qty": "", "Prezzo": "", "Valore Finale": "€ 100,00", "x": "", "Profit Loss": "€ 10,00", "PL": "10%"},
    ]
    assert feed_totals(rows, ASSETS_FEED) == {"value": 100.0, "profit_loss": 10.0, "profit_loss_percent": 10.0}
    assert feed_totals(rows[:1], ASSETS_FEED)["value"] == 100.0


def test_parse_trend_skips_header_and_undated_rows() -> None:
    rows = [
        ["Data", "a", "b", "c", "d", "e", "Valore"],
        ["01/01/2024", "", "", "", "", "", "€ 1.000,00"],
        ["", "", "", "", "", "", "€ 5,00"],
        ["02/01/2024", "", "", "", "", "", "n/a"],
        ["03/01/2024"],
    ]
    assert parse_trend(rows) == [("01/01/2024", 1000.0), ("02/01/2024", 0.0), ("03/01/2024", 0.0)]


def test_loader_reads_cells_as_text(tmp_path) -> None:
    path = tmp_path / "stocks.csv"
    path.write_text(
        'Codice,Nome,Settore,Paese,Valore Mercato\nAAPL,Apple,Tech,USA,"€ 1.000,00"\nENI,Eni,,Italia,"€ 250,00"\n',
        encoding="utf-8",
    )
    rows = load_sheet_rows(str(path))
    assert rows[0]["Valore Mercato"] == "€ 1.000,00"
    assert rows[1]["Settore"] == ""
    values = load_sheet_values(str(path))
    assert values[0][0] == "Codice"
    assert len(values) == 3


def test_loader_rejects_missing_and_unsupported_files(tmp_path) -> None:
    with pytest.raises(ValueError):
        load_sheet_rows(str(tmp_path / "missing.csv"))
    xlsx = tmp_path / "book.xlsx"
    xlsx.write_bytes(b"")
    with pytest.raises(ValueError):
        load_sheet_rows(str(xlsx))
