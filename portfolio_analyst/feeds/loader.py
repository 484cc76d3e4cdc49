"""Spreadsheet export ingestion."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

SUPPORTED_EXTENSIONS = {".csv", ".tsv", ".txt"}


def _read_frame(file_path: str, header: int | None) -> pd.DataFrame:
    path = Path(file_path).expanduser()
    if not path.exists():
        raise ValueError(f"Sheet file not found: {path}")
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported sheet export: {path.suffix}. Use a CSV export.")
    separator = "\t" if path.suffix.lower() == ".tsv" else ","
    return pd.read_csv(path, sep=separator, header=header, dtype=str, keep_default_na=False)


def load_sheet_rows(file_path: str) -> list[dict[str, object]]:
    """Read a headed export into row dicts, every cell kept as text."""
    frame = _read_frame(file_path, header=0)
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame.to_dict(orient="records")


def load_sheet_values(file_path: str) -> list[list[object]]:
    """Read an export positionally, header line included as the first row."""
    frame = _read_frame(file_path, header=None)
    return frame.values.tolist()
