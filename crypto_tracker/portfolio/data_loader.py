"""Holdings file loading helpers."""

from __future__ import annotations

import os

import pandas as pd

from crypto_tracker.portfolio.models import Holding

REQUIRED_COLUMNS = ["Asset_ID", "Quantity", "Buy_Price"]
NAME_COLUMN = "Name"


def load_holdings_file(file_path: str) -> pd.DataFrame:
    absolute_path = file_path if os.path.isabs(file_path) else os.path.abspath(file_path)
    ext = os.path.splitext(absolute_path)[1].lower()
    if ext == ".csv":
        return pd.read_csv(absolute_path)
    if ext in {".xlsx", ".xls"}:
        return pd.read_excel(absolute_path, sheet_name=0)
    raise ValueError("Holdings input must be a CSV or Excel file (.csv, .xlsx or .xls).")


def _to_float(value: object) -> float:
    return float(pd.to_numeric(value, errors="coerce"))


def frame_to_holdings(frame: pd.DataFrame) -> list[Holding]:
    """Turn loaded rows into holdings; values are checked later, at ingestion."""
    holdings: list[Holding] = []
    has_name = NAME_COLUMN in frame.columns
    for _, row in frame.iterrows():
        asset_id = "" if pd.isna(row["Asset_ID"]) else str(row["Asset_ID"]).strip()
        name = row[NAME_COLUMN] if has_name else None
        holdings.append(
            Holding(
                asset_id=asset_id,
                name=asset_id if name is None or pd.isna(name) else str(name).strip(),
                quantity=_to_float(row["Quantity"]),
                buy_price=_to_float(row["Buy_Price"]),
            )
        )
    return holdings
