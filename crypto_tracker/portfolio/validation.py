"""Holding validation, applied before anything reaches the store."""

from __future__ import annotations

import math

import pandas as pd

from crypto_tracker.errors import ErrorKind, ValidationError
from crypto_tracker.portfolio.data_loader import REQUIRED_COLUMNS
from crypto_tracker.portfolio.models import Holding, ValidationIssue


def _is_positive_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(float(value)) and float(value) > 0


def validate_holding(holding: Holding) -> Holding:
    if not str(holding.asset_id or "").strip():
        raise ValidationError("asset_id", holding.asset_id, ErrorKind.COIN_NOT_FOUND)
    if not _is_positive_number(holding.quantity):
        raise ValidationError("quantity", holding.quantity, ErrorKind.INVALID_QUANTITY)
    if not _is_positive_number(holding.buy_price):
        raise ValidationError("buy_price", holding.buy_price, ErrorKind.INVALID_PRICE)
    return holding


def _missing_columns(frame: pd.DataFrame) -> list[str]:
    return [col for col in REQUIRED_COLUMNS if col not in frame.columns]


def validate_holdings_frame(frame: pd.DataFrame) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    missing = _missing_columns(frame)
    if missing:
        for col in missing:
            issues.append(
                ValidationIssue(
                    field=col,
                    code="missing_column",
                    message=f"Required column is missing: {col}",
                )
            )
        return issues

    if frame.empty:
        issues.append(ValidationIssue(field="Asset_ID", code="empty_file", message="No holdings rows found."))
        return issues

    for idx, row in frame.reset_index(drop=True).iterrows():
        # header is row 1 in the source file
        row_num = int(idx) + 2
        asset_id = row["Asset_ID"]
        if pd.isna(asset_id) or not str(asset_id).strip():
            issues.append(
                ValidationIssue(field="Asset_ID", row=row_num, code="missing_asset_id", message="Asset_ID is required.")
            )

        quantity = pd.to_numeric(row["Quantity"], errors="coerce")
        if pd.isna(quantity) or not _is_positive_number(float(quantity)):
            issues.append(
                ValidationIssue(
                    field="Quantity",
                    row=row_num,
                    code="invalid_quantity",
                    message="Quantity must be a positive number.",
                )
            )

        buy_price = pd.to_numeric(row["Buy_Price"], errors="coerce")
        if pd.isna(buy_price) or not _is_positive_number(float(buy_price)):
            issues.append(
                ValidationIssue(
                    field="Buy_Price",
                    row=row_num,
                    code="invalid_buy_price",
                    message="Buy_Price must be a positive numeric value.",
                )
            )
    return issues
