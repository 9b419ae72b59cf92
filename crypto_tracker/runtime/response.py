"""Response shaping and user-facing error classification for MCP tools."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any

from crypto_tracker.errors import ErrorKind, PortfolioError, ValidationError, find_error, has_kind

DISCLAIMER = "Data is for informational purposes only and does not constitute financial advice."
QUOTE_CURRENCY = "USD"


@dataclass
class ClassifiedFailure:
    code: str
    message: str
    retriable: bool = False
    field: str | None = None
    asset_id: str | None = None


def classify_error(error: BaseException) -> ClassifiedFailure:
    """Map any failure onto rate limit, missing price, validation or generic."""
    if has_kind(error, ErrorKind.RATE_LIMIT_EXCEEDED):
        return ClassifiedFailure(
            code="RATE_LIMITED",
            message="Rate limit exceeded. Please wait 5-10 seconds and try again.",
            retriable=True,
        )
    if has_kind(error, ErrorKind.PRICE_NOT_AVAILABLE):
        portfolio_error = find_error(error, PortfolioError)
        asset_id = portfolio_error.asset_id if portfolio_error else None
        message = (
            f"Price data not available for {asset_id}."
            if asset_id
            else "Price data not available for one or more coins."
        )
        return ClassifiedFailure(code="PRICE_UNAVAILABLE", message=message, retriable=True, asset_id=asset_id)
    validation = find_error(error, ValidationError)
    if validation is not None:
        return ClassifiedFailure(
            code="VALIDATION_ERROR",
            message=f"Invalid value for {validation.field}: {validation.describe_cause()}.",
            field=validation.field,
        )
    return ClassifiedFailure(code="UNKNOWN", message=str(error) or type(error).__name__)


def _convert_data(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, list):
        return [_convert_data(item) for item in data]
    if isinstance(data, dict):
        return {key: _convert_data(value) for key, value in data.items()}
    return data


def success_response(data: Any, warning: str | None = None) -> str:
    payload: dict[str, Any] = {
        "data": _convert_data(data),
        "currency": QUOTE_CURRENCY,
        "timestamp": int(time.time()),
        "disclaimer": DISCLAIMER,
    }
    if warning:
        payload["warning"] = warning
    return json.dumps(payload, ensure_ascii=True, default=str)


def error_response(code: str, message: str, **extra: Any) -> str:
    payload: dict[str, Any] = {
        "error": True,
        "code": code,
        "message": message,
        "timestamp": int(time.time()),
    }
    payload.update({key: value for key, value in extra.items() if value is not None})
    return json.dumps(payload, ensure_ascii=True, default=str)


def failure_response(error: BaseException, **extra: Any) -> str:
    failure = classify_error(error)
    return error_response(
        failure.code,
        failure.message,
        retriable=failure.retriable,
        field=failure.field,
        asset_id=failure.asset_id,
        **extra,
    )
