"""Shared tool-layer helpers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from crypto_tracker.errors import TrackerError
from crypto_tracker.runtime.monitoring import log_tool_event
from crypto_tracker.runtime.response import classify_error, failure_response, success_response

LOGGER = logging.getLogger(__name__)


def run_tool(
    tool: str,
    user_key: str | None,
    call: Callable[[], Any],
    failure_extra: Callable[[], dict[str, Any]] | None = None,
) -> str:
    """Run ``call`` and render its result, or its classified failure, as JSON.

    ``failure_extra`` supplies additional fields for the failure payload.
    """
    started = time.perf_counter()
    try:
        data = call()
    except (TrackerError, ValueError, OSError) as error:
        latency_ms = (time.perf_counter() - started) * 1000.0
        log_tool_event(tool, user_key, latency_ms, success=False, error_code=classify_error(error).code)
        extra = failure_extra() if failure_extra is not None else {}
        return failure_response(error, **extra)
    latency_ms = (time.perf_counter() - started) * 1000.0
    log_tool_event(tool, user_key, latency_ms, success=True)
    warning = data.get("warning") if isinstance(data, dict) else None
    return success_response(data, warning=warning)


def parse_asset_ids(raw: str | list[str] | None) -> list[str]:
    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [item.strip() for item in items if item and item.strip()]
