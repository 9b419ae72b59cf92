"""Structured tool-event logging."""

from __future__ import annotations

import json
import logging
import time

LOGGER = logging.getLogger(__name__)


def log_tool_event(
    tool: str,
    user_key: str | None,
    latency_ms: float,
    success: bool,
    error_code: str | None = None,
) -> None:
    payload = {
        "tool": tool,
        "user_key": user_key,
        "latency_ms": round(latency_ms, 3),
        "success": success,
        "timestamp": int(time.time()),
    }
    if error_code:
        payload["error_code"] = error_code
    LOGGER.info(json.dumps(payload, ensure_ascii=True))
