"""HTTP utilities and classification of upstream outcomes."""

from __future__ import annotations

import json
import logging
import time
from typing import Any
from urllib.parse import urlencode

import requests
from requests.adapters import HTTPAdapter

from crypto_tracker.errors import APIError, ErrorKind

LOGGER = logging.getLogger(__name__)
RATE_LIMIT_STATUS = 429

_SESSION = requests.Session()
_SESSION.mount("https://", HTTPAdapter(pool_connections=10, pool_maxsize=20))
_SESSION.mount("http://", HTTPAdapter(pool_connections=10, pool_maxsize=20))


def build_url(base_url: str, endpoint: str, params: dict[str, str | int] | None = None) -> str:
    url = f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
    if params:
        url = f"{url}?{urlencode(params, safe=',')}"
    return url


def fetch_json(
    base_url: str,
    endpoint: str,
    params: dict[str, str | int] | None = None,
    timeout_seconds: float = 10.0,
    session: requests.Session | None = None,
    classify_rate_limit: bool = True,
) -> Any:
    """GET ``endpoint`` and decode JSON, raising ``APIError`` on any failure.

    Transport and decode failures carry status 0. A 429 is tagged
    ``RATE_LIMIT_EXCEEDED`` unless ``classify_rate_limit`` is off, in which
    case it is reported like any other non-success status. Nothing is retried.
    """
    url = build_url(base_url, endpoint, params)
    http = session or _SESSION
    started = time.perf_counter()
    try:
        response = http.get(url, timeout=timeout_seconds)
    except requests.RequestException as error:
        LOGGER.warning("upstream request failed: endpoint=%s error=%s", endpoint, type(error).__name__)
        raise APIError(endpoint, 0, error) from error

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    status = response.status_code
    if status == RATE_LIMIT_STATUS and classify_rate_limit:
        LOGGER.warning("upstream rate limit hit: endpoint=%s latency_ms=%s", endpoint, elapsed_ms)
        raise APIError(endpoint, status, ErrorKind.RATE_LIMIT_EXCEEDED)
    if not 200 <= status < 300:
        LOGGER.warning("upstream returned error status: endpoint=%s status=%s latency_ms=%s", endpoint, status, elapsed_ms)
        raise APIError(
            endpoint,
            status,
            requests.HTTPError(f"API returned status {status}", response=response),
        )

    raw = response.text or ""
    parsed: Any = {}
    if raw:
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as error:
            LOGGER.warning("upstream returned non-JSON content: endpoint=%s status=%s", endpoint, status)
            raise APIError(endpoint, 0, error) from error

    LOGGER.info("upstream request complete: endpoint=%s status=%s latency_ms=%s", endpoint, status, elapsed_ms)
    return parsed
