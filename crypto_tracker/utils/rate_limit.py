"""Minimum-interval throttle for outbound upstream requests."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable

LOGGER = logging.getLogger(__name__)


class MinIntervalRateLimiter:
    """Keeps consecutive request starts at least ``min_interval_seconds`` apart.

    Spacing is per limiter instance. The check, the sleep and the timestamp
    update happen under one lock, so concurrent callers are queued instead of
    both seeing an expired interval.
    """

    def __init__(
        self,
        min_interval_seconds: float = 1.5,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval_seconds = max(0.0, min_interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._last_started: float | None = None
        self._lock = Lock()

    @property
    def last_started(self) -> float | None:
        return self._last_started

    def wait_turn(self) -> float:
        """Block until the next request may start; return the seconds slept."""
        if self.min_interval_seconds <= 0:
            return 0.0
        slept = 0.0
        with self._lock:
            now = self._clock()
            if self._last_started is not None:
                delta = now - self._last_started
                if delta < self.min_interval_seconds:
                    slept = self.min_interval_seconds - delta
                    LOGGER.debug("throttling upstream request: sleep_seconds=%.3f", slept)
                    self._sleep(slept)
            self._last_started = self._clock()
        return slept

    def reset(self) -> None:
        with self._lock:
            self._last_started = None
