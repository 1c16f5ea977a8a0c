"""In-memory fixed-window rate limiter.

Counters live only in this process and are lost on restart.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from .constants import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS


class InMemoryRateLimiter:
    """Allow at most ``max_requests`` per client address per window."""

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}  # key -> (window start, count)

    def allow(self, client_address: str | None) -> bool:
        key = client_address or "unknown"
        now = self._clock()

        with self._lock:
            self._evict_expired(now)
            start, count = self._windows.get(key, (now, 0))
            if count >= self.max_requests:
                return False
            self._windows[key] = (start, count + 1)
            return True

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for k in expired:
            del self._windows[k]
