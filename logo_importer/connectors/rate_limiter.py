"""
Host-aware request rate limiter shared across worker threads.
"""

from __future__ import annotations

import threading
import time
from urllib.parse import urlparse


class HostRateLimiter:
    """
    Spaces outbound requests to the same host at least `1 / rate` seconds apart.

    Callers reserve the next free slot under the lock and sleep outside it,
    so concurrent workers queue up instead of bursting. With `shared_key`
    every URL draws from one budget regardless of host.
    """

    def __init__(self, *, rate_limit_per_second: float, shared_key: str | None = None) -> None:
        self._min_interval = 1.0 / max(0.1, rate_limit_per_second)
        self._shared_key = shared_key
        self._next_slot_by_host: dict[str, float] = {}
        self._lock = threading.Lock()

    def _key(self, url: str) -> str:
        if self._shared_key:
            return self._shared_key
        parsed = urlparse(url)
        return parsed.netloc.lower() or parsed.path.lower()

    def wait(self, url: str) -> float:
        """
        Block until a request to `url` may be sent; returns the seconds waited.
        """

        key = self._key(url)
        if not key:
            return 0.0

        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot_by_host.get(key, 0.0))
            self._next_slot_by_host[key] = slot + self._min_interval

        wait_seconds = slot - now
        if wait_seconds > 0:
            time.sleep(wait_seconds)
        return max(0.0, wait_seconds)
