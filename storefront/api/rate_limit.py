"""Fixed-window, per-client request limiter for the ``/api/`` surface."""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger("storefront.rate_limit")


class RateLimiter:
    """In-process fixed-window counter keyed by client address.

    ``limit <= 0`` disables limiting. State lives in process memory, so each
    worker counts separately. Keys whose window has closed are swept at most
    once per window, which bounds memory to the clients seen in the last two
    windows.
    """

    def __init__(self, limit: int, window_seconds: int, clock: Optional[Callable[[], float]] = None):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._hits: Dict[str, Tuple[float, int]] = {}
        self._last_sweep: Optional[float] = None
        self._lock = threading.Lock()

    def _sweep(self, now: float) -> None:
        if self._last_sweep is not None and now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        stale = [k for k, (started, _) in self._hits.items() if now - started >= self.window_seconds]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("rate_limit_sweep removed=%d remaining=%d", len(stale), len(self._hits))

    def check(self, key: str) -> Tuple[bool, int]:
        """Record a hit for ``key``; return ``(allowed, retry_after_seconds)``."""
        if self.limit <= 0:
            return True, 0
        now = self._clock()
        with self._lock:
            self._sweep(now)
            started, count = self._hits.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            if count >= self.limit:
                retry_after = max(1, int(self.window_seconds - (now - started)))
                logger.info("rate_limit_exceeded key=%s", key)
                return False, retry_after
            self._hits[key] = (started, count + 1)
            return True, 0

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = None
