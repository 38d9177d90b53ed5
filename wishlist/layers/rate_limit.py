"""
Rate limiting for the resolve endpoint.
Fixed-window request counter per client key, kept in process memory.
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from wishlist.config import config
from wishlist.utils.logger import LayerLogger

MAX_TRACKED_KEYS = 10000


@dataclass
class RateWindow:
    """Request count for one client in the current window."""
    count: int
    reset_at: float


class RateLimiter:
    """
    Fixed-window rate limiter.

    Each key may make max_requests calls per window_seconds; the window
    starts with the key's first request.
    """

    def __init__(
        self,
        max_requests: Optional[int] = None,
        window_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = MAX_TRACKED_KEYS,
    ):
        self.max_requests = max_requests if max_requests is not None else config.RATE_LIMIT_MAX
        self.window_seconds = window_seconds if window_seconds is not None else config.RATE_LIMIT_WINDOW
        self.clock = clock
        self.max_keys = max_keys
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self.logger = LayerLogger("rate_limiter")

    def check(self, key: str) -> bool:
        """Record a request for key; False when the key is over its limit."""
        now = self.clock()
        with self._lock:
            window = self._windows.get(key)

            if window is None or now >= window.reset_at:
                # Re-insert so dict order is window start order
                self._windows.pop(key, None)
                if len(self._windows) >= self.max_keys:
                    self._prune(now)
                    self._evict_oldest()
                self._windows[key] = RateWindow(count=1, reset_at=now + self.window_seconds)
                return True

            if window.count >= self.max_requests:
                self.logger.log_decision(
                    decision="reject_request",
                    reason="rate limit exceeded",
                    client=key,
                    count=window.count,
                )
                return False

            window.count += 1
            return True

    def purge_expired(self) -> int:
        """Drop windows that have already reset; returns how many were dropped."""
        with self._lock:
            return self._prune(self.clock())

    def _prune(self, now: float) -> int:
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def _evict_oldest(self) -> None:
        """Drop the oldest live windows until there is room for one more key."""
        while self._windows and len(self._windows) >= self.max_keys:
            oldest = next(iter(self._windows))
            del self._windows[oldest]
            self.logger.log_decision(
                decision="evict_window",
                reason="tracked key limit reached",
                client=oldest,
            )
