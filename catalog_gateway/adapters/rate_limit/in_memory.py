"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Each key gets its own window, opened by the key's first request.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from catalog_gateway.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Count requests per key inside a fixed window and block past the ceiling.

    A key's window opens with its first request and lasts ``window_seconds``;
    the first request after that starts a new window with a fresh count.
    Blocked requests do not count, so ``count`` never exceeds ``limit``.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
        max_tracked_keys: int = 10_000,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed units per window.
            window_seconds: Size of the window in seconds.
            clock: Time source function returning UNIX time in seconds.
            max_tracked_keys: Number of tracked keys above which elapsed
                windows are purged, at most once per window, on consume.

        Raises:
            ValueError: If limit, window_seconds or max_tracked_keys are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if max_tracked_keys < 1:
            raise ValueError("max_tracked_keys must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._max_tracked_keys = max_tracked_keys
        self._lock = threading.RLock()
        self._windows: dict[str, RateWindow] = {}
        self._last_purge: float | None = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def _is_elapsed(self, window: RateWindow, now: float) -> bool:
        return now - window.window_start >= self._window_seconds

    def _current_window(self, key: str, now: float) -> RateWindow:
        """Return the active window for key, opening a new one if it elapsed."""
        window = self._windows.get(key)
        if window is None or self._is_elapsed(window, now):
            window = RateWindow(window_start=now, count=0)
            self._windows[key] = window
        return window

    def _purge_due(self) -> bool:
        # A full scan over the active windows runs at most once per window
        last = self._last_purge
        return last is None or self._clock() - last >= self._window_seconds

    def purge_expired(self) -> int:
        """Forget keys whose window has elapsed.

        Returns:
            Number of keys dropped.
        """
        now = self._clock()
        with self._lock:
            self._last_purge = now
            stale = [key for key, window in self._windows.items() if self._is_elapsed(window, now)]
            for key in stale:
                del self._windows[key]

        if stale:
            logger.debug("rate_limit.purged", extra={"purged": len(stale)})
        return len(stale)

    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Consume rate limit budget for the provided key.

        Args:
            key: Unique identifier for rate limiting (e.g., client address).
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty or cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if not key:
            raise ValueError("key must be a non-empty string")

        if self.tracked_keys() > self._max_tracked_keys and self._purge_due():
            self.purge_expired()

        now = self._clock()
        with self._lock:
            window = self._current_window(key, now)
            reset_at = window.window_start + self._window_seconds

            if window.count + cost <= self._limit:
                window.count += cost
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=max(0, self._limit - window.count),
                    reset_at=int(math.ceil(reset_at)),
                    retry_after_seconds=None,
                )

            return RateLimitResult(
                allowed=False,
                limit=self._limit,
                remaining=max(0, self._limit - window.count),
                reset_at=int(math.ceil(reset_at)),
                retry_after_seconds=max(1, int(math.ceil(reset_at - now))),
            )
