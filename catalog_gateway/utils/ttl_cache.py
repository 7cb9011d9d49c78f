"""In-memory TTL cache used to avoid repeated upstream catalog calls.

Expiry is checked lazily on every read; a background asyncio task also sweeps
expired entries on a fixed period so keys that are never read again (one-off
searches) do not accumulate. There is no size bound.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from catalog_gateway.schemas.product import Product

logger = logging.getLogger(__name__)


CacheValue = Product | tuple[Product, ...]


@dataclass
class CacheItem:
    """Container for cached values with expiration metadata."""

    value: CacheValue
    expires_at: float


class TTLCache:
    """Key-value store with a single TTL applied to every entry.

    Attributes:
        ttl_seconds: Time-to-live applied to all entries.
        check_period_seconds: Interval of the background sweep.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        check_period_seconds: float = 320,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if check_period_seconds <= 0:
            raise ValueError("check_period_seconds must be > 0")

        self.ttl_seconds = ttl_seconds
        self.check_period_seconds = check_period_seconds
        self._clock = clock
        self._store: dict[str, CacheItem] = {}
        self._lock = threading.RLock()
        self._sweeper: asyncio.Task[None] | None = None
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"TTLCache(ttl_seconds={self.ttl_seconds}, size={len(self._store)}, "
            f"hits={self._hits}, misses={self._misses}, evictions={self._evictions})"
        )

    def get(self, key: str) -> CacheValue | None:
        """Retrieve a cached value if it exists and is not expired.

        An empty tuple is a valid cached value and is returned as such.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "not_found"})
                return None

            if item.expires_at <= self._clock():
                self._evict(key)
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "expired"})
                return None

            self._hits += 1
            logger.debug("cache.hit", extra={"cache_key": key})
            return item.value

    def set(self, key: str, value: CacheValue) -> None:
        """Store a value, replacing any previous entry for the key."""

        with self._lock:
            self._store[key] = CacheItem(value=value, expires_at=self._clock() + self.ttl_seconds)
            logger.debug(
                "cache.set",
                extra={"cache_key": key, "size": len(self._store), "ttl_s": self.ttl_seconds},
            )

    def purge_expired(self) -> int:
        """Evict every expired entry.

        Returns:
            Number of entries evicted.
        """

        with self._lock:
            now = self._clock()
            expired = [key for key, item in self._store.items() if item.expires_at <= now]
            for key in expired:
                self._evict(key)

        if expired:
            logger.info("cache.sweep", extra={"evicted": len(expired), "size": len(self._store)})
        return len(expired)

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | float]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "ttl_seconds": self.ttl_seconds,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start(self) -> None:
        """Launch the periodic sweep on the running event loop (idempotent)."""

        if self.sweeping:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop())
        logger.info("cache.sweeper_started", extra={"check_period_s": self.check_period_seconds})

    async def stop(self) -> None:
        """Cancel the periodic sweep and wait for it to finish."""

        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("cache.sweeper_stopped")

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.check_period_seconds)
            self.purge_expired()

    def _evict(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            self._evictions += 1
