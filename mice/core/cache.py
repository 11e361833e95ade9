"""
In-memory cache with per-entry TTL (Time To Live).

This module holds the dynamic QR tokens: each token maps to the conference
session it was issued for and disappears a fixed time after insertion.

Design decisions:
- In-memory OrderedDict storage (tokens are short-lived and re-issuable, so
  losing them on restart is acceptable)
- Every entry carries its own expiry instant, computed at insertion
- Reentrant threading lock (RLock) so the cache is safe from sync dependencies
  running in the threadpool and from async handlers alike
- Lazy expiry on access plus an explicit purge_expired() sweep
- Size limit: expired entries are dropped first, then the oldest insertions.
  Evicting a live token invalidates a code still on screen, so each such
  eviction is logged as a warning and counted; max_size should sit well
  above the number of sessions displaying codes at once
- Injectable clock so tests can move time without sleeping
"""

import time
import threading
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple
from collections import OrderedDict

from mice.core.logging_config import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]

HIT = "hit"
MISSING = "missing"
EXPIRED = "expired"


class Lookup(NamedTuple):
    value: Optional[Any]
    status: str


class TTLCache:
    """
    Time-To-Live cache with thread-safe synchronous operations.

    Storage format: OrderedDict[key: (value, expires_at)]

    An entry is visible while ``clock() < expires_at`` and gone from the
    instant ``clock() >= expires_at``. The comparison and the removal of an
    expired entry happen under a single lock acquisition, so a get() racing
    the expiry boundary never observes a stale value.
    """

    def __init__(self, max_size: int = 10000, clock: Clock = time.monotonic):
        """
        Initialize TTL cache.

        Args:
            max_size: Maximum number of entries to store (default: 10000)
            clock: Monotonic time source in seconds (default: time.monotonic)
        """
        self._cache: OrderedDict[str, Tuple[Any, float]] = OrderedDict()
        self._lock = threading.RLock()
        self._max_size = max_size
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._expired = 0
        self._evicted_live = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if missing or expired."""
        return self.lookup(key).value

    def lookup(self, key: str) -> Lookup:
        """
        Like get(), but also report why a value is absent.

        The status is one of "hit", "missing" or "expired". An entry already
        removed by purge_expired() reports "missing".
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return Lookup(None, MISSING)

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._cache[key]
                self._expired += 1
                self._misses += 1
                return Lookup(None, EXPIRED)

            self._hits += 1
            return Lookup(value, HIT)

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """
        Store value under key for ttl_seconds, replacing any existing entry.

        Re-setting a key restarts its lifetime and moves it to the newest
        position for eviction purposes.

        The write always succeeds. When the cache is full of live entries the
        oldest one is evicted, which makes a token still being displayed fail
        to redeem early; that is logged as ``cache_evicted_live``.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        with self._lock:
            self._cache.pop(key, None)
            self._cache[key] = (value, self._clock() + ttl_seconds)

            if len(self._cache) > self._max_size:
                self._purge_expired_locked()
            while len(self._cache) > self._max_size:
                # popitem(last=False) removes the oldest insertion
                _, (_, expires_at) = self._cache.popitem(last=False)
                self._evicted_live += 1
                logger.warning(
                    "cache_evicted_live",
                    size=len(self._cache),
                    max_size=self._max_size,
                    ttl_left=round(expires_at - self._clock(), 3),
                )

    def ttl_remaining(self, key: str) -> Optional[float]:
        """Seconds left before key expires, or None if it is already gone."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            remaining = entry[1] - self._clock()
            return remaining if remaining > 0 else None

    def invalidate(self, key: str) -> None:
        """Remove key from cache (for manual invalidation)."""
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear entire cache."""
        with self._lock:
            self._cache.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            return self._purge_expired_locked()

    def _purge_expired_locked(self) -> int:
        now = self._clock()
        stale = [key for key, (_, expires_at) in self._cache.items() if now >= expires_at]
        for key in stale:
            del self._cache[key]
        self._expired += len(stale)
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics for monitoring.

        Keys are never reported: they are live check-in tokens.

        Returns:
            Dictionary with cache metrics including:
            - size: Number of entries in cache (expired ones not yet swept included)
            - max_size: Maximum cache capacity
            - hits: Number of lookups that found a live entry
            - misses: Number of lookups that found nothing or an expired entry
            - expired: Number of entries removed because their TTL elapsed
            - evicted_live: Number of unexpired entries dropped to respect max_size
            - hit_rate_percent: Percentage of lookups served from cache
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0

            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "expired": self._expired,
                "evicted_live": self._evicted_live,
                "hit_rate_percent": round(hit_rate, 2),
            }
