# portfolio_journal/services/analytics/cache.py
"""
In-process cache for computed portfolio analytics.

Entries are keyed by user: one user's writes can only stale their own
analytics, so mutation endpoints call invalidate(user_id) after commit.

Each invalidation bumps the user's generation. A reader that started
computing before the bump passes the generation it saw to set(), and the
stale result is dropped instead of being cached for a full TTL.
"""

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any

from portfolio_journal.services.constants import ANALYTICS_CACHE_MAX_SIZE

logger = logging.getLogger(__name__)


class AnalyticsCache:
    """
    Thread-safe bounded LRU cache with TTL.

    Cache key format: "analytics:{user_id}:{view}"

    Memory Safety:
        At most max_size entries are kept. When the cache is full, the least
        recently used entry is evicted.

    Thread Safety:
        Uses threading.Lock; sync endpoints run in the server's thread pool.
        With several worker processes each has its own cache.
    """

    def __init__(
            self,
            ttl_seconds: int = 300,
            max_size: int = ANALYTICS_CACHE_MAX_SIZE,
    ):
        self._cache: OrderedDict[str, tuple[datetime, Any]] = OrderedDict()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._max_size = max_size
        self._generations: dict[int, int] = {}
        self._lock = threading.Lock()

    def _make_key(self, user_id: int, view: str) -> str:
        return f"analytics:{user_id}:{view}"

    def get(self, user_id: int, view: str = "full") -> Any | None:
        """
        Get cached value if present and not expired.

        Returns:
            Cached value or None if not found/expired
        """
        key = self._make_key(user_id, view)

        with self._lock:
            if key in self._cache:
                timestamp, value = self._cache[key]
                if datetime.now() - timestamp < self._ttl:
                    self._cache.move_to_end(key)
                    logger.debug(f"Cache hit for {key}")
                    return value
                del self._cache[key]
                logger.debug(f"Cache expired for {key}")

        return None

    def generation(self, user_id: int) -> int:
        """Number of times this user's entries have been invalidated."""
        with self._lock:
            return self._generations.get(user_id, 0)

    def set(
            self,
            user_id: int,
            value: Any,
            view: str = "full",
            generation: int | None = None,
    ) -> None:
        """
        Store value, evicting the least recently used entry when full.

        Args:
            generation: Value of generation(user_id) read before the result
                was computed. If the user has been invalidated since, the
                value is not stored.
        """
        key = self._make_key(user_id, view)
        with self._lock:
            if generation is not None and generation != self._generations.get(user_id, 0):
                logger.debug(f"Dropped stale result for {key} (invalidated while computing)")
                return
            if key in self._cache:
                del self._cache[key]
            while len(self._cache) >= self._max_size:
                oldest_key = next(iter(self._cache))
                del self._cache[oldest_key]
                logger.debug(f"Cache evicted {oldest_key} (LRU)")
            self._cache[key] = (datetime.now(), value)
        logger.debug(f"Cached result for {key}")

    def invalidate(self, user_id: int) -> int:
        """
        Invalidate all cache entries for a user.

        Returns:
            Number of entries invalidated
        """
        prefix = f"analytics:{user_id}:"
        with self._lock:
            self._generations[user_id] = self._generations.get(user_id, 0) + 1
            keys_to_delete = [k for k in self._cache if k.startswith(prefix)]
            for key in keys_to_delete:
                del self._cache[key]

        if keys_to_delete:
            logger.debug(f"Invalidated {len(keys_to_delete)} cache entries for user {user_id}")

        return len(keys_to_delete)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        logger.debug(f"Cleared {count} cache entries")

    def size(self) -> int:
        with self._lock:
            return len(self._cache)
