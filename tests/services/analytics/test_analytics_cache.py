# tests/services/analytics/test_analytics_cache.py
"""
Tests for AnalyticsCache (per-user LRU + TTL).
"""

import time

from portfolio_journal.services.analytics import AnalyticsCache


class TestAnalyticsCache:

    def test_get_missing(self):
        assert AnalyticsCache().get(1) is None

    def test_set_and_get(self):
        cache = AnalyticsCache()
        cache.set(1, "result")

        assert cache.get(1) == "result"
        assert cache.size() == 1

    def test_views_are_separate(self):
        cache = AnalyticsCache()
        cache.set(1, "full")
        cache.set(1, "summary", view="summary")

        assert cache.get(1) == "full"
        assert cache.get(1, view="summary") == "summary"

    def test_users_are_isolated(self):
        cache = AnalyticsCache()
        cache.set(1, "mine")

        assert cache.get(2) is None

    def test_invalidate_only_touches_one_user(self):
        cache = AnalyticsCache()
        cache.set(1, "a")
        cache.set(1, "b", view="summary")
        cache.set(2, "c")

        removed = cache.invalidate(1)

        assert removed == 2
        assert cache.get(1) is None
        assert cache.get(2) == "c"

    def test_invalidate_does_not_match_id_prefixes(self):
        """Invalidating user 1 must not drop user 12."""
        cache = AnalyticsCache()
        cache.set(12, "other")

        assert cache.invalidate(1) == 0
        assert cache.get(12) == "other"

    def test_invalidate_bumps_generation(self):
        cache = AnalyticsCache()
        assert cache.generation(1) == 0

        cache.invalidate(1)

        assert cache.generation(1) == 1
        assert cache.generation(2) == 0

    def test_set_with_stale_generation_is_dropped(self):
        cache = AnalyticsCache()
        generation = cache.generation(1)
        cache.invalidate(1)

        cache.set(1, "stale", generation=generation)

        assert cache.get(1) is None
        assert cache.size() == 0

    def test_set_with_current_generation_is_stored(self):
        cache = AnalyticsCache()
        cache.invalidate(1)

        cache.set(1, "fresh", generation=cache.generation(1))

        assert cache.get(1) == "fresh"

    def test_ttl_expiry(self):
        cache = AnalyticsCache(ttl_seconds=0)
        cache.set(1, "result")
        time.sleep(0.01)

        assert cache.get(1) is None
        assert cache.size() == 0

    def test_lru_eviction(self):
        cache = AnalyticsCache(max_size=2)
        cache.set(1, "a")
        cache.set(2, "b")
        cache.get(1)  # 1 becomes most recently used
        cache.set(3, "c")

        assert cache.get(1) == "a"
        assert cache.get(2) is None
        assert cache.get(3) == "c"

    def test_clear(self):
        cache = AnalyticsCache()
        cache.set(1, "a")
        cache.set(2, "b")

        cache.clear()

        assert cache.size() == 0
