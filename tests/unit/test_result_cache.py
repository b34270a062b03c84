"""Unit tests for the insertion-order result cache."""

import pytest

from skillfit.contexts.analysis.result_cache import ResultCache


class TestResultCache:
    """Test bounded caching and eviction."""

    @pytest.mark.unit
    def test_get_and_put(self):
        """Test storing and reading a value."""
        cache = ResultCache(max_entries=2)
        cache.put("a", 1)

        assert cache.get("a") == 1
        assert cache.get("b") is None
        assert "a" in cache
        assert len(cache) == 1

    @pytest.mark.unit
    def test_evicts_oldest_inserted(self):
        """Test that the oldest insertion goes first, even if it was just read."""
        cache = ResultCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)

        assert "a" not in cache
        assert "b" in cache
        assert "c" in cache

    @pytest.mark.unit
    def test_replace_keeps_position(self):
        """Test that replacing a key neither evicts nor moves it."""
        cache = ResultCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 10)

        assert len(cache) == 2
        assert cache.get("a") == 10

        cache.put("c", 3)
        assert "a" not in cache

    @pytest.mark.unit
    def test_clear_returns_count(self):
        """Test that clear reports how many entries were dropped."""
        cache = ResultCache()
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.clear() == 2
        assert len(cache) == 0
        assert cache.clear() == 0

    @pytest.mark.unit
    def test_stats(self):
        """Test hit and miss counters."""
        cache = ResultCache(max_entries=5)
        cache.put("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("missing")

        assert cache.stats() == {"entries": 1, "max_entries": 5, "hits": 2, "misses": 1}

    @pytest.mark.unit
    def test_capacity_at_least_one(self):
        """Test that a zero capacity is raised to one."""
        cache = ResultCache(max_entries=0)
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.max_entries == 1
        assert list(k for k in ("a", "b") if k in cache) == ["b"]

    @pytest.mark.unit
    def test_key_is_stable_hash(self):
        """Test that equal texts share a key and different texts do not."""
        assert ResultCache.key_for("SQL and Python") == ResultCache.key_for("SQL and Python")
        assert ResultCache.key_for("SQL") != ResultCache.key_for("Python")
        assert len(ResultCache.key_for("SQL")) == 64
