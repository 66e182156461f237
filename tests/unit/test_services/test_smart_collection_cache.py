# tests/unit/test_services/test_smart_collection_cache.py

"""Tests for EvaluationCache."""

from __future__ import annotations

import pytest

from ikemen_lab.services.smart_collections.cache import EvaluationCache
from ikemen_lab.services.smart_collections.models import EvaluationResult


def _result(*ids: str) -> EvaluationResult:
    return EvaluationResult(character_ids=ids)


class TestEvaluationCache:
    """Tests for the LRU result cache."""

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError):
            EvaluationCache(max_entries=0)

    def test_get_and_put(self) -> None:
        cache = EvaluationCache()
        key = EvaluationCache.make_key("abc", 1)
        assert cache.get(key) is None
        cache.put(key, _result("ryu"))
        assert cache.get(key) == _result("ryu")

    def test_snapshot_version_is_part_of_key(self) -> None:
        cache = EvaluationCache()
        cache.put(EvaluationCache.make_key("abc", 1), _result("ryu"))
        assert cache.get(EvaluationCache.make_key("abc", 2)) is None

    def test_include_flags_are_part_of_key(self) -> None:
        cache = EvaluationCache()
        cache.put(EvaluationCache.make_key("abc", 1, True, True), _result("ryu"))
        assert cache.get(EvaluationCache.make_key("abc", 1, True, False)) is None

    def test_evicts_least_recently_used(self) -> None:
        cache = EvaluationCache(max_entries=2)
        k1, k2, k3 = (EvaluationCache.make_key(name, 1) for name in ("a", "b", "c"))
        cache.put(k1, _result("1"))
        cache.put(k2, _result("2"))
        cache.get(k1)
        cache.put(k3, _result("3"))

        assert cache.get(k2) is None
        assert cache.get(k1) == _result("1")
        assert cache.get(k3) == _result("3")
        assert len(cache) == 2

    def test_invalidate_clears_entries(self) -> None:
        cache = EvaluationCache()
        cache.put(EvaluationCache.make_key("a", 1), _result("1"))
        cache.invalidate()
        assert len(cache) == 0

    def test_stats(self) -> None:
        cache = EvaluationCache()
        key = EvaluationCache.make_key("a", 1)
        cache.get(key)
        cache.put(key, _result("1"))
        cache.get(key)

        stats = cache.stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.size == 1
