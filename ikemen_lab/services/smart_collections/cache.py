# ikemen_lab/services/smart_collections/cache.py

"""Least-recently-used cache for Smart Collection evaluation results.

Entries are keyed by the query fingerprint, the include flags and the
snapshot version, so a library change (new version) can never serve a stale
result. ``invalidate`` drops everything when the metadata store signals a
change.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass

from ikemen_lab.services.smart_collections.models import EvaluationResult

__all__ = ["CacheKey", "CacheStats", "EvaluationCache"]

logger = logging.getLogger("ikemenlab.smart_collections.cache")

CacheKey = tuple[str, bool, bool, int]


@dataclass(frozen=True)
class CacheStats:
    """Counters describing cache effectiveness."""

    hits: int
    misses: int
    size: int


class EvaluationCache:
    """Thread-safe LRU mapping of cache keys to evaluation results.

    Attributes:
        max_entries: Capacity before the least recently used entry is evicted.
    """

    def __init__(self, max_entries: int = 64) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[CacheKey, EvaluationResult] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(
        query_fingerprint: str,
        snapshot_version: int,
        include_characters: bool = True,
        include_stages: bool = True,
    ) -> CacheKey:
        return (query_fingerprint, include_characters, include_stages, snapshot_version)

    def get(self, key: CacheKey) -> EvaluationResult | None:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return result

    def put(self, key: CacheKey, result: EvaluationResult) -> None:
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cached evaluation %s", evicted[0][:12])

    def invalidate(self) -> None:
        """Drops every cached result."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        if count:
            logger.debug("Invalidated %d cached evaluations", count)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
