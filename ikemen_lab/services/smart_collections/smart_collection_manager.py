# ikemen_lab/services/smart_collections/smart_collection_manager.py

"""Smart Collection orchestration: snapshot, evaluate, cache.

Fetches the current library snapshot from a LibraryProvider, evaluates
collections against it and memoizes results per snapshot version.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from ikemen_lab.services.smart_collections.cache import EvaluationCache
from ikemen_lab.services.smart_collections.evaluator import SmartCollectionEvaluator
from ikemen_lab.services.smart_collections.models import (
    EvaluationResult,
    FilterRule,
    SmartCollection,
    SmartCollectionQuery,
)

if TYPE_CHECKING:
    from ikemen_lab.core.library_provider import LibraryProvider
    from ikemen_lab.core.records import LibrarySnapshot

__all__ = ["SmartCollectionManager"]

logger = logging.getLogger("ikemenlab.smart_collections.manager")


class SmartCollectionManager:
    """Evaluates Smart Collections against the live library.

    Attributes:
        provider: Source of library snapshots.
        evaluator: The rule evaluation engine.
        cache: Result cache, or None to always evaluate.
    """

    def __init__(
        self,
        provider: LibraryProvider,
        evaluator: SmartCollectionEvaluator | None = None,
        cache: EvaluationCache | None = None,
    ) -> None:
        """Initializes the SmartCollectionManager.

        Args:
            provider: Source of library snapshots.
            evaluator: Optional evaluator (a fresh one by default).
            cache: Optional result cache.
        """
        self.provider = provider
        self.evaluator = evaluator or SmartCollectionEvaluator()
        self.cache = cache

    # ------------------------------------------------------------------
    # EVALUATION
    # ------------------------------------------------------------------

    def evaluate_collection(self, collection: SmartCollection, now: datetime | None = None) -> EvaluationResult:
        """Evaluates a collection's query against the current library.

        Args:
            collection: The Smart Collection to evaluate.
            now: Reference time for ``withinDays`` rules.

        Returns:
            The matching character and stage ids.

        Raises:
            LibraryProviderError: If the library snapshot cannot be loaded.
        """
        return self._evaluate(
            collection.query,
            now,
            include_characters=collection.include_characters,
            include_stages=collection.include_stages,
            label=collection.name,
        )

    def evaluate_all(
        self, collections: Iterable[SmartCollection], now: datetime | None = None
    ) -> dict[str, EvaluationResult]:
        """Evaluates several collections against one library state.

        Args:
            collections: The Smart Collections to evaluate.
            now: Reference time for ``withinDays`` rules.

        Returns:
            Dict mapping collection_id to its result.
        """
        snapshot = self.provider.snapshot()
        result: dict[str, EvaluationResult] = {}
        for collection in collections:
            result[collection.collection_id] = self._evaluate(
                collection.query,
                now,
                include_characters=collection.include_characters,
                include_stages=collection.include_stages,
                label=collection.name,
                snapshot=snapshot,
            )
        if result:
            logger.info(
                "Refreshed %d smart collections, match totals %s",
                len(result),
                [r.total for r in result.values()],
            )
        return result

    def preview(self, rules: Iterable[FilterRule], now: datetime | None = None) -> EvaluationResult:
        """Evaluates unsaved rules for the editor's live match count.

        Args:
            rules: The rules currently shown in the editor.
            now: Reference time for ``withinDays`` rules.

        Returns:
            The matching character and stage ids.
        """
        return self._evaluate(SmartCollectionQuery(tuple(rules)), now, label="<preview>")

    def library_changed(self) -> None:
        """Called when the metadata store reports a change."""
        if self.cache is not None:
            self.cache.invalidate()

    # ------------------------------------------------------------------
    # PRIVATE HELPERS
    # ------------------------------------------------------------------

    def _evaluate(
        self,
        query: SmartCollectionQuery,
        now: datetime | None,
        *,
        include_characters: bool = True,
        include_stages: bool = True,
        label: str = "",
        snapshot: LibrarySnapshot | None = None,
    ) -> EvaluationResult:
        if snapshot is None:
            snapshot = self.provider.snapshot()

        # withinDays results move with the clock, so they are never cached
        cacheable = self.cache is not None and not query.is_time_relative
        key = None
        if cacheable:
            key = EvaluationCache.make_key(query.fingerprint(), snapshot.version, include_characters, include_stages)
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for smart collection '%s'", label)
                return cached

        result = self.evaluator.evaluate(
            query,
            snapshot,
            now,
            include_characters=include_characters,
            include_stages=include_stages,
        )

        if cacheable:
            self.cache.put(key, result)

        logger.info(
            "Evaluated smart collection '%s': %d characters, %d stages",
            label,
            len(result.character_ids),
            len(result.stage_ids),
        )
        return result
