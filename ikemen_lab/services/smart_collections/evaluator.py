# ikemen_lab/services/smart_collections/evaluator.py

"""Smart Collection rule evaluation engine.

Evaluates a SmartCollectionQuery against a LibrarySnapshot. Every rule must
hold for an item to match (logical AND); an empty query matches everything.
Characters and stages are filtered independently and returned in snapshot
order, so two evaluations of unchanged inputs give identical results.

Evaluation is a pure function of (query, snapshot, now): nothing is cached or
mutated here, and rule values that cannot be parsed make the rule match no
item instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from ikemen_lab.core.records import LibrarySnapshot, as_utc
from ikemen_lab.services.smart_collections.accessors import NOT_APPLICABLE, LibraryRecord, get_field_value
from ikemen_lab.services.smart_collections.comparisons import UNPARSABLE, compare_parsed, parse_target
from ikemen_lab.services.smart_collections.models import (
    FIELD_VALUE_TYPES,
    EvaluationResult,
    FilterRule,
    SmartCollectionQuery,
    ValueType,
)

__all__ = ["SmartCollectionEvaluator", "evaluate"]

logger = logging.getLogger("ikemenlab.smart_collections.evaluator")


@dataclass(frozen=True)
class _PreparedRule:
    """A rule with its value already parsed for its comparison."""

    rule: FilterRule
    value_type: ValueType
    target: object


class SmartCollectionEvaluator:
    """Evaluates Smart Collection queries against library snapshots."""

    def evaluate(
        self,
        query: SmartCollectionQuery | Iterable[FilterRule],
        snapshot: LibrarySnapshot,
        now: datetime | None = None,
        *,
        include_characters: bool = True,
        include_stages: bool = True,
    ) -> EvaluationResult:
        """Returns the ids of all characters and stages matching the query.

        Args:
            query: The rules to apply (combined with AND).
            snapshot: The library state to filter.
            now: Reference time for ``withinDays`` rules. Defaults to the
                current UTC time.
            include_characters: When False, no character ids are returned.
            include_stages: When False, no stage ids are returned.

        Returns:
            The matching ids in snapshot order.
        """
        if not isinstance(query, SmartCollectionQuery):
            query = SmartCollectionQuery(tuple(query))
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)

        prepared = self._prepare(query)

        character_ids: tuple[str, ...] = ()
        if include_characters:
            character_ids = self._filter_ids(snapshot.characters, prepared, now)

        stage_ids: tuple[str, ...] = ()
        if include_stages:
            stage_ids = self._filter_ids(snapshot.stages, prepared, now)

        logger.debug(
            "Evaluated %d rules against snapshot v%d: %d/%d characters, %d/%d stages",
            len(query),
            snapshot.version,
            len(character_ids),
            len(snapshot.characters),
            len(stage_ids),
            len(snapshot.stages),
        )
        return EvaluationResult(character_ids=character_ids, stage_ids=stage_ids)

    def matches(
        self,
        record: LibraryRecord,
        query: SmartCollectionQuery | Iterable[FilterRule],
        now: datetime | None = None,
    ) -> bool:
        """Checks a single record against a query.

        Args:
            record: The character or stage record.
            query: The rules to apply.
            now: Reference time for ``withinDays`` rules.

        Returns:
            True if every rule holds for the record.
        """
        if not isinstance(query, SmartCollectionQuery):
            query = SmartCollectionQuery(tuple(query))
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        return self._matches_all(record, self._prepare(query), now)

    # ------------------------------------------------------------------
    # PRIVATE HELPERS
    # ------------------------------------------------------------------

    @staticmethod
    def _prepare(query: SmartCollectionQuery) -> list[_PreparedRule]:
        prepared: list[_PreparedRule] = []
        for rule in query:
            value_type = FIELD_VALUE_TYPES[rule.field]
            target = parse_target(value_type, rule.comparison, rule.value)
            if target is UNPARSABLE:
                logger.debug(
                    "Rule %s (%s %s %r) has an unparsable value and matches nothing",
                    rule.id,
                    rule.field.value,
                    rule.comparison.value,
                    rule.value,
                )
            prepared.append(_PreparedRule(rule=rule, value_type=value_type, target=target))
        return prepared

    def _filter_ids(
        self,
        records: Iterable[LibraryRecord],
        prepared: list[_PreparedRule],
        now: datetime,
    ) -> tuple[str, ...]:
        matching = (record.id for record in records if self._matches_all(record, prepared, now))
        # Ordered set: first occurrence wins
        return tuple(dict.fromkeys(matching))

    @staticmethod
    def _matches_all(record: LibraryRecord, prepared: list[_PreparedRule], now: datetime) -> bool:
        for item in prepared:
            value = get_field_value(item.rule.field, record)
            if value is NOT_APPLICABLE:
                return False
            if not compare_parsed(item.value_type, value, item.rule.comparison, item.target, now):
                return False
        return True


_default_evaluator = SmartCollectionEvaluator()


def evaluate(
    query: SmartCollectionQuery | Iterable[FilterRule],
    snapshot: LibrarySnapshot,
    now: datetime | None = None,
) -> EvaluationResult:
    """Module-level shortcut for ``SmartCollectionEvaluator().evaluate``.

    Args:
        query: The rules to apply (combined with AND).
        snapshot: The library state to filter.
        now: Reference time for ``withinDays`` rules.

    Returns:
        The matching character and stage ids.
    """
    return _default_evaluator.evaluate(query, snapshot, now)
