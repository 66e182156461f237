# ikemen_lab/services/smart_collections/models.py

"""Data models for Smart Collections: enums, dataclasses, and serialization helpers.

Defines the rule language for Smart Collections: the filter fields with the
value type and item kinds each one applies to, the comparison operators, the
single legality table pairing them, and the FilterRule / SmartCollectionQuery
/ SmartCollection / EvaluationResult dataclasses. Also provides serialization
helpers for JSON persistence.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from ikemen_lab.core.records import ItemKind

__all__ = [
    "ComparisonOperator",
    "EvaluationResult",
    "FIELD_ITEM_KINDS",
    "FIELD_VALUE_TYPES",
    "FilterField",
    "FilterRule",
    "ItemKind",
    "LEGAL_OPERATORS",
    "SmartCollection",
    "SmartCollectionQuery",
    "ValueType",
    "collection_from_dict",
    "collection_to_dict",
    "is_legal",
    "legal_operators",
    "query_from_json",
    "query_to_json",
    "rule_from_dict",
    "rule_to_dict",
]

logger = logging.getLogger("ikemenlab.smart_collections.models")


class FilterField(Enum):
    """Available fields for Smart Collection rules."""

    # Shared by characters and stages
    NAME = "name"
    TAG = "tag"
    INSTALLED_AT = "installedAt"
    SOURCE_GAME = "sourceGame"
    STYLE = "style"

    # Character-specific
    AUTHOR = "author"
    IS_HD = "isHD"
    HAS_AI = "hasAI"

    # Stage-specific
    HAS_MUSIC = "hasMusic"
    RESOLUTION = "resolution"
    TOTAL_WIDTH = "totalWidth"


class ValueType(Enum):
    """Native value type a field is extracted as."""

    STRING = "string"
    STRING_SET = "string_set"
    BOOLEAN = "boolean"
    DATE = "date"
    NUMBER = "number"


class ComparisonOperator(Enum):
    """Comparison operators for Smart Collection rules."""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"
    WITHIN_DAYS = "withinDays"
    LESS_THAN = "lessThan"
    GREATER_THAN = "greaterThan"


_BOTH: frozenset[ItemKind] = frozenset({ItemKind.CHARACTER, ItemKind.STAGE})
_CHARACTER_ONLY: frozenset[ItemKind] = frozenset({ItemKind.CHARACTER})
_STAGE_ONLY: frozenset[ItemKind] = frozenset({ItemKind.STAGE})

FIELD_VALUE_TYPES: dict[FilterField, ValueType] = {
    FilterField.NAME: ValueType.STRING,
    FilterField.AUTHOR: ValueType.STRING,
    FilterField.TAG: ValueType.STRING_SET,
    FilterField.INSTALLED_AT: ValueType.DATE,
    FilterField.IS_HD: ValueType.BOOLEAN,
    FilterField.HAS_AI: ValueType.BOOLEAN,
    FilterField.HAS_MUSIC: ValueType.BOOLEAN,
    FilterField.RESOLUTION: ValueType.STRING,
    FilterField.TOTAL_WIDTH: ValueType.NUMBER,
    FilterField.SOURCE_GAME: ValueType.STRING,
    FilterField.STYLE: ValueType.STRING,
}

FIELD_ITEM_KINDS: dict[FilterField, frozenset[ItemKind]] = {
    FilterField.NAME: _BOTH,
    FilterField.AUTHOR: _CHARACTER_ONLY,
    FilterField.TAG: _BOTH,
    FilterField.INSTALLED_AT: _BOTH,
    FilterField.IS_HD: _CHARACTER_ONLY,
    FilterField.HAS_AI: _CHARACTER_ONLY,
    FilterField.HAS_MUSIC: _STAGE_ONLY,
    FilterField.RESOLUTION: _STAGE_ONLY,
    FilterField.TOTAL_WIDTH: _STAGE_ONLY,
    FilterField.SOURCE_GAME: _BOTH,
    FilterField.STYLE: _BOTH,
}

# One legality table, keyed by value type. The editor's per-field menus are
# derived from this, never maintained separately.
LEGAL_OPERATORS: dict[ValueType, tuple[ComparisonOperator, ...]] = {
    ValueType.STRING: (
        ComparisonOperator.EQUALS,
        ComparisonOperator.NOT_EQUALS,
        ComparisonOperator.CONTAINS,
        ComparisonOperator.NOT_CONTAINS,
    ),
    ValueType.STRING_SET: (
        ComparisonOperator.CONTAINS,
        ComparisonOperator.NOT_CONTAINS,
        ComparisonOperator.IS_EMPTY,
        ComparisonOperator.IS_NOT_EMPTY,
    ),
    ValueType.BOOLEAN: (
        ComparisonOperator.EQUALS,
        ComparisonOperator.NOT_EQUALS,
    ),
    ValueType.DATE: (
        ComparisonOperator.WITHIN_DAYS,
        ComparisonOperator.LESS_THAN,
        ComparisonOperator.GREATER_THAN,
    ),
    ValueType.NUMBER: (
        ComparisonOperator.EQUALS,
        ComparisonOperator.NOT_EQUALS,
        ComparisonOperator.LESS_THAN,
        ComparisonOperator.GREATER_THAN,
    ),
}


def legal_operators(fld: FilterField) -> tuple[ComparisonOperator, ...]:
    """Returns the comparisons a field supports, in menu order.

    Args:
        fld: The filter field.

    Returns:
        The legal comparison operators for the field's value type.
    """
    return LEGAL_OPERATORS[FIELD_VALUE_TYPES[fld]]


def is_legal(fld: FilterField, comparison: ComparisonOperator) -> bool:
    """Checks a field/comparison pairing against the legality table."""
    return comparison in legal_operators(fld)


def _new_rule_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class FilterRule:
    """A single rule in a Smart Collection query.

    Rules are immutable. Editing a rule means building a replacement with the
    same ``id`` (see ``replace``).

    Attributes:
        field: Which record field to match against.
        comparison: The comparison operator.
        value: The comparison value, always stored as text.
        id: Opaque identifier that survives edits.
    """

    field: FilterField
    comparison: ComparisonOperator
    value: str = ""
    id: str = field(default_factory=_new_rule_id)

    def replace(self, **changes) -> FilterRule:
        """Returns an edited copy that keeps this rule's id."""
        changes.pop("id", None)
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class SmartCollectionQuery:
    """An ordered list of rules combined with logical AND.

    Order only affects display; it has no effect on which items match.
    """

    rules: tuple[FilterRule, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))

    def __iter__(self) -> Iterator[FilterRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def with_rule(self, rule: FilterRule) -> SmartCollectionQuery:
        """Returns a new query with ``rule`` appended."""
        return SmartCollectionQuery(self.rules + (rule,))

    def replace_rule(self, rule: FilterRule) -> SmartCollectionQuery:
        """Returns a new query where the rule sharing ``rule.id`` is swapped out.

        Raises:
            KeyError: If no rule with that id is part of the query.
        """
        if not any(r.id == rule.id for r in self.rules):
            raise KeyError(rule.id)
        return SmartCollectionQuery(tuple(rule if r.id == rule.id else r for r in self.rules))

    def without_rule(self, rule_id: str) -> SmartCollectionQuery:
        """Returns a new query without the rule with ``rule_id``."""
        return SmartCollectionQuery(tuple(r for r in self.rules if r.id != rule_id))

    @property
    def is_time_relative(self) -> bool:
        """True when the result depends on the current time (withinDays rules)."""
        return any(r.comparison == ComparisonOperator.WITHIN_DAYS for r in self.rules)

    def fingerprint(self) -> str:
        """Stable hash of the rule contents, ignoring rule ids.

        Two queries with the same rules in the same order share a fingerprint,
        which makes it usable as a cache key.
        """
        payload = [[r.field.value, r.comparison.value, r.value] for r in self.rules]
        canonical = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class EvaluationResult:
    """Ids of the items matching a query, in snapshot order.

    Attributes:
        character_ids: Matching character ids.
        stage_ids: Matching stage ids.
    """

    character_ids: tuple[str, ...] = ()
    stage_ids: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return len(self.character_ids) + len(self.stage_ids)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


@dataclass
class SmartCollection:
    """A Smart Collection with its query and metadata.

    Attributes:
        collection_id: Opaque identifier.
        name: Display name of the collection.
        icon: Emoji icon for display.
        query: The rules that decide membership.
        include_characters: Whether characters can be members.
        include_stages: Whether stages can be members.
    """

    collection_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    icon: str = "\U0001fa84"
    query: SmartCollectionQuery = field(default_factory=SmartCollectionQuery)
    include_characters: bool = True
    include_stages: bool = True


# ========================================================================
# SERIALIZATION HELPERS
# ========================================================================


def rule_to_dict(rule: FilterRule) -> dict:
    """Serializes a FilterRule to a JSON-compatible dict.

    Args:
        rule: The rule to serialize.

    Returns:
        Dict with id, field, comparison, value.
    """
    return {
        "id": rule.id,
        "field": rule.field.value,
        "comparison": rule.comparison.value,
        "value": rule.value,
    }


def rule_from_dict(data: dict) -> FilterRule:
    """Deserializes a FilterRule from a dict.

    Args:
        data: Dict with field, comparison, value and optionally id.

    Returns:
        A FilterRule instance.

    Raises:
        ValueError: If field or comparison values are invalid.
        KeyError: If field or comparison is missing.
    """
    kwargs = {
        "field": FilterField(data["field"]),
        "comparison": ComparisonOperator(data["comparison"]),
        "value": str(data.get("value", "")),
    }
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    return FilterRule(**kwargs)


def _rules_from_list(items: list) -> SmartCollectionQuery:
    parsed: list[FilterRule] = []
    for rule_data in items:
        try:
            rule = rule_from_dict(rule_data)
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Skipping invalid rule %s: %s", rule_data, exc)
            continue
        if not is_legal(rule.field, rule.comparison):
            logger.warning(
                "Skipping rule with illegal comparison %s for field %s",
                rule.comparison.value,
                rule.field.value,
            )
            continue
        parsed.append(rule)
    return SmartCollectionQuery(tuple(parsed))


def query_to_json(query: SmartCollectionQuery) -> str:
    """Serializes a query to a JSON string for storage.

    Args:
        query: The query to serialize.

    Returns:
        JSON string with a rules array.
    """
    return json.dumps({"rules": [rule_to_dict(r) for r in query]}, ensure_ascii=False)


def query_from_json(rules_json: str) -> SmartCollectionQuery:
    """Deserializes a query from JSON, dropping anything that cannot be evaluated.

    Unknown fields or comparisons, and pairings the legality table rejects,
    are skipped with a warning so a stored rule can never reach the evaluator
    in an illegal state.

    Args:
        rules_json: JSON string with a rules array.

    Returns:
        The parsed query (empty on unreadable input).
    """
    if not rules_json:
        return SmartCollectionQuery()

    try:
        data = json.loads(rules_json)
    except json.JSONDecodeError:
        logger.warning("Invalid rules JSON: %s", rules_json[:100])
        return SmartCollectionQuery()

    if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
        logger.warning("Rules JSON has no rules array: %s", rules_json[:100])
        return SmartCollectionQuery()

    return _rules_from_list(data["rules"])


def collection_to_dict(collection: SmartCollection) -> dict:
    """Serializes a SmartCollection to a portable dict.

    Args:
        collection: The Smart Collection to serialize.

    Returns:
        Dict with id, name, icon, include flags and rules.
    """
    return {
        "id": collection.collection_id,
        "name": collection.name,
        "icon": collection.icon,
        "include_characters": collection.include_characters,
        "include_stages": collection.include_stages,
        "rules": [rule_to_dict(r) for r in collection.query],
    }


def collection_from_dict(data: dict) -> SmartCollection:
    """Deserializes a SmartCollection from a dict produced by ``collection_to_dict``.

    Args:
        data: The stored collection dict.

    Returns:
        A SmartCollection. Invalid rules are skipped.
    """
    collection = SmartCollection(
        name=data.get("name", ""),
        icon=data.get("icon", "\U0001fa84"),
        include_characters=bool(data.get("include_characters", True)),
        include_stages=bool(data.get("include_stages", True)),
        query=_rules_from_list(data.get("rules") or []),
    )
    if data.get("id"):
        collection.collection_id = str(data["id"])
    return collection
