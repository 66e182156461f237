# ikemen_lab/services/smart_collections/comparisons.py

"""Comparison semantics for each Smart Collection value type.

A rule's value is text. ``parse_target`` turns it into the type the
comparison needs; text that cannot be parsed yields ``UNPARSABLE`` and the
rule then matches nothing (fail closed). ``compare_parsed`` applies an
operator to an extracted field value and an already parsed target, so the
evaluator parses each rule once per evaluation instead of once per item.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Callable

from ikemen_lab.services.smart_collections.models import ComparisonOperator, ValueType
from ikemen_lab.utils.date_utils import parse_day_count, parse_rule_date

__all__ = ["UNPARSABLE", "compare", "compare_parsed", "parse_target"]


class _Unparsable:
    def __repr__(self) -> str:
        return "UNPARSABLE"


UNPARSABLE = _Unparsable()

_SET_MEMBERSHIP_OPS = (ComparisonOperator.CONTAINS, ComparisonOperator.NOT_CONTAINS)


# ========================================================================
# TARGET PARSING
# ========================================================================


def _parse_string(text: str) -> str:
    return text.lower()


def _parse_tag_set(text: str) -> frozenset[str] | _Unparsable:
    tags = frozenset(part.strip().lower() for part in text.split(",") if part.strip())
    return tags if tags else UNPARSABLE


def _parse_bool(text: str) -> bool | _Unparsable:
    normalized = text.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    return UNPARSABLE


def _parse_number(text: str) -> float | _Unparsable:
    try:
        number = float(text)
    except (TypeError, ValueError):
        return UNPARSABLE
    return number if math.isfinite(number) else UNPARSABLE


def _parse_date_target(text: str, comparison: ComparisonOperator) -> int | datetime | _Unparsable:
    if comparison == ComparisonOperator.WITHIN_DAYS:
        target = parse_day_count(text)
    else:
        target = parse_rule_date(text)
    return UNPARSABLE if target is None else target


def parse_target(value_type: ValueType, comparison: ComparisonOperator, text: str) -> object:
    """Parses a rule's value text into the native type its comparison needs.

    Args:
        value_type: The value type of the rule's field.
        comparison: The rule's comparison operator.
        text: The rule's value text.

    Returns:
        The parsed target, None for operators that ignore the value
        (isEmpty / isNotEmpty), or UNPARSABLE.
    """
    text = text or ""

    if value_type == ValueType.STRING:
        return _parse_string(text)
    if value_type == ValueType.STRING_SET:
        if comparison in _SET_MEMBERSHIP_OPS:
            return _parse_tag_set(text)
        return None
    if value_type == ValueType.BOOLEAN:
        return _parse_bool(text)
    if value_type == ValueType.DATE:
        return _parse_date_target(text, comparison)
    if value_type == ValueType.NUMBER:
        return _parse_number(text)
    return UNPARSABLE


# ========================================================================
# PER-TYPE MATCHERS
# ========================================================================


def _match_string(value: str | None, comparison: ComparisonOperator, target: str, now: datetime) -> bool:
    if value is None:
        return False
    value_lower = value.lower()

    if comparison == ComparisonOperator.EQUALS:
        return value_lower == target
    if comparison == ComparisonOperator.NOT_EQUALS:
        return value_lower != target
    if comparison == ComparisonOperator.CONTAINS:
        return target in value_lower
    if comparison == ComparisonOperator.NOT_CONTAINS:
        return target not in value_lower
    return False


def _match_tag_set(
    value: frozenset[str], comparison: ComparisonOperator, target: frozenset[str] | None, now: datetime
) -> bool:
    if comparison == ComparisonOperator.IS_EMPTY:
        return not value
    if comparison == ComparisonOperator.IS_NOT_EMPTY:
        return bool(value)
    if target is None:
        return False
    if comparison == ComparisonOperator.CONTAINS:
        # Every required tag must be present
        return target <= value
    if comparison == ComparisonOperator.NOT_CONTAINS:
        return value.isdisjoint(target)
    return False


def _match_boolean(value: bool | None, comparison: ComparisonOperator, target: bool, now: datetime) -> bool:
    if value is None:
        return False
    if comparison == ComparisonOperator.EQUALS:
        return value == target
    if comparison == ComparisonOperator.NOT_EQUALS:
        return value != target
    return False


def _match_date(value: datetime | None, comparison: ComparisonOperator, target: object, now: datetime) -> bool:
    if value is None:
        return False

    if comparison == ComparisonOperator.WITHIN_DAYS:
        if not isinstance(target, int):
            return False
        return now - value <= timedelta(days=target)

    if not isinstance(target, datetime):
        return False
    if comparison == ComparisonOperator.LESS_THAN:
        return value < target
    if comparison == ComparisonOperator.GREATER_THAN:
        return value > target
    return False


def _match_number(value: float | None, comparison: ComparisonOperator, target: float, now: datetime) -> bool:
    if value is None:
        return False
    if comparison == ComparisonOperator.EQUALS:
        return value == target
    if comparison == ComparisonOperator.NOT_EQUALS:
        return value != target
    if comparison == ComparisonOperator.LESS_THAN:
        return value < target
    if comparison == ComparisonOperator.GREATER_THAN:
        return value > target
    return False


_MATCHERS: dict[ValueType, Callable[..., bool]] = {
    ValueType.STRING: _match_string,
    ValueType.STRING_SET: _match_tag_set,
    ValueType.BOOLEAN: _match_boolean,
    ValueType.DATE: _match_date,
    ValueType.NUMBER: _match_number,
}


def compare_parsed(
    value_type: ValueType,
    value: object,
    comparison: ComparisonOperator,
    target: object,
    now: datetime,
) -> bool:
    """Applies a comparison to an extracted value and a parsed target.

    Args:
        value_type: The value type of the rule's field.
        value: The field value from the accessor registry.
        comparison: The comparison operator.
        target: The output of ``parse_target``.
        now: Reference time for relative date comparisons (aware UTC).

    Returns:
        True if the value satisfies the comparison. Always False for an
        UNPARSABLE target.
    """
    if target is UNPARSABLE:
        return False
    return _MATCHERS[value_type](value, comparison, target, now)


def compare(
    value_type: ValueType,
    value: object,
    comparison: ComparisonOperator,
    text: str,
    now: datetime,
) -> bool:
    """Parses ``text`` and applies the comparison in one step.

    Args:
        value_type: The value type of the rule's field.
        value: The field value from the accessor registry.
        comparison: The comparison operator.
        text: The rule's value text.
        now: Reference time for relative date comparisons (aware UTC).

    Returns:
        True if the value satisfies the comparison; False on any parse failure.
    """
    return compare_parsed(value_type, value, comparison, parse_target(value_type, comparison, text), now)
