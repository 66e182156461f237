# ikemen_lab/services/smart_collections/validation.py

"""Rule construction and validation.

Rules are checked against the legality table when they are created or
edited; the evaluator assumes every rule it receives has passed here.
"""

from __future__ import annotations

import logging

from ikemen_lab.services.smart_collections.errors import RuleValidationError
from ikemen_lab.services.smart_collections.models import (
    ComparisonOperator,
    FilterField,
    FilterRule,
    SmartCollectionQuery,
    is_legal,
)

__all__ = ["build_query", "build_rule", "edit_rule", "validate_rule"]

logger = logging.getLogger("ikemenlab.smart_collections.validation")


def validate_rule(rule: FilterRule) -> RuleValidationError | None:
    """Checks a rule's field/comparison pairing.

    Args:
        rule: The candidate rule.

    Returns:
        None if the rule is valid, otherwise the error describing it.
    """
    if is_legal(rule.field, rule.comparison):
        return None
    return RuleValidationError(rule.field, rule.comparison)


def build_rule(field: FilterField, comparison: ComparisonOperator, value: str = "") -> FilterRule:
    """Creates a validated FilterRule.

    Args:
        field: Which record field to match against.
        comparison: The comparison operator.
        value: The comparison value as text.

    Returns:
        A new FilterRule with a fresh id.

    Raises:
        RuleValidationError: If the comparison is not legal for the field.
    """
    rule = FilterRule(field=field, comparison=comparison, value=value)
    error = validate_rule(rule)
    if error is not None:
        logger.debug("Rejected rule: %s", error)
        raise error
    return rule


def edit_rule(rule: FilterRule, **changes) -> FilterRule:
    """Builds the validated replacement of an existing rule.

    The replacement keeps the original id. On failure the caller keeps the
    previous rule untouched.

    Args:
        rule: The rule being edited.
        **changes: New values for field, comparison and/or value.

    Returns:
        The replacement rule.

    Raises:
        RuleValidationError: If the edited pairing is not legal.
    """
    replacement = rule.replace(**changes)
    error = validate_rule(replacement)
    if error is not None:
        logger.debug("Rejected edit of rule %s: %s", rule.id, error)
        raise error
    return replacement


def build_query(rules: list[FilterRule]) -> SmartCollectionQuery:
    """Validates every rule and wraps them in a query.

    Args:
        rules: The rules in display order.

    Returns:
        The query.

    Raises:
        RuleValidationError: For the first rule with an illegal pairing.
    """
    for rule in rules:
        error = validate_rule(rule)
        if error is not None:
            raise error
    return SmartCollectionQuery(tuple(rules))
