# ikemen_lab/services/smart_collections/errors.py

"""Exceptions raised while building Smart Collection rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ikemen_lab.services.smart_collections.models import ComparisonOperator, FilterField

__all__ = ["RuleValidationError"]


class RuleValidationError(ValueError):
    """A field/comparison pairing that the legality table rejects.

    Attributes:
        field: The rule's field.
        comparison: The offending comparison operator.
    """

    def __init__(self, field: FilterField, comparison: ComparisonOperator) -> None:
        self.field = field
        self.comparison = comparison
        super().__init__(f"Comparison '{comparison.value}' is not supported for field '{field.value}'")
