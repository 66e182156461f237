"""Smart Collections service: rule-based dynamic content collections.

Provides models, validation, the evaluation engine, a result cache and a
manager for computing which characters and stages currently satisfy a
Smart Collection's rules.
"""

from __future__ import annotations

from ikemen_lab.services.smart_collections.cache import EvaluationCache
from ikemen_lab.services.smart_collections.errors import RuleValidationError
from ikemen_lab.services.smart_collections.evaluator import SmartCollectionEvaluator, evaluate
from ikemen_lab.services.smart_collections.models import (
    ComparisonOperator,
    EvaluationResult,
    FilterField,
    FilterRule,
    SmartCollection,
    SmartCollectionQuery,
    ValueType,
)
from ikemen_lab.services.smart_collections.smart_collection_manager import SmartCollectionManager
from ikemen_lab.services.smart_collections.validation import build_rule, validate_rule

__all__: list[str] = [
    "ComparisonOperator",
    "EvaluationCache",
    "EvaluationResult",
    "FilterField",
    "FilterRule",
    "RuleValidationError",
    "SmartCollection",
    "SmartCollectionEvaluator",
    "SmartCollectionManager",
    "SmartCollectionQuery",
    "ValueType",
    "build_rule",
    "evaluate",
    "validate_rule",
]
