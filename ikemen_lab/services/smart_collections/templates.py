# ikemen_lab/services/smart_collections/templates.py

"""Predefined Smart Collection templates for quick-start creation.

Provides built-in templates grouped by category (Recent, Characters, Stages)
that users can apply as starting points for new Smart Collections. Every
template is built through ``build_rule`` so it always satisfies the legality
table.
"""

from __future__ import annotations

from dataclasses import dataclass

from ikemen_lab.services.smart_collections.models import (
    ComparisonOperator,
    FilterField,
    SmartCollection,
    SmartCollectionQuery,
)
from ikemen_lab.services.smart_collections.validation import build_rule

__all__ = [
    "TEMPLATE_CATEGORIES",
    "SmartCollectionTemplate",
    "get_all_templates",
    "get_template_by_key",
]


@dataclass(frozen=True)
class SmartCollectionTemplate:
    """A predefined Smart Collection template.

    Attributes:
        key: Unique template identifier.
        category: Category key for UI grouping (e.g. 'recent', 'stages').
        name: Default display name for collections created from it.
        icon: Default emoji icon.
        query: The pre-configured rules.
        include_characters: Whether characters can match.
        include_stages: Whether stages can match.
    """

    key: str
    category: str
    name: str
    icon: str
    query: SmartCollectionQuery
    include_characters: bool = True
    include_stages: bool = True

    def create_collection(self) -> SmartCollection:
        """Returns a new, unsaved SmartCollection seeded from this template."""
        return SmartCollection(
            name=self.name,
            icon=self.icon,
            query=self.query,
            include_characters=self.include_characters,
            include_stages=self.include_stages,
        )


TEMPLATE_CATEGORIES: list[str] = ["recent", "characters", "stages"]


def _query(*rules) -> SmartCollectionQuery:
    return SmartCollectionQuery(tuple(rules))


def _build_templates(recent_days: int) -> list[SmartCollectionTemplate]:
    return [
        SmartCollectionTemplate(
            key="recently_added",
            category="recent",
            name="Recently Added",
            icon="\U0001f552",
            query=_query(build_rule(FilterField.INSTALLED_AT, ComparisonOperator.WITHIN_DAYS, str(recent_days))),
        ),
        SmartCollectionTemplate(
            key="hd_characters",
            category="characters",
            name="HD Characters",
            icon="✨",
            query=_query(build_rule(FilterField.IS_HD, ComparisonOperator.EQUALS, "true")),
            include_stages=False,
        ),
        SmartCollectionTemplate(
            key="characters_with_ai",
            category="characters",
            name="Characters with AI",
            icon="\U0001f916",
            query=_query(build_rule(FilterField.HAS_AI, ComparisonOperator.EQUALS, "true")),
            include_stages=False,
        ),
        SmartCollectionTemplate(
            key="untagged",
            category="characters",
            name="Untagged Content",
            icon="\U0001f3f7",
            query=_query(build_rule(FilterField.TAG, ComparisonOperator.IS_EMPTY)),
        ),
        SmartCollectionTemplate(
            key="stages_with_music",
            category="stages",
            name="Stages with Music",
            icon="\U0001f3b5",
            query=_query(build_rule(FilterField.HAS_MUSIC, ComparisonOperator.EQUALS, "true")),
            include_characters=False,
        ),
        SmartCollectionTemplate(
            key="wide_stages",
            category="stages",
            name="Wide Stages",
            icon="↔",
            query=_query(build_rule(FilterField.TOTAL_WIDTH, ComparisonOperator.GREATER_THAN, "640")),
            include_characters=False,
        ),
    ]


def get_all_templates(recent_days: int | None = None) -> list[SmartCollectionTemplate]:
    """Returns all built-in templates in display order.

    Args:
        recent_days: Window for the "Recently Added" template. Defaults to
            the configured ``DEFAULT_RECENT_DAYS``.

    Returns:
        The templates, ordered by TEMPLATE_CATEGORIES.
    """
    if recent_days is None:
        from ikemen_lab.config import config

        recent_days = config.DEFAULT_RECENT_DAYS
    templates = _build_templates(recent_days)
    return sorted(templates, key=lambda t: TEMPLATE_CATEGORIES.index(t.category))


def get_template_by_key(key: str, recent_days: int | None = None) -> SmartCollectionTemplate | None:
    """Looks up a template by its key.

    Args:
        key: The template key.
        recent_days: Window for the "Recently Added" template.

    Returns:
        The template, or None if the key is unknown.
    """
    for template in get_all_templates(recent_days):
        if template.key == key:
            return template
    return None
