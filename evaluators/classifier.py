"""
Category classification.

Splits catalog categories into the Tier Assessment set (16 names) and the
Gap Analysis set (8 names) by exact match on the display name, after
removing a leading "<number>. " prefix. Categories in neither list are
unclassified: they stay editable in question management but never show up
as questionnaire steps or report sections.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from models.enums import (
    AssessmentGroup,
    CATEGORY_SYNONYMS,
    GAP_CATEGORY_NAMES,
    TIER_CATEGORY_NAMES,
)
from models.schemas import Category

_NUMERIC_PREFIX = re.compile(r"^\d+\.\s+")

_TIER_NAMES = frozenset(TIER_CATEGORY_NAMES)
_GAP_NAMES = frozenset(GAP_CATEGORY_NAMES)


@dataclass
class ClassifiedCategories:
    """
    Result of classification.

    Attributes:
        tier_categories: Tier Assessment categories sorted by order_index
        gap_categories: Gap Analysis categories sorted by order_index
    """
    tier_categories: List[Category] = field(default_factory=list)
    gap_categories: List[Category] = field(default_factory=list)

    @property
    def ordered(self) -> List[Category]:
        """Single display sequence: all tier categories, then all gap categories."""
        return self.tier_categories + self.gap_categories


def strip_numeric_prefix(name: str) -> str:
    """Remove a leading "<number>. " prefix, e.g. "2. Mission Profiles"."""
    return _NUMERIC_PREFIX.sub("", name).strip()


def normalize_category_name(name: str) -> str:
    """
    Canonical form of a category name, used to match legacy duplicates.

    Precedence:
        1. a literal canonical tier/gap name is returned unchanged
        2. a known legacy synonym maps to its canonical name
        3. otherwise the prefix-stripped name

    Args:
        name: Raw category display name

    Returns:
        Normalized name
    """
    stripped = strip_numeric_prefix(name)
    if stripped in _TIER_NAMES or stripped in _GAP_NAMES:
        return stripped
    return CATEGORY_SYNONYMS.get(stripped, stripped)


def classify_category(category: Category) -> Optional[AssessmentGroup]:
    """Group of a single category, or None when it is unclassified."""
    name = strip_numeric_prefix(category.name)
    if name in _TIER_NAMES:
        return AssessmentGroup.TIER
    if name in _GAP_NAMES:
        return AssessmentGroup.GAP
    return None


def _by_order_index(categories: List[Category]) -> List[Category]:
    return sorted(categories, key=lambda c: c.order_index)


def classify(categories: Iterable[Category]) -> ClassifiedCategories:
    """
    Partition categories into tier and gap sets.

    Args:
        categories: Raw category records

    Returns:
        ClassifiedCategories with both lists sorted ascending by order_index
    """
    tier: List[Category] = []
    gap: List[Category] = []

    for category in categories:
        group = classify_category(category)
        if group is AssessmentGroup.TIER:
            tier.append(category)
        elif group is AssessmentGroup.GAP:
            gap.append(category)

    return ClassifiedCategories(
        tier_categories=_by_order_index(tier),
        gap_categories=_by_order_index(gap),
    )


def ordered_categories(categories: Iterable[Category]) -> List[Category]:
    """Tier categories first, then gap categories, each by order_index."""
    return classify(categories).ordered
