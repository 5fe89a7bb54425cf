"""
Question-to-category resolution.

The catalog has been re-seeded several times, so a question's category_id
does not always point at the category it is displayed under. Resolution
runs an ordered chain of named strategies and stops at the first one that
finds at least one question:

    1. direct           question.category_id == category.id
    2. equivalent_ids   category_id is a known alternate id of the category
    3. normalized_name  the question's own category has the same normalized name
    4. keywords         question text/description contains a category keyword

Stages 2-4 only exist to cope with legacy data and can be dropped from the
chain once the catalog is clean. Resolution is a pure function of its
inputs and never raises; an unmatched category resolves to an empty list.
Fallback sampling is a separate, explicit call.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from models.enums import CATEGORY_ID_EQUIVALENTS, CATEGORY_KEYWORDS
from models.schemas import Category, Question
from evaluators.classifier import normalize_category_name

logger = logging.getLogger(__name__)


def sort_by_order_index(questions: Sequence[Question]) -> List[Question]:
    """
    Sort questions by order_index ascending.

    Questions without an order_index come after those with one; ties keep
    their input order (sorted() is stable).
    """
    return sorted(
        questions,
        key=lambda q: (q.order_index is None, q.order_index if q.order_index is not None else 0),
    )


class ResolutionStrategy:
    """A single resolution stage. Subclasses set ``name`` and implement ``match``."""

    name: str = "base"

    def match(
        self,
        category: Category,
        questions: Sequence[Question],
        categories: Sequence[Category],
    ) -> List[Question]:
        raise NotImplementedError


class DirectMatchStrategy(ResolutionStrategy):
    """Questions whose category_id is the category's id."""

    name = "direct"

    def match(self, category, questions, categories):
        return [q for q in questions if q.category_id == category.id]


class EquivalentIdStrategy(ResolutionStrategy):
    """Questions filed under an alternate id of the category."""

    name = "equivalent_ids"

    def __init__(self, equivalents: Optional[Dict[str, List[str]]] = None):
        self.equivalents = equivalents if equivalents is not None else CATEGORY_ID_EQUIVALENTS

    def match(self, category, questions, categories):
        alternate_ids = set(self.equivalents.get(category.id, ()))
        if not alternate_ids:
            return []
        return [q for q in questions if q.category_id in alternate_ids]


class NormalizedNameStrategy(ResolutionStrategy):
    """Questions whose own category normalizes to the same name."""

    name = "normalized_name"

    def match(self, category, questions, categories):
        target = normalize_category_name(category.name)
        matching_ids = {
            c.id for c in categories
            if normalize_category_name(c.name) == target
        }
        return [q for q in questions if q.category_id in matching_ids]


class KeywordStrategy(ResolutionStrategy):
    """Questions mentioning one of the category's keywords (case-insensitive)."""

    name = "keywords"

    def __init__(self, keywords: Optional[Dict[str, List[str]]] = None):
        self.keywords = keywords if keywords is not None else CATEGORY_KEYWORDS

    def match(self, category, questions, categories):
        keywords = self.keywords.get(normalize_category_name(category.name), [])
        if not keywords:
            return []

        matched = []
        for q in questions:
            haystack = q.text.lower()
            if q.description:
                haystack += "\n" + q.description.lower()
            if any(keyword in haystack for keyword in keywords):
                matched.append(q)
        return matched


DEFAULT_STRATEGIES: List[ResolutionStrategy] = [
    DirectMatchStrategy(),
    EquivalentIdStrategy(),
    NormalizedNameStrategy(),
    KeywordStrategy(),
]


@dataclass
class Resolution:
    """
    Outcome of resolving one category.

    Attributes:
        questions: Resolved questions ordered by order_index
        strategy: Name of the strategy that matched, or None
    """
    questions: List[Question] = field(default_factory=list)
    strategy: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.strategy is not None


class QuestionResolver:
    """
    Runs the resolution strategies in order.

    Args:
        strategies: Ordered strategy chain (defaults to all four stages)
    """

    def __init__(self, strategies: Optional[Sequence[ResolutionStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)

    def resolve(
        self,
        category: Category,
        questions: Sequence[Question],
        categories: Sequence[Category],
    ) -> Resolution:
        """
        Resolve the question set of a category.

        Args:
            category: Category to resolve
            questions: All questions in the catalog
            categories: All categories in the catalog

        Returns:
            Resolution with the questions of the first matching stage
        """
        for strategy in self.strategies:
            matched = strategy.match(category, questions, categories)
            if matched:
                if strategy.name != DirectMatchStrategy.name:
                    logger.info(
                        f"Resolved {len(matched)} questions for '{category.name}' "
                        f"via legacy strategy '{strategy.name}'"
                    )
                else:
                    logger.debug(f"Resolved {len(matched)} questions for '{category.name}' via '{strategy.name}'")
                return Resolution(questions=sort_by_order_index(matched), strategy=strategy.name)

            logger.debug(f"Strategy '{strategy.name}' found no questions for '{category.name}'")

        logger.debug(f"No questions resolved for '{category.name}' ({category.id})")
        return Resolution()


_default_resolver = QuestionResolver()


def resolve_questions(
    category: Category,
    questions: Sequence[Question],
    categories: Sequence[Category],
    resolver: Optional[QuestionResolver] = None,
) -> List[Question]:
    """Resolved questions of ``category`` ordered by order_index ([] if none)."""
    return (resolver or _default_resolver).resolve(category, questions, categories).questions


def sample_fallback_questions(
    category: Category,
    questions: Sequence[Question],
    limit: int = 5,
) -> List[Question]:
    """
    First ``limit`` questions of the whole catalog.

    Only for display when a category resolves to nothing and fallback
    sampling is switched on; these questions do not belong to the category.
    """
    sample = list(questions[:limit])
    logger.warning(
        f"Data quality: category '{category.name}' ({category.id}) resolved to no questions; "
        f"showing {len(sample)} sample questions instead"
    )
    return sample
