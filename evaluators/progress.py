"""
Overall assessment progress.

Aggregates category completion across every Tier Assessment and Gap
Analysis category into one percentage, and reconciles it with the
progress_percentage persisted on the assessment.
"""

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

from models.enums import AssessmentGroup
from models.schemas import (
    AssessmentResponse,
    CachedResponse,
    Category,
    CompletionStatus,
    Question,
)
from evaluators.classifier import classify
from evaluators.completion import compute_completion
from evaluators.resolver import QuestionResolver
from utils.rounding import completion_percentage

logger = logging.getLogger(__name__)


@dataclass
class CategoryProgress:
    """Completion of one questionnaire step."""
    category: Category
    group: AssessmentGroup
    completion: CompletionStatus


def category_progress(
    categories: Sequence[Category],
    assessment_id: str,
    questions: Sequence[Question],
    server_responses: Sequence[AssessmentResponse],
    local_cache: Optional[Mapping[str, CachedResponse]] = None,
    resolver: Optional[QuestionResolver] = None,
) -> List[CategoryProgress]:
    """
    Completion of every questionnaire step, tier categories first.

    Unclassified categories are not steps and are left out.
    """
    classified = classify(categories)
    steps = [(c, AssessmentGroup.TIER) for c in classified.tier_categories]
    steps += [(c, AssessmentGroup.GAP) for c in classified.gap_categories]

    return [
        CategoryProgress(
            category=category,
            group=group,
            completion=compute_completion(
                category,
                assessment_id,
                questions,
                categories,
                server_responses,
                local_cache,
                resolver,
            ),
        )
        for category, group in steps
    ]


def overall_completion(steps: Sequence[CategoryProgress]) -> CompletionStatus:
    """Sum of total and completed over all steps."""
    return CompletionStatus(
        total=sum(s.completion.total for s in steps),
        completed=sum(s.completion.completed for s in steps),
    )


def overall_progress(
    categories: Sequence[Category],
    assessment_id: str,
    questions: Sequence[Question],
    server_responses: Sequence[AssessmentResponse],
    local_cache: Optional[Mapping[str, CachedResponse]] = None,
    resolver: Optional[QuestionResolver] = None,
) -> int:
    """
    Overall completion percentage of an assessment.

    Formula:
        round_half_up(100 × Σcompleted / Σtotal), or 0 when Σtotal is 0

    Returns:
        Percentage as integer (0-100)
    """
    steps = category_progress(
        categories, assessment_id, questions, server_responses, local_cache, resolver
    )
    totals = overall_completion(steps)
    return completion_percentage(totals.completed, totals.total)


def reconcile_progress(local_percentage: int, persisted_percentage: Optional[int]) -> int:
    """
    Progress to display.

    The locally computed value wins when it is greater than zero, since it
    includes answers not yet confirmed by the server. Otherwise the
    server-persisted progress_percentage is used.

    Args:
        local_percentage: Percentage computed from server responses + local cache
        persisted_percentage: Assessment.progress_percentage (may be None)

    Returns:
        Percentage to display (0-100)
    """
    if local_percentage > 0:
        return min(local_percentage, 100)
    return max(0, min(persisted_percentage or 0, 100))
