"""
Category completion.

Counts answered vs total questions for a category from two sources:
server-confirmed responses and the client's local response cache. The
local cache can hold optimistic answers the server has not confirmed yet,
so it adds to the server count but never counts a question twice.
"""

import logging
from typing import Mapping, Optional, Sequence, Set

from models.schemas import (
    AssessmentResponse,
    CachedResponse,
    Category,
    CompletionStatus,
    Question,
)
from evaluators.resolver import QuestionResolver, resolve_questions

logger = logging.getLogger(__name__)


def answered_question_ids(
    assessment_id: str,
    server_responses: Sequence[AssessmentResponse],
) -> Set[str]:
    """Question ids with a server response for this assessment."""
    return {r.question_id for r in server_responses if r.assessment_id == assessment_id}


def count_completed(
    questions: Sequence[Question],
    server_answered: Set[str],
    local_cache: Optional[Mapping[str, CachedResponse]] = None,
) -> int:
    """
    Count answered questions.

    Server responses are counted first; a local cache entry only counts for
    a question the server has not answered.

    Args:
        questions: Resolved questions of a category
        server_answered: Question ids answered on the server
        local_cache: Local cache entries keyed by question id

    Returns:
        Number of answered questions (0 <= n <= len(questions))
    """
    completed = sum(1 for q in questions if q.id in server_answered)

    if local_cache:
        local_only = sum(
            1 for q in questions
            if q.id not in server_answered and q.id in local_cache
        )
        if local_only:
            logger.debug(f"Counted {local_only} unconfirmed local answers")
        completed += local_only

    return completed


def compute_completion(
    category: Category,
    assessment_id: str,
    questions: Sequence[Question],
    categories: Sequence[Category],
    server_responses: Sequence[AssessmentResponse],
    local_cache: Optional[Mapping[str, CachedResponse]] = None,
    resolver: Optional[QuestionResolver] = None,
) -> CompletionStatus:
    """
    Compute completion for one category of one assessment.

    Args:
        category: Category to score
        assessment_id: Assessment being scored; other assessments' responses are ignored
        questions: All catalog questions
        categories: All catalog categories
        server_responses: Server-confirmed responses
        local_cache: Local cache for this assessment, keyed by question id
        resolver: Optional resolver (defaults to the standard strategy chain)

    Returns:
        CompletionStatus; a category with no questions is {total: 0, completed: 0}
    """
    category_questions = resolve_questions(category, questions, categories, resolver)
    if not category_questions:
        return CompletionStatus(total=0, completed=0)

    completed = count_completed(
        category_questions,
        answered_question_ids(assessment_id, server_responses),
        local_cache,
    )

    return CompletionStatus(total=len(category_questions), completed=completed)
