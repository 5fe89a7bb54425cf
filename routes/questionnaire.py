"""
Questionnaire routes: catalog, steps, resolved questions, responses and progress.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from config import settings
from adapters.storage import AssessmentNotFoundError, AssessmentRepository, get_repository
from evaluators.progress import category_progress, overall_completion, reconcile_progress
from evaluators.resolver import QuestionResolver, sample_fallback_questions
from models.schemas import (
    Assessment,
    AssessmentResponse,
    CatalogResponse,
    ProgressResponse,
    ProgressUpdateRequest,
    ResolvedQuestionsResponse,
    ResponseUpsertRequest,
    StepProgress,
    StepsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Questionnaire"])

FALLBACK_STRATEGY = "fallback_sample"


def get_assessment_or_404(repo: AssessmentRepository, assessment_id: str) -> Assessment:
    assessment = repo.get_assessment(assessment_id)
    if assessment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")
    return assessment


def compute_assessment_progress(repo: AssessmentRepository, assessment_id: str):
    """Per-step completion and overall totals from server-side responses."""
    steps = category_progress(
        repo.list_categories(),
        assessment_id,
        repo.list_questions(),
        repo.list_responses(assessment_id),
    )
    return steps, overall_completion(steps)


# ============ CATALOG ============

@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(repo: AssessmentRepository = Depends(get_repository)):
    """All categories and questions"""
    return CatalogResponse(categories=repo.list_categories(), questions=repo.list_questions())


# ============ ASSESSMENTS ============

@router.get("/assessments/{assessment_id}", response_model=Assessment)
def get_assessment(assessment_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Get an assessment"""
    return get_assessment_or_404(repo, assessment_id)


@router.get("/assessments/{assessment_id}/steps", response_model=StepsResponse)
def get_steps(assessment_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Questionnaire steps (tier categories, then gap) with completion of each"""
    get_assessment_or_404(repo, assessment_id)
    steps, _ = compute_assessment_progress(repo, assessment_id)

    return StepsResponse(
        assessment_id=assessment_id,
        steps=[
            StepProgress(
                category=s.category,
                group=s.group.value,
                total=s.completion.total,
                completed=s.completion.completed,
                percentage=s.completion.percentage,
            )
            for s in steps
        ],
    )


@router.get(
    "/assessments/{assessment_id}/categories/{category_id}/questions",
    response_model=ResolvedQuestionsResponse,
)
def get_category_questions(
    assessment_id: str,
    category_id: str,
    repo: AssessmentRepository = Depends(get_repository),
):
    """Questions resolved for a category and the strategy that found them"""
    get_assessment_or_404(repo, assessment_id)

    category = repo.get_category(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    questions = repo.list_questions()
    resolution = QuestionResolver().resolve(category, questions, repo.list_categories())

    if not resolution.resolved and settings.enable_fallback_sampling:
        sample = sample_fallback_questions(category, questions, settings.fallback_sample_size)
        return ResolvedQuestionsResponse(category=category, strategy=FALLBACK_STRATEGY, questions=sample)

    return ResolvedQuestionsResponse(
        category=category,
        strategy=resolution.strategy,
        questions=resolution.questions,
    )


# ============ RESPONSES ============

@router.get("/assessments/{assessment_id}/responses", response_model=List[AssessmentResponse])
def list_responses(assessment_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Saved responses of an assessment"""
    get_assessment_or_404(repo, assessment_id)
    return repo.list_responses(assessment_id)


@router.post("/assessments/{assessment_id}/responses", response_model=AssessmentResponse)
def save_response(
    assessment_id: str,
    data: ResponseUpsertRequest,
    repo: AssessmentRepository = Depends(get_repository),
):
    """Create or overwrite the response to a question, then refresh the stored progress"""
    get_assessment_or_404(repo, assessment_id)

    if not any(q.id == data.question_id for q in repo.list_questions()):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    saved = repo.upsert_response(assessment_id, data)

    _, totals = compute_assessment_progress(repo, assessment_id)
    repo.update_assessment(assessment_id, progress_percentage=totals.percentage)
    logger.debug(
        f"Saved response for question {data.question_id}; assessment {assessment_id} "
        f"at {totals.percentage}%"
    )

    return saved


# ============ PROGRESS ============

@router.get("/assessments/{assessment_id}/progress", response_model=ProgressResponse)
def get_progress(assessment_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Computed, persisted and reconciled progress"""
    assessment = get_assessment_or_404(repo, assessment_id)
    _, totals = compute_assessment_progress(repo, assessment_id)

    return ProgressResponse(
        assessment_id=assessment_id,
        computed=totals.percentage,
        persisted=assessment.progress_percentage,
        reconciled=reconcile_progress(totals.percentage, assessment.progress_percentage),
        total_questions=totals.total,
        answered_questions=totals.completed,
    )


@router.patch("/assessments/{assessment_id}/progress", response_model=Assessment)
def update_progress(
    assessment_id: str,
    data: ProgressUpdateRequest,
    repo: AssessmentRepository = Depends(get_repository),
):
    """Store progress_percentage on the assessment"""
    try:
        return repo.update_assessment(assessment_id, progress_percentage=data.progress_percentage)
    except AssessmentNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")
