"""
Tier scoring and report summaries.

Computes the tier level of an assessment and assembles the summary,
recommendations and filename of generated reports. All logic is
deterministic with documented rules.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from models.enums import (
    LOWEST_TIER_LEVEL,
    MAX_RECOMMENDATIONS,
    REPORT_FILENAME_PREFIXES,
    ReportType,
    TIER_THRESHOLDS,
)
from models.schemas import Assessment, AssessmentResponse, Category, Question
from evaluators.classifier import classify
from evaluators.resolver import QuestionResolver, resolve_questions
from utils.rounding import share_percentage


@dataclass
class TierScoreResult:
    """
    Result of tier scoring.

    Attributes:
        tier_level: Tier 1 (highest) to 4
        positive: Tier-impacting questions answered "Yes"
        total: Tier-impacting questions
        percentage: Unrounded share of positive answers
        unmet_questions: Tier-impacting questions not answered "Yes", in report order
    """
    tier_level: int
    positive: int
    total: int
    percentage: float
    unmet_questions: List[Question] = field(default_factory=list)


def tier_impacting_questions(
    categories: Sequence[Category],
    questions: Sequence[Question],
    resolver: Optional[QuestionResolver] = None,
) -> List[Question]:
    """
    Questions that count toward the tier level.

    These are the questions resolved into Tier Assessment categories
    whose impacts_tier flag is set, in questionnaire order. A question
    resolved into two categories is counted once.
    """
    seen = set()
    result = []
    for category in classify(categories).tier_categories:
        for q in resolve_questions(category, questions, categories, resolver):
            if q.impacts_tier and q.id not in seen:
                seen.add(q.id)
                result.append(q)
    return result


def tier_level_for(percentage: float) -> int:
    """
    Map the share of positive answers to a tier level.

    Deterministic mapping:
        >= 90: Tier 1
        >= 75: Tier 2
        >= 50: Tier 3
        below: Tier 4
    """
    for minimum, level in TIER_THRESHOLDS:
        if percentage >= minimum:
            return level
    return LOWEST_TIER_LEVEL


def compute_tier_score(
    categories: Sequence[Category],
    questions: Sequence[Question],
    responses: Sequence[AssessmentResponse],
    resolver: Optional[QuestionResolver] = None,
) -> TierScoreResult:
    """
    Compute the tier level of an assessment.

    Formula:
        percentage = 100 × (tier-impacting questions answered Yes) / (tier-impacting questions)

    With no tier-impacting questions the percentage is 0 and the result is
    Tier 4.

    Args:
        categories: All catalog categories
        questions: All catalog questions
        responses: Responses of the assessment

    Returns:
        TierScoreResult
    """
    impacting = tier_impacting_questions(categories, questions, resolver)
    yes_ids = {r.question_id for r in responses if r.response is True}

    positive = [q for q in impacting if q.id in yes_ids]
    unmet = [q for q in impacting if q.id not in yes_ids]
    percentage = share_percentage(len(positive), len(impacting))

    return TierScoreResult(
        tier_level=tier_level_for(percentage),
        positive=len(positive),
        total=len(impacting),
        percentage=percentage,
        unmet_questions=unmet,
    )


def identify_recommendations(score: TierScoreResult) -> List[str]:
    """
    Up to three unmet capability requirements to work on.

    Returns an empty list for Tier 1.
    """
    if score.tier_level <= 1:
        return []
    return [q.text for q in score.unmet_questions[:MAX_RECOMMENDATIONS]]


def generate_report_summary(
    report_type: ReportType,
    assessment: Assessment,
    score: Optional[TierScoreResult] = None,
    generated_on: Optional[date] = None,
) -> str:
    """
    Plain-text summary printed at the top of a report.

    Args:
        report_type: Report being generated
        assessment: Assessment the report is for
        score: Tier score (tier reports only)
        generated_on: Report date (defaults to today)

    Returns:
        Summary text
    """
    agency = assessment.agency_name or "Unknown Agency"
    report_date = (generated_on or date.today()).strftime("%B %d, %Y")

    if ReportType(report_type) is ReportType.GAP_ANALYSIS:
        return (
            f"SWAT Gap Analysis Report\n"
            f"Prepared for: {agency}\n"
            f"Date: {report_date}\n\n"
            f"This {agency} SWAT Gap Analysis Report contains only the questions "
            f"and answers recorded for the gap analysis categories."
        )

    if score is None:
        raise ValueError("A tier score is required for a tier assessment summary")

    lines = [
        "SWAT Team Tier Assessment Report",
        f"Agency: {agency}",
        f"Tier Classification: {score.tier_level}",
        f"Assessment Date: {report_date}",
        f"Completion: {assessment.progress_percentage}%",
        "",
        "Summary:",
        (
            f"This assessment has determined that the {agency} SWAT team meets the criteria "
            f"for a Tier {score.tier_level} classification. The team has demonstrated compliance "
            f"with {score.positive} out of {score.total} critical capability requirements."
        ),
        "",
        "Recommendations:",
    ]

    recommendations = identify_recommendations(score)
    if recommendations:
        lines.append("To achieve a higher tier classification, focus on the following areas:")
        lines.extend(f"- {text}" for text in recommendations)
    else:
        lines.append(
            "Maintain current capabilities and continue regular training to sustain Tier 1 status."
        )

    return "\n".join(lines)


def generate_report_filename(
    assessment: Assessment,
    report_type: ReportType,
    tier_level: Optional[int] = None,
    generated_on: Optional[date] = None,
) -> str:
    """
    Download filename of a report.

    Format:
        <TierAssessment|GapAnalysis>-<Agency-Name>[-Tier<n>]-<YYYY-MM-DD>.pdf

    Examples:
        >>> generate_report_filename(assessment, ReportType.TIER_ASSESSMENT, 2, date(2024, 5, 1))
        'TierAssessment-Metro-SWAT-Tier2-2024-05-01.pdf'
    """
    prefix = REPORT_FILENAME_PREFIXES[ReportType(report_type)]
    agency = re.sub(r"\s+", "-", (assessment.agency_name or "Agency").strip())
    # Keep filenames filesystem-safe
    agency = re.sub(r"[^A-Za-z0-9._-]", "", agency) or "Agency"
    tier_part = f"-Tier{tier_level}" if tier_level else ""
    day = (generated_on or date.today()).isoformat()
    return f"{prefix}-{agency}{tier_part}-{day}.pdf"
