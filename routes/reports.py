"""
Report routes: section preview, PDF generation and download.
"""

import logging
import uuid
from datetime import date, datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse

from config import settings
from adapters.pdf_renderer import render_report_pdf
from adapters.storage import AssessmentRepository, get_repository
from evaluators.scoring import (
    compute_tier_score,
    generate_report_filename,
    generate_report_summary,
)
from evaluators.sections import build_sections
from models.enums import REPORT_TITLES, ReportType
from models.schemas import Report, SectionsResponse
from routes.questionnaire import get_assessment_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])

REPORT_LABELS = {
    ReportType.TIER_ASSESSMENT: "tier assessment",
    ReportType.GAP_ANALYSIS: "gap analysis",
}


def minimum_progress(report_type: ReportType) -> int:
    """Persisted progress an assessment needs before a report can be generated."""
    if report_type is ReportType.TIER_ASSESSMENT:
        return settings.tier_report_min_progress
    return settings.gap_report_min_progress


def report_path(report_id: str) -> Path:
    return Path(settings.reports_dir) / f"{report_id}.pdf"


@router.get("/{assessment_id}/sections", response_model=SectionsResponse)
def get_sections(
    assessment_id: str,
    report_type: ReportType = Query(ReportType.TIER_ASSESSMENT),
    repo: AssessmentRepository = Depends(get_repository),
):
    """Ordered report sections without rendering a PDF"""
    get_assessment_or_404(repo, assessment_id)
    sections = build_sections(
        report_type,
        repo.list_categories(),
        repo.list_questions(),
        repo.list_responses(assessment_id),
    )
    return SectionsResponse(assessment_id=assessment_id, report_type=report_type, sections=sections)


def generate_report(repo: AssessmentRepository, assessment_id: str, report_type: ReportType) -> Report:
    """
    Generate, store and record a report.

    Raises:
        HTTPException: 404 for an unknown assessment, 400 when the persisted
            progress is below the report's minimum
    """
    assessment = get_assessment_or_404(repo, assessment_id)
    label = REPORT_LABELS[report_type]

    required = minimum_progress(report_type)
    if assessment.progress_percentage < required:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Assessment must be at least {required}% complete to generate a {label} report "
                f"(currently {assessment.progress_percentage}%)"
            ),
        )

    categories = repo.list_categories()
    questions = repo.list_questions()
    responses = repo.list_responses(assessment_id)

    score = None
    tier_level = None
    if report_type is ReportType.TIER_ASSESSMENT:
        score = compute_tier_score(categories, questions, responses)
        tier_level = score.tier_level
        assessment = repo.update_assessment(assessment_id, tier_level=tier_level)
        logger.info(
            f"Assessment {assessment_id}: tier {tier_level} "
            f"({score.positive}/{score.total} tier requirements met)"
        )

    sections = build_sections(report_type, categories, questions, responses)

    today = date.today()
    header_lines = [
        f"Agency: {assessment.agency_name or 'Unknown Agency'}",
        f"Date: {today.strftime('%B %d, %Y')}",
    ]
    if tier_level is not None:
        header_lines.append(f"Tier Level: {tier_level}")

    summary = generate_report_summary(report_type, assessment, score, today)
    pdf = render_report_pdf(REPORT_TITLES[report_type], header_lines, sections, summary)

    report_id = str(uuid.uuid4())
    path = report_path(report_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf)

    report = repo.create_report(Report(
        id=report_id,
        assessment_id=assessment_id,
        report_type=report_type,
        tier_level=tier_level,
        report_url=f"/reports/{report_id}/download",
        filename=generate_report_filename(assessment, report_type, tier_level, today),
        generated_at=datetime.now(timezone.utc),
        summary=summary,
    ))
    logger.info(f"Generated {label} report {report_id} ({len(sections)} sections, {len(pdf)} bytes)")
    return report


@router.post(
    "/{assessment_id}/generate-tier-report",
    response_model=Report,
    status_code=status.HTTP_201_CREATED,
)
def generate_tier_report(assessment_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Generate the Tier Assessment PDF report"""
    return generate_report(repo, assessment_id, ReportType.TIER_ASSESSMENT)


@router.post(
    "/{assessment_id}/generate-gap-report",
    response_model=Report,
    status_code=status.HTTP_201_CREATED,
)
def generate_gap_report(assessment_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Generate the Gap Analysis PDF report"""
    return generate_report(repo, assessment_id, ReportType.GAP_ANALYSIS)


@router.get("/{report_id}/download")
def download_report(report_id: str, repo: AssessmentRepository = Depends(get_repository)):
    """Download a generated report"""
    report = repo.get_report(report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")

    path = report_path(report.id)
    if not path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report file not found")

    return FileResponse(path, media_type="application/pdf", filename=report.filename)
