"""
Report section building.

Produces the ordered (category -> question -> response) sections of a
Tier Assessment or Gap Analysis report. The PDF renderer draws sections
exactly in this order and does no filtering of its own.
"""

import logging
from typing import Dict, List, Optional, Sequence

from models.enums import NOT_SPECIFIED, ReportType
from models.schemas import (
    AssessmentResponse,
    Category,
    OrderedSection,
    Question,
    ReportItem,
)
from evaluators.classifier import classify
from evaluators.resolver import QuestionResolver, resolve_questions

logger = logging.getLogger(__name__)


def format_response_value(response: AssessmentResponse) -> str:
    """
    Display text of a response.

    First non-empty of: boolean ("Yes"/"No"), text, numeric, select,
    else "Not specified".
    """
    if response.response is True:
        return "Yes"
    if response.response is False:
        return "No"
    if response.text_response:
        return response.text_response
    if response.numeric_response is not None:
        value = response.numeric_response
        # 3.0 -> "3", matching how whole numbers were entered
        if float(value).is_integer():
            return str(int(value))
        return str(value)
    if response.select_response:
        return response.select_response
    return NOT_SPECIFIED


def report_categories(report_type: ReportType, categories: Sequence[Category]) -> List[Category]:
    """Categories included in a report type, sorted by order_index."""
    classified = classify(categories)
    if ReportType(report_type) is ReportType.TIER_ASSESSMENT:
        return classified.tier_categories
    return classified.gap_categories


def build_sections(
    report_type: ReportType,
    categories: Sequence[Category],
    questions: Sequence[Question],
    responses: Sequence[AssessmentResponse],
    resolver: Optional[QuestionResolver] = None,
) -> List[OrderedSection]:
    """
    Build the ordered sections of a report.

    Unanswered questions are skipped and categories without answered
    questions are dropped.

    Args:
        report_type: tier-assessment or gap-analysis
        categories: All catalog categories
        questions: All catalog questions
        responses: Responses of the assessment being reported

    Returns:
        Sections in category order, each with items in question order
    """
    by_question: Dict[str, AssessmentResponse] = {}
    for r in responses:
        by_question.setdefault(r.question_id, r)

    sections: List[OrderedSection] = []
    for category in report_categories(report_type, categories):
        items = []
        for question in resolve_questions(category, questions, categories, resolver):
            response = by_question.get(question.id)
            if response is None:
                continue
            items.append(ReportItem(
                question_text=question.text,
                response_text=format_response_value(response),
                notes=response.notes or "",
            ))

        if not items:
            logger.debug(f"No answered questions in '{category.name}', section dropped")
            continue

        sections.append(OrderedSection(category_name=category.name, items=items))

    logger.info(f"Built {len(sections)} sections for {ReportType(report_type).value} report")
    return sections
