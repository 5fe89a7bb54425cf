"""Models package for SWAT readiness scoring."""

from .schemas import (
    Category,
    Question,
    AssessmentResponse,
    Assessment,
    CachedResponse,
    CompletionStatus,
    ReportItem,
    OrderedSection,
    Report,
    HealthResponse,
    ErrorResponse,
)
from .enums import (
    QuestionType,
    AssessmentStatus,
    ReportType,
    AssessmentGroup,
    TIER_CATEGORY_NAMES,
    GAP_CATEGORY_NAMES,
)

__all__ = [
    "Category",
    "Question",
    "AssessmentResponse",
    "Assessment",
    "CachedResponse",
    "CompletionStatus",
    "ReportItem",
    "OrderedSection",
    "Report",
    "HealthResponse",
    "ErrorResponse",
    "QuestionType",
    "AssessmentStatus",
    "ReportType",
    "AssessmentGroup",
    "TIER_CATEGORY_NAMES",
    "GAP_CATEGORY_NAMES",
]
