"""
Pydantic schemas for the SWAT readiness scoring API.

Defines the catalog records (categories, questions), assessment data,
computed progress/report structures and the request/response bodies
of the HTTP API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.rounding import completion_percentage

from .enums import AssessmentStatus, QuestionType, ReportType


class Category(BaseModel):
    """A named grouping of questions, shown as one step of the questionnaire."""
    id: str
    name: str
    description: Optional[str] = None
    order_index: int = 0


class Question(BaseModel):
    """
    A questionnaire question.

    ``category_id`` is the primary link to a Category, but legacy catalogs
    may point at an alternate or orphaned category id.
    """
    id: str
    category_id: str
    text: str
    description: Optional[str] = None
    order_index: Optional[int] = None
    question_type: QuestionType = QuestionType.BOOLEAN
    validation_rules: Optional[Dict[str, Any]] = None
    impacts_tier: bool = True


class AssessmentResponse(BaseModel):
    """An answer to one question within one assessment."""
    id: Optional[str] = None
    assessment_id: str
    question_id: str
    response: Optional[bool] = None
    text_response: Optional[str] = None
    numeric_response: Optional[float] = None
    select_response: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None


class Assessment(BaseModel):
    """An agency assessment with its cached, server-persisted progress."""
    id: str
    agency_id: str
    agency_name: Optional[str] = None
    name: Optional[str] = None
    assessment_type: ReportType = ReportType.TIER_ASSESSMENT
    status: AssessmentStatus = AssessmentStatus.IN_PROGRESS
    progress_percentage: int = Field(0, ge=0, le=100)
    tier_level: Optional[int] = Field(None, ge=1, le=4)
    started_at: Optional[datetime] = None


class CachedResponse(BaseModel):
    """Local cache entry for a question, possibly not yet confirmed by the server."""
    response: Optional[bool] = None
    text_response: Optional[str] = None
    numeric_response: Optional[float] = None
    select_response: Optional[str] = None
    notes: Optional[str] = None
    response_id: Optional[str] = None


class CompletionStatus(BaseModel):
    """Answered vs total questions for a category (or a whole assessment)."""
    total: int = Field(0, ge=0)
    completed: int = Field(0, ge=0)

    @property
    def percentage(self) -> int:
        """Completion percentage; an empty category is 0%."""
        return completion_percentage(self.completed, self.total)


class ReportItem(BaseModel):
    """One answered question as it appears in a report."""
    question_text: str
    response_text: str
    notes: str = ""


class OrderedSection(BaseModel):
    """A report section: one category and its answered questions, in order."""
    category_name: str
    items: List[ReportItem] = Field(default_factory=list)


class Report(BaseModel):
    """A generated report record."""
    id: str
    assessment_id: str
    report_type: ReportType
    tier_level: Optional[int] = None
    report_url: str
    filename: str
    generated_at: datetime
    summary: str = ""


# ---------------------------------------------------------------------------
# API bodies
# ---------------------------------------------------------------------------

class ResponseUpsertRequest(BaseModel):
    """Body of POST /assessments/{id}/responses."""
    question_id: str = Field(..., min_length=1)
    response: Optional[bool] = None
    text_response: Optional[str] = Field(None, max_length=5000)
    numeric_response: Optional[float] = None
    select_response: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("text_response", "select_response", "notes")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        """Trim surrounding whitespace from free-text fields."""
        return v.strip() if v is not None else v


class ProgressUpdateRequest(BaseModel):
    """Body of PATCH /assessments/{id}/progress."""
    progress_percentage: int = Field(..., ge=0, le=100)


class StepProgress(BaseModel):
    """Completion of one questionnaire step."""
    category: Category
    group: str
    total: int
    completed: int
    percentage: int


class StepsResponse(BaseModel):
    """Ordered questionnaire steps (tier categories first, then gap)."""
    assessment_id: str
    steps: List[StepProgress]


class ResolvedQuestionsResponse(BaseModel):
    """Questions resolved for one category and the strategy that found them."""
    category: Category
    strategy: Optional[str] = Field(None, description="Name of the matching strategy, or None")
    questions: List[Question]


class ProgressResponse(BaseModel):
    """Computed, persisted and reconciled progress for an assessment."""
    assessment_id: str
    computed: int = Field(..., ge=0, le=100)
    persisted: int = Field(..., ge=0, le=100)
    reconciled: int = Field(..., ge=0, le=100)
    total_questions: int
    answered_questions: int


class SectionsResponse(BaseModel):
    """Report section preview."""
    assessment_id: str
    report_type: ReportType
    sections: List[OrderedSection]


class HealthResponse(BaseModel):
    """Response schema for GET /health."""
    status: str = Field(default="healthy", description="Overall health status")
    version: str = Field(..., description="API version")
    storage_backend: str = Field(..., description="Configured storage backend")
    catalog_cache: Dict[str, Any] = Field(default_factory=dict, description="Catalog cache statistics")


class ErrorResponse(BaseModel):
    """Standardized error response."""
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict] = Field(None, description="Additional error details")
    request_id: Optional[str] = Field(None, description="Client request ID if provided")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "HTTP_404",
                "message": "Assessment not found",
                "details": None,
                "request_id": "abc-123",
            }
        }
    )


class CatalogResponse(BaseModel):
    """Full question catalog."""
    categories: List[Category]
    questions: List[Question]
