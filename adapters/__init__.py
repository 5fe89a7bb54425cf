"""Adapters package: storage, local cache, PDF rendering and the API client."""

from .storage import AssessmentRepository, InMemoryRepository, MongoRepository, get_repository
from .local_cache import LocalResponseCache
from .pdf_renderer import render_report_pdf
from .api_client import AssessmentApiClient, ResponseSaveError
from .questionnaire_session import QuestionnaireSession

__all__ = [
    "AssessmentRepository",
    "InMemoryRepository",
    "MongoRepository",
    "get_repository",
    "LocalResponseCache",
    "render_report_pdf",
    "AssessmentApiClient",
    "ResponseSaveError",
    "QuestionnaireSession",
]
