"""
Storage adapter.

Reads the question catalog, assessments and responses, and writes
response upserts, progress updates and report records. Two backends
share one interface: an in-memory store (development and tests) and
MongoDB. Catalog reads go through a TTL cache.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from config import settings
from models.schemas import (
    Assessment,
    AssessmentResponse,
    Category,
    Question,
    Report,
    ResponseUpsertRequest,
)
from utils.cache import cache_result, clear_cache

logger = logging.getLogger(__name__)

CATALOG_CACHE = "catalog"

# Fields written by an upsert; last write wins for all of them.
RESPONSE_VALUE_FIELDS = (
    "response",
    "text_response",
    "numeric_response",
    "select_response",
    "notes",
)


class AssessmentNotFoundError(LookupError):
    """Raised when an assessment id does not exist."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class AssessmentRepository(ABC):
    """
    Storage interface.

    Subclasses implement the ``_load_*`` catalog readers and the
    assessment/response/report operations. ``list_categories`` and
    ``list_questions`` are cached per repository instance.
    """

    def __init__(self):
        self.cache_namespace = f"{type(self).__name__}:{_new_id()}"

    # -- catalog ---------------------------------------------------------

    @cache_result(
        CATALOG_CACHE,
        maxsize=settings.catalog_cache_max_size,
        ttl=settings.catalog_cache_ttl_seconds,
        key_prefix="categories_",
    )
    def list_categories(self) -> List[Category]:
        return self._load_categories()

    @cache_result(
        CATALOG_CACHE,
        maxsize=settings.catalog_cache_max_size,
        ttl=settings.catalog_cache_ttl_seconds,
        key_prefix="questions_",
    )
    def list_questions(self) -> List[Question]:
        return self._load_questions()

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.list_categories() if c.id == category_id), None)

    def invalidate_catalog(self) -> None:
        """Drop cached catalog reads after an administrative edit."""
        clear_cache(CATALOG_CACHE)

    @abstractmethod
    def _load_categories(self) -> List[Category]:
        ...

    @abstractmethod
    def _load_questions(self) -> List[Question]:
        ...

    # -- assessments and responses ----------------------------------------

    @abstractmethod
    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        ...

    @abstractmethod
    def update_assessment(self, assessment_id: str, **fields: Any) -> Assessment:
        ...

    @abstractmethod
    def list_responses(self, assessment_id: str) -> List[AssessmentResponse]:
        ...

    @abstractmethod
    def upsert_response(self, assessment_id: str, data: ResponseUpsertRequest) -> AssessmentResponse:
        """Create the response for (assessment_id, question_id) or overwrite the existing one."""

    # -- reports ------------------------------------------------------------

    @abstractmethod
    def create_report(self, report: Report) -> Report:
        ...

    @abstractmethod
    def get_report(self, report_id: str) -> Optional[Report]:
        ...


class InMemoryRepository(AssessmentRepository):
    """Process-local storage for development and tests."""

    def __init__(self):
        super().__init__()
        self.categories: Dict[str, Category] = {}
        self.questions: Dict[str, Question] = {}
        self.assessments: Dict[str, Assessment] = {}
        self.responses: Dict[str, AssessmentResponse] = {}
        self.reports: Dict[str, Report] = {}

    # Catalog management (administrative edits)

    def add_category(self, category: Category) -> Category:
        self.categories[category.id] = category
        self.invalidate_catalog()
        return category

    def add_question(self, question: Question) -> Question:
        self.questions[question.id] = question
        self.invalidate_catalog()
        return question

    def add_assessment(self, assessment: Assessment) -> Assessment:
        self.assessments[assessment.id] = assessment
        return assessment

    def _load_categories(self) -> List[Category]:
        return list(self.categories.values())

    def _load_questions(self) -> List[Question]:
        return list(self.questions.values())

    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        return self.assessments.get(assessment_id)

    def update_assessment(self, assessment_id: str, **fields: Any) -> Assessment:
        assessment = self.assessments.get(assessment_id)
        if assessment is None:
            raise AssessmentNotFoundError(assessment_id)
        updated = assessment.model_copy(update=fields)
        self.assessments[assessment_id] = updated
        return updated

    def list_responses(self, assessment_id: str) -> List[AssessmentResponse]:
        return [r for r in self.responses.values() if r.assessment_id == assessment_id]

    def upsert_response(self, assessment_id: str, data: ResponseUpsertRequest) -> AssessmentResponse:
        values = {name: getattr(data, name) for name in RESPONSE_VALUE_FIELDS}
        existing = next(
            (r for r in self.list_responses(assessment_id) if r.question_id == data.question_id),
            None,
        )
        if existing is not None:
            logger.debug(f"Updating response {existing.id} for question {data.question_id}")
            saved = existing.model_copy(update={**values, "updated_at": _now()})
        else:
            saved = AssessmentResponse(
                id=_new_id(),
                assessment_id=assessment_id,
                question_id=data.question_id,
                updated_at=_now(),
                **values,
            )
        self.responses[saved.id] = saved
        return saved

    def create_report(self, report: Report) -> Report:
        self.reports[report.id] = report
        return report

    def get_report(self, report_id: str) -> Optional[Report]:
        return self.reports.get(report_id)


class MongoRepository(AssessmentRepository):
    """
    MongoDB storage.

    Documents store the model fields with ``_id`` holding the record id.
    """

    def __init__(self, db=None):
        super().__init__()
        from database import get_db
        self.db = db or get_db()

    @staticmethod
    def _from_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return data

    def _load_categories(self) -> List[Category]:
        docs = self.db.get_collection("question_categories").find()
        return [Category(**self._from_doc(d)) for d in docs]

    def _load_questions(self) -> List[Question]:
        docs = self.db.get_collection("questions").find()
        return [Question(**self._from_doc(d)) for d in docs]

    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        doc = self.db.get_collection("assessments").find_one({"_id": assessment_id})
        return Assessment(**self._from_doc(doc)) if doc else None

    def update_assessment(self, assessment_id: str, **fields: Any) -> Assessment:
        update = {k: (v.value if hasattr(v, "value") else v) for k, v in fields.items()}
        result = self.db.get_collection("assessments").update_one(
            {"_id": assessment_id}, {"$set": update}
        )
        if result.matched_count == 0:
            raise AssessmentNotFoundError(assessment_id)
        return self.get_assessment(assessment_id)

    def list_responses(self, assessment_id: str) -> List[AssessmentResponse]:
        docs = self.db.get_collection("assessment_responses").find({"assessment_id": assessment_id})
        return [AssessmentResponse(**self._from_doc(d)) for d in docs]

    def upsert_response(self, assessment_id: str, data: ResponseUpsertRequest) -> AssessmentResponse:
        responses = self.db.get_collection("assessment_responses")
        values = {name: getattr(data, name) for name in RESPONSE_VALUE_FIELDS}
        values["updated_at"] = _now()

        responses.update_one(
            {"assessment_id": assessment_id, "question_id": data.question_id},
            {"$set": values, "$setOnInsert": {"_id": _new_id()}},
            upsert=True,
        )
        doc = responses.find_one({"assessment_id": assessment_id, "question_id": data.question_id})
        return AssessmentResponse(**self._from_doc(doc))

    def create_report(self, report: Report) -> Report:
        doc = report.model_dump(mode="json", exclude={"id"})
        doc["_id"] = report.id
        self.db.get_collection("reports").insert_one(doc)
        return report

    def get_report(self, report_id: str) -> Optional[Report]:
        doc = self.db.get_collection("reports").find_one({"_id": report_id})
        return Report(**self._from_doc(doc)) if doc else None


_repository: Optional[AssessmentRepository] = None


def get_repository() -> AssessmentRepository:
    """
    Get the global repository for the configured backend.

    FastAPI routes depend on this; tests override it.
    """
    global _repository
    if _repository is None:
        if settings.storage_backend == "mongo":
            _repository = MongoRepository()
        elif settings.storage_backend == "memory":
            _repository = InMemoryRepository()
        else:
            raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
        logger.info(f"Using {settings.storage_backend} storage backend")
    return _repository
