"""
Unit tests for the storage adapter.

The in-memory repository is tested directly; the MongoDB repository is
tested against mocked collections.
"""

from unittest.mock import MagicMock

import pytest

from adapters.storage import AssessmentNotFoundError, InMemoryRepository, MongoRepository
from models.schemas import Assessment, Category, Question, ResponseUpsertRequest


@pytest.fixture
def repo():
    repository = InMemoryRepository()
    repository.add_category(Category(id="c1", name="Mission Profiles"))
    repository.add_question(Question(id="q1", category_id="c1", text="Hostage rescue?"))
    repository.add_assessment(Assessment(id="a1", agency_id="ag1", agency_name="Metro SWAT"))
    return repository


class TestInMemoryRepository:
    """Tests for InMemoryRepository."""

    def test_upsert_creates_then_overwrites(self, repo):
        first = repo.upsert_response("a1", ResponseUpsertRequest(question_id="q1", response=False))
        second = repo.upsert_response("a1", ResponseUpsertRequest(question_id="q1", response=True, notes="Updated"))

        responses = repo.list_responses("a1")
        assert len(responses) == 1
        assert first.id == second.id
        assert responses[0].response is True
        assert responses[0].notes == "Updated"

    def test_responses_scoped_to_assessment(self, repo):
        repo.add_assessment(Assessment(id="a2", agency_id="ag2"))
        repo.upsert_response("a1", ResponseUpsertRequest(question_id="q1", response=True))
        assert repo.list_responses("a2") == []

    def test_update_assessment(self, repo):
        updated = repo.update_assessment("a1", progress_percentage=40)
        assert updated.progress_percentage == 40
        assert repo.get_assessment("a1").progress_percentage == 40

    def test_update_missing_assessment(self, repo):
        with pytest.raises(AssessmentNotFoundError):
            repo.update_assessment("missing", progress_percentage=10)

    def test_catalog_reads_cached_and_invalidated(self, repo):
        assert [q.id for q in repo.list_questions()] == ["q1"]

        repo.questions["q2"] = Question(id="q2", category_id="c1", text="Cached away")
        assert [q.id for q in repo.list_questions()] == ["q1"]

        repo.invalidate_catalog()
        assert [q.id for q in repo.list_questions()] == ["q1", "q2"]

    def test_repositories_do_not_share_cache(self, repo):
        other = InMemoryRepository()
        assert repo.list_categories() != []
        assert other.list_categories() == []

    def test_get_category(self, repo):
        assert repo.get_category("c1").name == "Mission Profiles"
        assert repo.get_category("missing") is None


class TestMongoRepository:
    """Tests for MongoRepository with mocked collections."""

    def _repo(self, collections):
        db = MagicMock()
        db.get_collection.side_effect = lambda name: collections[name]
        return MongoRepository(db=db)

    def test_get_assessment_maps_id(self):
        assessments = MagicMock()
        assessments.find_one.return_value = {"_id": "a1", "agency_id": "ag1", "progress_percentage": 20}
        repo = self._repo({"assessments": assessments})

        assessment = repo.get_assessment("a1")
        assert assessment.id == "a1"
        assert assessment.progress_percentage == 20

    def test_get_missing_assessment(self):
        assessments = MagicMock()
        assessments.find_one.return_value = None
        assert self._repo({"assessments": assessments}).get_assessment("x") is None

    def test_update_missing_assessment(self):
        assessments = MagicMock()
        assessments.update_one.return_value.matched_count = 0
        with pytest.raises(AssessmentNotFoundError):
            self._repo({"assessments": assessments}).update_assessment("x", progress_percentage=5)

    def test_upsert_filters_on_assessment_and_question(self):
        responses = MagicMock()
        responses.find_one.return_value = {
            "_id": "r1", "assessment_id": "a1", "question_id": "q1", "response": True,
        }
        repo = self._repo({"assessment_responses": responses})

        saved = repo.upsert_response("a1", ResponseUpsertRequest(question_id="q1", response=True))

        query, update = responses.update_one.call_args.args
        assert query == {"assessment_id": "a1", "question_id": "q1"}
        assert update["$set"]["response"] is True
        assert responses.update_one.call_args.kwargs["upsert"] is True
        assert saved.id == "r1"
