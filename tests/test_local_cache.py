"""
Unit tests for the local response cache.
"""

import json
import logging

from adapters.local_cache import LocalResponseCache, cache_key
from models.schemas import AssessmentResponse, CachedResponse

ASSESSMENT_ID = "a1"


class TestLocalResponseCache:
    """Tests for LocalResponseCache."""

    def test_key_per_assessment(self):
        assert cache_key("abc") == "responseSelections_abc"

    def test_missing_assessment_is_empty(self):
        assert LocalResponseCache().get(ASSESSMENT_ID) == {}

    def test_put_persists_json_blob(self):
        store = {}
        cache = LocalResponseCache(store)
        cache.put(ASSESSMENT_ID, "q1", CachedResponse(response=True))

        blob = json.loads(store["responseSelections_a1"])
        assert blob == {"q1": {"response": True}}
        assert cache.get(ASSESSMENT_ID)["q1"].response is True

    def test_assessments_are_isolated(self):
        cache = LocalResponseCache()
        cache.put("a1", "q1", CachedResponse(response=True))
        cache.put("a2", "q2", CachedResponse(response=False))

        assert set(cache.get("a1")) == {"q1"}
        assert set(cache.get("a2")) == {"q2"}

    def test_clear(self):
        cache = LocalResponseCache()
        cache.put(ASSESSMENT_ID, "q1", CachedResponse(response=True))
        cache.clear(ASSESSMENT_ID)
        assert cache.get(ASSESSMENT_ID) == {}

    def test_corrupt_blob_treated_as_empty(self, caplog):
        cache = LocalResponseCache({"responseSelections_a1": "{not json"})
        with caplog.at_level(logging.WARNING):
            assert cache.get(ASSESSMENT_ID) == {}
        assert "unreadable local cache" in caplog.text

    def test_wrong_shape_treated_as_empty(self):
        cache = LocalResponseCache({"responseSelections_a1": "[1, 2, 3]"})
        assert cache.get(ASSESSMENT_ID) == {}


class TestMerge:
    """Tests for LocalResponseCache.merge."""

    def test_server_supersedes_local(self):
        cache = LocalResponseCache()
        cache.put(ASSESSMENT_ID, "q1", CachedResponse(response=False))
        server = [AssessmentResponse(id="r1", assessment_id=ASSESSMENT_ID, question_id="q1", response=True)]

        merged = cache.merge(ASSESSMENT_ID, server)

        assert merged["q1"].response is True
        assert merged["q1"].response_id == "r1"

    def test_local_only_entries_kept(self):
        cache = LocalResponseCache()
        cache.put(ASSESSMENT_ID, "q2", CachedResponse(text_response="pending"))
        server = [AssessmentResponse(id="r1", assessment_id=ASSESSMENT_ID, question_id="q1", response=True)]

        merged = cache.merge(ASSESSMENT_ID, server)

        assert set(merged) == {"q1", "q2"}
        assert merged["q2"].text_response == "pending"

    def test_other_assessments_ignored(self):
        cache = LocalResponseCache()
        server = [AssessmentResponse(id="r9", assessment_id="other", question_id="q1", response=True)]
        assert cache.merge(ASSESSMENT_ID, server) == {}

    def test_merge_is_persisted(self):
        store = {}
        server = [AssessmentResponse(id="r1", assessment_id=ASSESSMENT_ID, question_id="q1", notes="ok")]
        LocalResponseCache(store).merge(ASSESSMENT_ID, server)

        assert LocalResponseCache(store).get(ASSESSMENT_ID)["q1"].notes == "ok"
