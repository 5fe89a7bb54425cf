"""
Tests for the assessment API client with a mocked HTTP transport.
"""

import json

import httpx
import pytest

from adapters.api_client import AssessmentApiClient, ResponseSaveError
from models.schemas import ResponseUpsertRequest
from utils.retry import RetryPolicy

BASE_URL = "http://scoring.test"


class FakeSleep:
    """Records backoff delays instead of sleeping."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def _client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return AssessmentApiClient(base_url=BASE_URL, client=http, retry_policy=RetryPolicy(max_retries=2, base_backoff=0.5))


def _saved(question_id="q1"):
    return {"id": "r1", "assessment_id": "a1", "question_id": question_id, "response": True}


class TestRetryPolicy:
    """Tests for RetryPolicy backoff."""

    def test_backoff_doubles(self):
        policy = RetryPolicy(max_retries=2, base_backoff=0.5)
        assert policy.backoff_for(1) == 0.5
        assert policy.backoff_for(2) == 1.0
        assert policy.max_attempts == 3

    def test_backoff_capped(self):
        assert RetryPolicy(base_backoff=10, max_backoff=15).backoff_for(3) == 15


class TestSaveResponse:
    """Tests for save_response retries."""

    @pytest.mark.asyncio
    async def test_success_first_try(self):
        calls = []

        def handler(request):
            calls.append(json.loads(request.content))
            return httpx.Response(200, json=_saved())

        sleep = FakeSleep()
        saved = await _client(handler).save_response(
            "a1", ResponseUpsertRequest(question_id="q1", response=True), sleep=sleep
        )

        assert saved.id == "r1"
        assert calls[0]["question_id"] == "q1"
        assert calls[0]["response"] is True
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_retries_server_errors_with_backoff(self):
        statuses = iter([503, 500, 200])

        def handler(request):
            status = next(statuses)
            return httpx.Response(status, json=_saved() if status == 200 else {"message": "busy"})

        sleep = FakeSleep()
        saved = await _client(handler).save_response(
            "a1", ResponseUpsertRequest(question_id="q1", response=True), sleep=sleep
        )

        assert saved.question_id == "q1"
        assert sleep.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_raises_after_retries_exhausted(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        sleep = FakeSleep()
        with pytest.raises(ResponseSaveError) as exc_info:
            await _client(handler).save_response(
                "a1", ResponseUpsertRequest(question_id="q7", response=True), sleep=sleep
            )

        assert len(attempts) == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.question_id == "q7"
        assert isinstance(exc_info.value.last_error, httpx.ConnectError)
        assert sleep.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(404, json={"message": "Question not found"})

        with pytest.raises(httpx.HTTPStatusError):
            await _client(handler).save_response(
                "a1", ResponseUpsertRequest(question_id="q1", response=True), sleep=FakeSleep()
            )

        assert len(attempts) == 1


class TestReads:
    """Tests for catalog, assessment and progress calls."""

    @pytest.mark.asyncio
    async def test_fetch_catalog(self):
        def handler(request):
            assert request.url.path == "/catalog"
            return httpx.Response(200, json={
                "categories": [{"id": "c1", "name": "Mission Profiles", "order_index": 0}],
                "questions": [{"id": "q1", "category_id": "c1", "text": "Hostage rescue?"}],
            })

        categories, questions = await _client(handler).fetch_catalog()
        assert categories[0].name == "Mission Profiles"
        assert questions[0].category_id == "c1"

    @pytest.mark.asyncio
    async def test_list_responses(self):
        def handler(request):
            assert request.url.path == "/assessments/a1/responses"
            return httpx.Response(200, json=[_saved("q1"), _saved("q2")])

        responses = await _client(handler).list_responses("a1")
        assert [r.question_id for r in responses] == ["q1", "q2"]

    @pytest.mark.asyncio
    async def test_update_progress(self):
        def handler(request):
            assert request.method == "PATCH"
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "a1", "agency_id": "ag1", **body})

        assessment = await _client(handler).update_progress("a1", 60)
        assert assessment.progress_percentage == 60

    @pytest.mark.asyncio
    async def test_get_assessment_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Assessment not found"})

        async with _client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.get_assessment("missing")
