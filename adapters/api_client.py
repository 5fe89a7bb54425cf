"""
Assessment API client.

Async httpx client for the scoring service, used by the questionnaire
session. Response saves are retried with exponential backoff (2 retries:
0.5s then 1.0s by default); everything else fails fast.
"""

import logging
from typing import List, Optional, Tuple

import httpx

from config import settings
from models.schemas import (
    Assessment,
    AssessmentResponse,
    Category,
    Question,
    ResponseUpsertRequest,
)
from utils.retry import RetriesExhausted, RetryPolicy, retry_async

logger = logging.getLogger(__name__)


class ResponseSaveError(Exception):
    """
    A response could not be saved after all retries.

    Attributes:
        question_id: Question whose answer was not saved
        attempts: Number of attempts made
        last_error: Error of the final attempt
    """

    def __init__(self, question_id: str, attempts: int, last_error: BaseException):
        self.question_id = question_id
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed to save response for question {question_id} after {attempts} attempts: {last_error}"
        )


def _is_retryable(error: httpx.HTTPError) -> bool:
    """Network errors and 5xx/429 responses are worth retrying; other 4xx are not."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status >= 500 or status == 429
    return True


class _RetryableError(Exception):
    def __init__(self, cause: httpx.HTTPError):
        self.cause = cause
        super().__init__(str(cause))


class AssessmentApiClient:
    """
    Client for the assessment endpoints.

    Args:
        base_url: Service base URL (defaults to API_BASE_URL)
        client: Optional pre-built httpx.AsyncClient (e.g. with a mock transport)
        retry_policy: Retry policy for response saves
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.base_url = base_url or settings.api_base_url or "http://localhost:8000"
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.request_timeout_seconds,
        )
        self.retry_policy = retry_policy or RetryPolicy(
            max_retries=settings.save_max_retries,
            base_backoff=settings.save_backoff_seconds,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AssessmentApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_json(self, path: str, **params):
        response = await self._client.get(path, params=params or None)
        response.raise_for_status()
        return response.json()

    async def fetch_catalog(self) -> Tuple[List[Category], List[Question]]:
        """All categories and questions."""
        data = await self._get_json("/catalog")
        categories = [Category(**c) for c in data.get("categories", [])]
        questions = [Question(**q) for q in data.get("questions", [])]
        logger.debug(f"Fetched catalog: {len(categories)} categories, {len(questions)} questions")
        return categories, questions

    async def get_assessment(self, assessment_id: str) -> Assessment:
        data = await self._get_json(f"/assessments/{assessment_id}")
        return Assessment(**data)

    async def list_responses(self, assessment_id: str) -> List[AssessmentResponse]:
        data = await self._get_json(f"/assessments/{assessment_id}/responses")
        return [AssessmentResponse(**r) for r in data]

    async def save_response(
        self,
        assessment_id: str,
        payload: ResponseUpsertRequest,
        sleep=None,
    ) -> AssessmentResponse:
        """
        Upsert a response, retrying transient failures.

        Args:
            assessment_id: Assessment the answer belongs to
            payload: Answer to save
            sleep: Optional awaitable sleep (tests)

        Returns:
            The server-confirmed response

        Raises:
            ResponseSaveError: when every attempt failed
            httpx.HTTPStatusError: on a non-retryable 4xx
        """
        path = f"/assessments/{assessment_id}/responses"
        body = payload.model_dump(mode="json")

        async def attempt() -> AssessmentResponse:
            try:
                response = await self._client.post(path, json=body)
                response.raise_for_status()
            except httpx.HTTPError as e:
                if _is_retryable(e):
                    raise _RetryableError(e) from e
                raise
            return AssessmentResponse(**response.json())

        kwargs = {"sleep": sleep} if sleep is not None else {}
        try:
            return await retry_async(
                attempt,
                self.retry_policy,
                operation=f"save response {payload.question_id}",
                retry_on=(_RetryableError,),
                **kwargs,
            )
        except RetriesExhausted as e:
            cause = e.last_error.cause if isinstance(e.last_error, _RetryableError) else e.last_error
            raise ResponseSaveError(payload.question_id, e.attempts, cause) from cause

    async def update_progress(self, assessment_id: str, progress_percentage: int) -> Assessment:
        """Persist progress_percentage on the assessment (no retries)."""
        response = await self._client.patch(
            f"/assessments/{assessment_id}/progress",
            json={"progress_percentage": progress_percentage},
        )
        response.raise_for_status()
        return Assessment(**response.json())
