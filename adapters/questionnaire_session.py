"""
Questionnaire session.

Client-side state of one assessment being filled in: the catalog, the
server-confirmed responses, the local response cache and the current
step. Answers are written to the local cache first and then saved to the
server, so progress reflects an answer immediately even while the save is
in flight or has failed.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set, Union

import httpx

from config import settings
from models.schemas import (
    Assessment,
    AssessmentResponse,
    CachedResponse,
    Category,
    CompletionStatus,
    Question,
    ResponseUpsertRequest,
)
from evaluators.classifier import ordered_categories
from evaluators.completion import compute_completion
from evaluators.progress import overall_progress, reconcile_progress
from evaluators.resolver import QuestionResolver, sample_fallback_questions
from adapters.api_client import AssessmentApiClient, ResponseSaveError
from adapters.local_cache import LocalResponseCache, cached_from_response

logger = logging.getLogger(__name__)


class QuestionnaireSession:
    """
    One assessment's questionnaire.

    Args:
        assessment_id: Assessment being filled in
        client: API client
        local_cache: Local response cache (defaults to an in-memory one)
        resolver: Question resolver (defaults to the standard strategy chain)
    """

    def __init__(
        self,
        assessment_id: str,
        client: AssessmentApiClient,
        local_cache: Optional[LocalResponseCache] = None,
        resolver: Optional[QuestionResolver] = None,
    ):
        self.assessment_id = assessment_id
        self.client = client
        self.local_cache = local_cache or LocalResponseCache()
        self.resolver = resolver or QuestionResolver()

        self.categories: List[Category] = []
        self.questions: List[Question] = []
        self.server_responses: List[AssessmentResponse] = []
        self.assessment: Optional[Assessment] = None
        self.selections: Dict[str, CachedResponse] = {}
        self.save_errors: Dict[str, Union[ResponseSaveError, httpx.HTTPStatusError]] = {}
        self.current_index = 0

        self._pending: Set[asyncio.Task] = set()

    async def load(self) -> None:
        """Fetch catalog, responses and assessment, then merge the local cache."""
        self.categories, self.questions = await self.client.fetch_catalog()
        self.server_responses = await self.client.list_responses(self.assessment_id)
        self.assessment = await self.client.get_assessment(self.assessment_id)
        self.selections = self.local_cache.merge(self.assessment_id, self.server_responses)

        logger.info(
            f"Loaded assessment {self.assessment_id}: {len(self.steps)} steps, "
            f"{len(self.server_responses)} saved responses, {len(self.selections)} cached selections"
        )

    # -- steps ---------------------------------------------------------------

    @property
    def steps(self) -> List[Category]:
        """Questionnaire steps: tier categories, then gap categories."""
        return ordered_categories(self.categories)

    @property
    def current_step(self) -> Optional[Category]:
        steps = self.steps
        if not steps:
            return None
        return steps[min(self.current_index, len(steps) - 1)]

    def questions_for_step(self, category: Category) -> List[Question]:
        """
        Questions shown for a step.

        When nothing resolves and fallback sampling is enabled, a sample of
        the catalog is shown instead.
        """
        resolution = self.resolver.resolve(category, self.questions, self.categories)
        if resolution.questions or not settings.enable_fallback_sampling:
            return resolution.questions
        return sample_fallback_questions(category, self.questions, settings.fallback_sample_size)

    # -- progress ------------------------------------------------------------

    def completion(self, category: Category) -> CompletionStatus:
        return compute_completion(
            category,
            self.assessment_id,
            self.questions,
            self.categories,
            self.server_responses,
            self.selections,
            self.resolver,
        )

    @property
    def computed_progress(self) -> int:
        """Overall progress from server responses plus local selections."""
        return overall_progress(
            self.categories,
            self.assessment_id,
            self.questions,
            self.server_responses,
            self.selections,
            self.resolver,
        )

    @property
    def progress(self) -> int:
        """Progress to display, reconciled with the persisted value."""
        persisted = self.assessment.progress_percentage if self.assessment else None
        return reconcile_progress(self.computed_progress, persisted)

    # -- answers -------------------------------------------------------------

    async def answer(self, question_id: str, sleep=None, **values) -> Optional[AssessmentResponse]:
        """
        Record an answer.

        The local cache is updated before the save is attempted. If the save
        fails after all retries or is rejected by the server (4xx), the error
        is kept in ``save_errors`` and the local entry stays in place.

        Args:
            question_id: Question being answered
            sleep: Optional awaitable sleep passed to the retry loop (tests)
            **values: response, text_response, numeric_response, select_response, notes

        Returns:
            The saved response, or None if the save failed
        """
        payload = ResponseUpsertRequest(question_id=question_id, **values)
        existing = self.selections.get(question_id)
        entry = CachedResponse(
            **payload.model_dump(exclude={"question_id"}),
            response_id=existing.response_id if existing else None,
        )
        self.selections = self.local_cache.put(self.assessment_id, question_id, entry)

        try:
            saved = await self.client.save_response(self.assessment_id, payload, sleep=sleep)
        except (ResponseSaveError, httpx.HTTPStatusError) as e:
            self.save_errors[question_id] = e
            logger.warning(f"Keeping unsaved local answer for question {question_id}: {e}")
            return None

        self.save_errors.pop(question_id, None)
        self.selections = self.local_cache.put(
            self.assessment_id, question_id, cached_from_response(saved)
        )
        self.server_responses = [
            r for r in self.server_responses if r.question_id != question_id
        ] + [saved]
        return saved

    # -- navigation ----------------------------------------------------------

    def next_step(self) -> Optional[Category]:
        """Advance to the next step and push progress in the background."""
        if self.current_index < len(self.steps) - 1:
            self.current_index += 1
        self.save_progress()
        return self.current_step

    def previous_step(self) -> Optional[Category]:
        if self.current_index > 0:
            self.current_index -= 1
        return self.current_step

    def save_progress(self) -> Optional[asyncio.Task]:
        """
        Push the computed progress to the server without waiting for it.

        Failures are logged and never interrupt the questionnaire. Without a
        running event loop nothing is pushed and None is returned.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"No running event loop; progress for assessment {self.assessment_id} not saved"
            )
            return None

        task = loop.create_task(self._push_progress(self.computed_progress))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _push_progress(self, percentage: int) -> None:
        try:
            self.assessment = await self.client.update_progress(self.assessment_id, percentage)
            logger.debug(f"Saved progress {percentage}% for assessment {self.assessment_id}")
        except Exception as e:
            logger.warning(f"Failed to save progress for assessment {self.assessment_id}: {e}")

    async def drain(self) -> None:
        """Wait for background progress saves to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
