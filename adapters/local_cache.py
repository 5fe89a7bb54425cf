"""
Local response cache.

Client-side mirror of assessment responses, keyed per assessment. It
masks save latency and survives restarts before the server has confirmed
an answer. It is a cache, not a source of truth: once the server confirms
a response for a question, the server value replaces the local entry.

Each assessment is stored as one JSON blob under
``responseSelections_<assessment_id>`` in any string key-value store
(a dict, a shelve, browser-style storage).
"""

import json
import logging
from typing import Dict, MutableMapping, Optional, Sequence

from pydantic import ValidationError

from models.schemas import AssessmentResponse, CachedResponse

logger = logging.getLogger(__name__)

KEY_PREFIX = "responseSelections_"


def cache_key(assessment_id: str) -> str:
    return f"{KEY_PREFIX}{assessment_id}"


def cached_from_response(response: AssessmentResponse) -> CachedResponse:
    """Local cache entry for a server-confirmed response."""
    return CachedResponse(
        response=response.response,
        text_response=response.text_response,
        numeric_response=response.numeric_response,
        select_response=response.select_response,
        notes=response.notes,
        response_id=response.id,
    )


class LocalResponseCache:
    """
    Per-assessment response selections backed by a key-value store.

    Args:
        store: Mutable mapping of string keys to JSON strings (defaults to a dict)
    """

    def __init__(self, store: Optional[MutableMapping[str, str]] = None):
        self.store = store if store is not None else {}

    def get(self, assessment_id: str) -> Dict[str, CachedResponse]:
        """
        Cached selections of an assessment, keyed by question id.

        A blob that cannot be decoded is logged and treated as empty.
        """
        raw = self.store.get(cache_key(assessment_id))
        if not raw:
            return {}

        try:
            data = json.loads(raw)
            return {qid: CachedResponse(**entry) for qid, entry in data.items()}
        except (ValueError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable local cache for assessment {assessment_id}: {e}")
            return {}

    def set(self, assessment_id: str, selections: Dict[str, CachedResponse]) -> None:
        """Replace the cached selections of an assessment."""
        payload = {
            qid: entry.model_dump(mode="json", exclude_none=True)
            for qid, entry in selections.items()
        }
        self.store[cache_key(assessment_id)] = json.dumps(payload)

    def put(self, assessment_id: str, question_id: str, entry: CachedResponse) -> Dict[str, CachedResponse]:
        """Write one question's selection; returns the updated selections."""
        selections = self.get(assessment_id)
        selections[question_id] = entry
        self.set(assessment_id, selections)
        return selections

    def clear(self, assessment_id: str) -> None:
        self.store.pop(cache_key(assessment_id), None)

    def merge(
        self,
        assessment_id: str,
        server_responses: Sequence[AssessmentResponse],
    ) -> Dict[str, CachedResponse]:
        """
        Fold server-confirmed responses into the cache.

        Server responses supersede local entries for the same question;
        local entries for questions the server has not confirmed are kept.
        Responses belonging to other assessments are ignored.

        Returns:
            The merged selections (also persisted)
        """
        selections = self.get(assessment_id)
        confirmed = 0
        for response in server_responses:
            if response.assessment_id != assessment_id:
                continue
            selections[response.question_id] = cached_from_response(response)
            confirmed += 1

        self.set(assessment_id, selections)
        logger.debug(
            f"Merged {confirmed} server responses into local cache for assessment "
            f"{assessment_id} ({len(selections)} entries)"
        )
        return selections
