"""
Retry with exponential backoff for outbound API calls.

Response saves are retried a fixed number of times with a doubling
delay (0.5s, then 1.0s by default). Responses are upserted on
(assessment_id, question_id), so re-sending a save is idempotent.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry settings.

    Args:
        max_retries: Retries after the first attempt
        base_backoff: Delay before the first retry, in seconds
        max_backoff: Upper bound for any single delay, in seconds
    """
    max_retries: int = 2
    base_backoff: float = 0.5
    max_backoff: float = 30.0

    def backoff_for(self, retry_number: int) -> float:
        """Delay before retry ``retry_number`` (1-based): base * 2^(n-1)."""
        return min(self.base_backoff * (2 ** (retry_number - 1)), self.max_backoff)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


class RetriesExhausted(Exception):
    """Raised when every attempt allowed by a RetryPolicy has failed."""

    def __init__(self, operation: str, attempts: int, last_error: BaseException):
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{operation} failed after {attempts} attempts: {last_error}")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    operation: str = "operation",
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Call ``func`` until it succeeds or the policy runs out of retries.

    Args:
        func: Zero-argument coroutine factory
        policy: Retry policy
        operation: Label used in logs and in the final error
        retry_on: Exception types that trigger a retry; others propagate
        sleep: Awaitable sleep, injectable for tests

    Returns:
        The result of the first successful call

    Raises:
        RetriesExhausted: if every attempt failed with a retryable error
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await func()
        except retry_on as e:
            if attempt >= policy.max_attempts:
                logger.warning(f"{operation}: giving up after {attempt} attempts ({e})")
                raise RetriesExhausted(operation, attempt, e) from e

            backoff = policy.backoff_for(attempt)
            logger.debug(f"{operation}: attempt {attempt} failed ({e}), retrying in {backoff:.2f}s")
            await sleep(backoff)
