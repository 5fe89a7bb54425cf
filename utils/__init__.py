"""Utilities package for SWAT readiness scoring."""

from .cache import get_cache, cache_result, clear_cache, get_cache_stats
from .retry import RetryPolicy, RetriesExhausted, retry_async
from .rounding import round_half_up, completion_percentage

__all__ = [
    "get_cache",
    "cache_result",
    "clear_cache",
    "get_cache_stats",
    "RetryPolicy",
    "RetriesExhausted",
    "retry_async",
    "round_half_up",
    "completion_percentage",
]
