"""
In-memory TTL cache for catalog reads.

Categories and questions change only through administrative edits, so
repository reads of the catalog are cached per namespace. Default TTL
is 5 minutes; caches are cleared whenever the catalog is written.
"""

import hashlib
import threading
from functools import wraps
from typing import Any, Callable, Optional, TypeVar
from cachetools import TTLCache

# Type variable for generic cache functions
T = TypeVar('T')

# Global cache instances with thread-safe access
_cache_lock = threading.Lock()
_caches: dict = {}


def get_cache(
    name: str,
    maxsize: int = 128,
    ttl: int = 300
) -> TTLCache:
    """
    Get or create a named cache instance.

    Args:
        name: Cache namespace (e.g., "catalog")
        maxsize: Maximum number of items in cache
        ttl: Time-to-live in seconds (default 5 minutes)

    Returns:
        TTLCache instance for the namespace
    """
    with _cache_lock:
        if name not in _caches:
            _caches[name] = TTLCache(maxsize=maxsize, ttl=ttl)
        return _caches[name]


def make_cache_key(*args, **kwargs) -> str:
    """
    Create a deterministic cache key from arguments.

    Args:
        *args: Positional arguments
        **kwargs: Keyword arguments

    Returns:
        MD5 hash string as cache key
    """
    # Sort kwargs for determinism
    sorted_kwargs = sorted(kwargs.items())
    key_parts = [str(arg) for arg in args] + [f"{k}={v}" for k, v in sorted_kwargs]
    key_string = "|".join(key_parts)

    # Use MD5 for fast hashing (not cryptographic, just for key uniqueness)
    return hashlib.md5(key_string.encode()).hexdigest()


def cache_result(
    cache_name: str,
    maxsize: int = 128,
    ttl: int = 300,
    key_prefix: str = ""
) -> Callable:
    """
    Decorator to cache results of a synchronous method or function.

    The first positional argument of a method (``self``) is part of the
    key through its ``cache_namespace`` attribute when present, so two
    repositories never share entries.

    Args:
        cache_name: Name of the cache to use
        maxsize: Maximum cache size when the cache is created
        ttl: Time-to-live in seconds when the cache is created
        key_prefix: Optional prefix for cache keys

    Example:
        @cache_result("catalog", key_prefix="questions_")
        def list_questions(self) -> List[Question]:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            cache = get_cache(cache_name, maxsize=maxsize, ttl=ttl)
            key_args = list(args)
            if key_args and hasattr(key_args[0], "cache_namespace"):
                key_args[0] = key_args[0].cache_namespace
            cache_key = key_prefix + make_cache_key(*key_args, **kwargs)

            # Check cache
            with _cache_lock:
                if cache_key in cache:
                    return cache[cache_key]

            # Call function
            result = func(*args, **kwargs)

            # Store in cache
            with _cache_lock:
                cache[cache_key] = result

            return result

        return wrapper

    return decorator


def clear_cache(cache_name: Optional[str] = None) -> None:
    """
    Clear cache contents.

    Args:
        cache_name: Specific cache to clear, or None to clear all
    """
    with _cache_lock:
        if cache_name:
            if cache_name in _caches:
                _caches[cache_name].clear()
        else:
            for cache in _caches.values():
                cache.clear()


def get_cache_stats(cache_name: str) -> dict:
    """
    Get cache statistics.

    Args:
        cache_name: Cache to get stats for

    Returns:
        Dict with cache statistics
    """
    with _cache_lock:
        if cache_name not in _caches:
            return {"exists": False}

        cache = _caches[cache_name]
        return {
            "exists": True,
            "size": len(cache),
            "maxsize": cache.maxsize,
            "ttl": cache.ttl,
        }
