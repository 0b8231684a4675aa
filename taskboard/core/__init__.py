"""Core utilities for the Taskboard backend."""

from .cache import (
    CacheBackend,
    InMemoryCache,
    get_cache,
    set_cache,
    cached,
    invalidate_cache,
    invalidate_tag,
    make_cache_key,
    CACHE_PREFIX_TASKS,
    CACHE_KEY_TASK_STATUS_COUNTS,
    CACHE_KEY_TASK_PRIORITY_COUNTS,
    CACHE_TAG_TASKS,
)

__all__ = [
    "CacheBackend",
    "InMemoryCache",
    "get_cache",
    "set_cache",
    "cached",
    "invalidate_cache",
    "invalidate_tag",
    "make_cache_key",
    "CACHE_PREFIX_TASKS",
    "CACHE_KEY_TASK_STATUS_COUNTS",
    "CACHE_KEY_TASK_PRIORITY_COUNTS",
    "CACHE_TAG_TASKS",
]
