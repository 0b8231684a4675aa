"""Caching utilities for task list queries.

Provides a small backend interface (key/value with TTL and invalidation
tags) plus an in-memory implementation. Another store can be plugged in
with ``set_cache`` as long as it implements ``CacheBackend``.
"""

import hashlib
import json
import threading
import time
from functools import wraps
from typing import Any, Callable, Iterable, Optional, Protocol, Union


class CacheBackend(Protocol):
    """Interface the ``cached`` decorator relies on."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl: int = 60, tags: Iterable[str] = ()) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def invalidate_tag(self, tag: str) -> int:
        ...

    def clear(self) -> None:
        ...


class InMemoryCache:
    """Simple in-memory cache with TTL and tag support.

    Expired entries are dropped when read, and swept from the whole cache
    every ``sweep_interval`` writes so keys that are never read again do not
    accumulate.
    """

    def __init__(self, sweep_interval: int = 100):
        self._cache: dict[str, tuple[Any, float]] = {}
        self._tags: dict[str, set[str]] = {}
        self._lock = threading.RLock()
        self._sweep_interval = sweep_interval
        self._writes = 0

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        with self._lock:
            if key in self._cache:
                value, expires_at = self._cache[key]
                if time.time() < expires_at:
                    return value
                # Expired, remove it
                self._remove(key)
            return None

    def set(self, key: str, value: Any, ttl: int = 60, tags: Iterable[str] = ()) -> None:
        """Set value in cache with TTL in seconds, optionally tagged."""
        expires_at = time.time() + ttl
        with self._lock:
            self._cache[key] = (value, expires_at)
            for tag in tags:
                self._tags.setdefault(tag, set()).add(key)
            self._writes += 1
            if self._writes >= self._sweep_interval:
                self._writes = 0
                self.cleanup_expired()

    def delete(self, key: str) -> None:
        """Delete a key from cache."""
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        """Clear all cached data."""
        with self._lock:
            self._cache.clear()
            self._tags.clear()

    def clear_prefix(self, prefix: str) -> None:
        """Clear all keys starting with a prefix."""
        with self._lock:
            keys_to_delete = [k for k in self._cache.keys() if k.startswith(prefix)]
            for key in keys_to_delete:
                self._remove(key)

    def invalidate_tag(self, tag: str) -> int:
        """Drop every entry stored with ``tag``. Returns count of removed entries."""
        with self._lock:
            keys = self._tags.pop(tag, set())
            removed = 0
            for key in keys:
                if key in self._cache:
                    self._remove(key)
                    removed += 1
            return removed

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count of removed entries."""
        now = time.time()
        with self._lock:
            expired_keys = [k for k, (_, exp) in self._cache.items() if exp <= now]
            for key in expired_keys:
                self._remove(key)
            return len(expired_keys)

    def _remove(self, key: str) -> None:
        self._cache.pop(key, None)
        for tag, keys in list(self._tags.items()):
            keys.discard(key)
            if not keys:
                del self._tags[tag]

    def __len__(self) -> int:
        return len(self._cache)


# Global cache instance
_cache: CacheBackend = InMemoryCache()


def get_cache() -> CacheBackend:
    """Get the global cache instance."""
    return _cache


def set_cache(backend: CacheBackend) -> CacheBackend:
    """Replace the global cache backend. Returns the previous one."""
    global _cache
    previous = _cache
    _cache = backend
    return previous


def make_cache_key(prefix: str, **kwargs) -> str:
    """Create a cache key from prefix and keyword arguments."""
    # Sort kwargs for consistent key generation
    sorted_items = sorted(kwargs.items())
    key_data = json.dumps(sorted_items, sort_keys=True, default=str)
    key_hash = hashlib.sha256(key_data.encode()).hexdigest()[:16]
    return f"{prefix}:{key_hash}"


def cached(
    key: Union[str, Callable[..., str]],
    ttl: int = 60,
    tags: Iterable[str] = (),
    cache_if: Optional[Callable[[Any], bool]] = None,
):
    """Decorator to cache function results.

    Args:
        key: Fixed cache key, or a callable that receives the wrapped
            function's arguments and returns the key
        ttl: Time to live in seconds (default 60), or a zero-argument
            callable returning it
        tags: Invalidation tags stored with every entry
        cache_if: Predicate on the result; results it rejects are returned
            but not stored

    Usage:
        @cached("task-status-counts", ttl=3600, tags=["tasks"])
        def get_task_status_counts(db):
            ...
    """
    tags = tuple(tags)

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = key(*args, **kwargs) if callable(key) else key

            cache = get_cache()
            cached_value = cache.get(cache_key)
            if cached_value is not None:
                return cached_value

            result = func(*args, **kwargs)
            if result is not None and (cache_if is None or cache_if(result)):
                cache.set(cache_key, result, ttl() if callable(ttl) else ttl, tags=tags)
            return result

        return wrapper
    return decorator


def invalidate_tag(tag: str) -> int:
    """Invalidate all cache entries stored with ``tag``.

    Call this when data is modified that would affect cached results.
    """
    return get_cache().invalidate_tag(tag)


def invalidate_cache(prefix: str) -> None:
    """Invalidate all cache entries with given prefix.

    Only supported by backends that implement ``clear_prefix``.
    """
    cache = get_cache()
    clear_prefix = getattr(cache, "clear_prefix", None)
    if clear_prefix is None:
        raise NotImplementedError(f"{type(cache).__name__} does not support prefix invalidation")
    clear_prefix(prefix)


# Cache keys and tags for task data
CACHE_PREFIX_TASKS = "tasks"
CACHE_KEY_TASK_STATUS_COUNTS = "task-status-counts"
CACHE_KEY_TASK_PRIORITY_COUNTS = "task-priority-counts"
CACHE_TAG_TASKS = "tasks"

