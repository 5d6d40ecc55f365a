"""Caching of listing search results.

Only the ordered ids of a result page and the total count are cached;
rows are always loaded fresh. Invalidation bumps a generation counter
that is part of every key, so stale pages simply stop being addressed
and expire on their own.
"""

from __future__ import annotations

import hashlib
from typing import Callable, Mapping, TypedDict

from django.conf import settings
from django.core.cache import cache

GENERATION_KEY_SUFFIX = "generation"


class CachedPage(TypedDict):
    count: int
    ids: list[int]


def _is_cache_enabled() -> bool:
    return getattr(settings, "SEARCH_CACHE_ENABLED", False)


def _prefix() -> str:
    return getattr(settings, "SEARCH_CACHE_PREFIX", "search:properties")


def _generation() -> int:
    key = f"{_prefix()}:{GENERATION_KEY_SUFFIX}"
    value = cache.get(key)
    if value is None:
        cache.add(key, 1, None)
        value = cache.get(key, 1)
    return int(value)


def build_cache_key(params: Mapping[str, object]) -> str:
    fingerprint = "&".join(f"{name}={params[name]}" for name in sorted(params))
    digest = hashlib.sha1(fingerprint.encode("utf-8")).hexdigest()
    return f"{_prefix()}:v{_generation()}:{digest}"


def get_cached_page(params: Mapping[str, object], builder: Callable[[], CachedPage]) -> CachedPage:
    """Return the cached page for ``params``, computing it with ``builder`` on a miss."""
    if not _is_cache_enabled():
        return builder()

    key = build_cache_key(params)
    cached: CachedPage | None = cache.get(key)
    if cached is not None:
        return cached

    page = builder()
    cache.set(key, page, getattr(settings, "SEARCH_CACHE_TIMEOUT", 3600))
    return page


def invalidate_search_cache() -> None:
    key = f"{_prefix()}:{GENERATION_KEY_SUFFIX}"
    try:
        cache.incr(key)
    except ValueError:
        # Counter evicted or never created.
        cache.set(key, 2, None)


__all__ = [
    "CachedPage",
    "build_cache_key",
    "get_cached_page",
    "invalidate_search_cache",
]
