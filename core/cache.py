"""
Page cache invalidation.

Read endpoints that are expensive to build cache their payload under the
route path that displays them; write actions call revalidate_path() for every
route whose data they changed.
"""

import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

PAGE_CACHE_PREFIX = 'page'


def page_cache_key(path):
    return f"{PAGE_CACHE_PREFIX}:{path.rstrip('/') or '/'}"


def revalidate_path(*paths):
    """Drop the cached payload of each route path."""
    keys = [page_cache_key(path) for path in paths if path]
    if not keys:
        return
    cache.delete_many(keys)
    logger.debug(f"Revalidated paths: {', '.join(paths)}")


def cached_page(path, builder, timeout=None):
    """Return the cached payload for `path`, building and storing it on a miss."""
    key = page_cache_key(path)
    payload = cache.get(key)
    if payload is None:
        payload = builder()
        cache.set(key, payload, timeout or settings.PAGE_CACHE_TIMEOUT)
    return payload
