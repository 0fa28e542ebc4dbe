import logging
import time
from typing import Callable, Dict, Hashable, Optional, Tuple
from voucher_admin.config import settings
from voucher_admin.models.pagination import PaginatedList

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, int, int, Optional[str], Optional[str], Optional[str]]


class ListCache:
    """
    Short-lived cache of normalized list envelopes.

    Keys are resource + page + limit + sort, plus an optional scope (such as a
    store id) and the viewer the list was fetched for, since the platform may
    filter by caller. Entries go stale after the TTL and are evicted on the
    next put; a successful mutation of a resource drops every entry of that
    resource.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.LIST_CACHE_TTL_SECONDS
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, PaginatedList]] = {}

    @staticmethod
    def key(
        resource: str,
        page: int,
        limit: int,
        sort: Optional[str] = None,
        scope: Optional[Hashable] = None,
        viewer: Optional[str] = None,
    ) -> CacheKey:
        return (resource, page, limit, sort, None if scope is None else str(scope), viewer)

    def get(self, key: CacheKey) -> Optional[PaginatedList]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, envelope = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            logger.debug(f"List cache stale: {key}")
            return None

        logger.debug(f"List cache hit: {key}")
        return envelope

    def put(self, key: CacheKey, envelope: PaginatedList) -> None:
        now = self._clock()
        self._evict_stale(now)
        self._entries[key] = (now, envelope)

    def _evict_stale(self, now: float) -> None:
        stale = [key for key, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl_seconds]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"List cache evicted {len(stale)} stale entries")

    def __len__(self) -> int:
        return len(self._entries)

    def invalidate(self, resource: str) -> int:
        """Drop every cached list of a resource. Returns the number of entries removed."""
        stale = [key for key in self._entries if key[0] == resource]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug(f"List cache invalidated for {resource}: {len(stale)} entries")
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()


# Shared by every request handled by this process
list_cache = ListCache()
