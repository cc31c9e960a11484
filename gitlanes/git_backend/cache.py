"""
Time-bounded cache for fetched commit histories.

The layout core never caches; callers that re-render on every filter
change wrap their provider in a CachedHistoryProvider instead.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Any, Protocol

from gitlanes.git_backend.repository import HistoryFilters
from gitlanes.graph.types import Commit

logger = logging.getLogger(__name__)


class HistoryProvider(Protocol):
    def get_commits(self, filters: HistoryFilters | None = None) -> list[Commit]: ...


class HistoryCache:
    """Key -> value store whose entries expire after ttl seconds.

    The clock is injectable so expiry can be tested without sleeping.
    Beyond max_entries the least recently stored entry is evicted.
    """

    def __init__(
        self,
        ttl: float,
        max_entries: int = 16,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_entries = max(1, max_entries)
        self.clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, value = entry
        if self.clock() - stored_at >= self.ttl:
            del self._entries[key]
            return None
        return value

    def put(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self.clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop one entry, or everything when key is None"""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)


class CachedHistoryProvider:
    """Wraps a history provider, reusing results for identical filters"""

    def __init__(self, provider: HistoryProvider, cache: HistoryCache) -> None:
        self.provider = provider
        self.cache = cache

    def get_commits(self, filters: HistoryFilters | None = None) -> list[Commit]:
        filters = filters or HistoryFilters()
        cached = self.cache.get(filters)
        if cached is not None:
            logger.debug("History cache hit for %s", filters)
            return list(cached)

        logger.debug("History cache miss for %s", filters)
        commits = self.provider.get_commits(filters)
        self.cache.put(filters, tuple(commits))
        return list(commits)

    def invalidate(self) -> None:
        self.cache.invalidate()
