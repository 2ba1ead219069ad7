"""Post search, popular hashtags and suggestions with a small result cache."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from bailanysta.domain.hashtags import PopularHashtag, rank_popular_hashtags
from bailanysta.domain.models import Post, User
from bailanysta.domain.search import filter_users, paginate, rank_posts, suggest
from bailanysta.repositories.json_storage import JsonStorage, get_storage
from bailanysta.services.errors import storage_errors


class _ResultCache:
    """Insertion-ordered TTL cache; the oldest entry goes first when full."""

    def __init__(self, ttl_seconds: int, max_entries: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: "OrderedDict[Tuple, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Tuple) -> Tuple[bool, Any]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and (self.ttl_seconds <= 0 or now - entry[1] < self.ttl_seconds):
                self.hits += 1
                return True, entry[0]
            if entry is not None:
                del self._entries[key]
            self.misses += 1
            return False, None

    def put(self, key: Tuple, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
            self._entries[key] = (value, self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)


class SearchService:
    def __init__(
        self,
        repository: JsonStorage | None = None,
        *,
        cache_ttl_seconds: int = 300,
        max_entries: int = 100,
        half_life_days: float = 7.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.repository = repository or get_storage()
        self.half_life_days = half_life_days
        self._cache = _ResultCache(cache_ttl_seconds, max_entries, clock)

    def _cached(self, key: Tuple, compute: Callable[[], Any]) -> Any:
        # Entries are keyed on the storage revision so any write invalidates them.
        self.repository.load()
        full_key = (self.repository.revision, *key)
        found, value = self._cache.get(full_key)
        if found:
            return value
        value = compute()
        self._cache.put(full_key, value)
        return value

    def search_posts(
        self, query: str, limit: int = 20, offset: int = 0, *, now: Optional[datetime] = None
    ) -> List[Post]:
        normalized = (query or "").strip().lower()
        if not normalized:
            return []
        with storage_errors("search posts"):
            if now is not None:
                return paginate(rank_posts(self.repository.all_posts(), normalized, now), limit, offset)
            ranked = self._cached(
                ("search", normalized),
                lambda: rank_posts(self.repository.all_posts(), normalized, now),
            )
        return paginate(ranked, limit, offset)

    def get_popular_hashtags(self, limit: int = 10, *, now: Optional[datetime] = None) -> List[PopularHashtag]:
        with storage_errors("retrieve popular hashtags"):
            if now is not None:
                return rank_popular_hashtags(
                    self.repository.all_posts(), limit, now=now, half_life_days=self.half_life_days
                )
            return self._cached(
                ("popular", limit),
                lambda: rank_popular_hashtags(
                    self.repository.all_posts(), limit, half_life_days=self.half_life_days
                ),
            )

    def get_search_suggestions(self, query: str, limit: int = 5) -> List[dict]:
        with storage_errors("retrieve suggestions"):
            return suggest(self.repository.all_posts(), query, limit)

    def search_users(self, query: str) -> List[User]:
        with storage_errors("search users"):
            return filter_users(self.repository.list_users(), query)

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_stats(self) -> Dict[str, int]:
        return {
            "size": len(self._cache),
            "maxEntries": self._cache.max_entries,
            "ttlSeconds": self._cache.ttl_seconds,
            "hits": self._cache.hits,
            "misses": self._cache.misses,
        }
