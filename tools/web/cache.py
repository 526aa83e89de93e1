"""Bounded, thread-safe TTL cache for comprehensive search results."""

import hashlib
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from models.search import SearchQuery

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_MINUTES = 30
COMPREHENSIVE_TAG = "comprehensive"


@dataclass
class CacheEntry:
    key: str
    value: Any
    inserted_at: float


def build_cache_key(query: SearchQuery) -> str:
    """
    Build the composite cache key for a query.

    Every parameter that changes the provider's answer is part of the key,
    followed by the literal tag of the only cached code path.
    """
    handles = json.dumps(list(query.handles)) if query.handles is not None else "null"
    return ":".join(
        [
            query.text,
            query.source_kind.value,
            str(query.max_results),
            handles,
            str(query.date_range.from_date),
            str(query.date_range.to_date),
            COMPREHENSIVE_TAG,
        ]
    )


class ResultCache:
    """
    In-memory cache with TTL and insertion-order eviction.

    Uses sha256 hash of the composite key (first 16 chars) as storage key and
    threading.Lock so get/set stay consistent if the host runs threads.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_MINUTES * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries before the oldest is evicted
            ttl_seconds: Time to live in seconds for cached entries
            clock: Monotonic time source (injectable for tests)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock

    def _make_key(self, text: str) -> str:
        """Generate storage key from text using sha256 hash."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any | None:
        """
        Get cached value if present and not expired.

        Args:
            key: Composite cache key

        Returns:
            Cached value if present and valid, None otherwise
        """
        storage_key = self._make_key(key)
        with self._lock:
            entry = self._entries.get(storage_key)
            if entry is None:
                return None
            if self._clock() - entry.inserted_at > self._ttl:
                # Expired - remove it
                del self._entries[storage_key]
                return None
            return entry.value

    def set(self, key: str, value: Any):
        """
        Store value, evicting the oldest-inserted entry when full.

        Args:
            key: Composite cache key
            value: Value to cache
        """
        storage_key = self._make_key(key)
        with self._lock:
            if storage_key in self._entries:
                del self._entries[storage_key]
            elif len(self._entries) >= self._max_size:
                self._entries.popitem(last=False)
            self._entries[storage_key] = CacheEntry(
                key=key, value=value, inserted_at=self._clock()
            )

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()
