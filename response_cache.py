"""In-process TTL cache for paginated list responses."""
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 1000


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class ResponseCache:
    """
    Key/value cache with a fixed time-to-live and LRU eviction.

    An entry evicted for capacity is indistinguishable from an expired one:
    ``get`` reports it absent. ``invalidate_all`` bumps ``generation`` so that
    a reader which started before a write can detect the write and skip
    populating the cache with a page computed from the older snapshot.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: Optional[int] = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._generation = 0
        self._stats = {"hits": 0, "misses": 0, "evictions": 0, "invalidations": 0}

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                self._stats["misses"] += 1
                return None
            self._entries.move_to_end(key)
            self._stats["hits"] += 1
            return entry.value

    def set(self, key: str, value: Any, generation: Optional[int] = None) -> bool:
        """
        Store ``value`` under ``key`` with a fresh TTL.

        Returns False, storing nothing, when ``generation`` is given and the
        cache has been invalidated since that generation was read.
        """
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug(f"Dropping stale cache fill for {key} (generation {generation} != {self._generation})")
                return False
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + self.ttl_seconds)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
                    self._stats["evictions"] += 1
            return True

    def invalidate(self, key: str) -> bool:
        with self._lock:
            self._stats["invalidations"] += 1
            return self._entries.pop(key, None) is not None

    def invalidate_all(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self._generation += 1
            self._stats["invalidations"] += 1
        if removed:
            logger.debug(f"Invalidated {removed} cached responses")
        return removed

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stats, entries=len(self._entries), generation=self._generation)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
