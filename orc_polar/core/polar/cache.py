"""
In-memory LRU cache for built polar models.

ORC lookups are slow network calls, and a boat's certificate rarely
changes within a day, so we keep the last few built models around.

The cache is an ordinary object. The application creates one at startup
and hands it to whatever needs it; there is no module-level instance.
Every operation holds one lock, which keeps LRU order and the hit/miss
counters consistent when FastAPI runs dependencies in its threadpool.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from .models import BoatIdentity, CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL = timedelta(hours=24)


def derive_cache_key(identity: BoatIdentity) -> Optional[str]:
    """
    Cache key for a boat, or None if it cannot be identified.

    Priority: reference number, then country + sail number, then name.
    A None key means "do not cache", not an error.
    """
    if identity.ref_no:
        return f"ref:{identity.ref_no.casefold()}"
    if identity.country_id and identity.sail_no:
        return f"sail:{identity.country_id.casefold()}|{identity.sail_no.casefold()}"
    if identity.yacht_name and identity.yacht_name.strip():
        return f"name:{identity.yacht_name.strip().casefold()}"
    return None


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time cache counters."""
    size: int
    max_size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class PolarCache:
    """
    Capacity-bounded, TTL-expiring LRU store of CacheEntry values.

    `clock` returns seconds and defaults to time.monotonic; tests pass
    their own to move time forward.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._ttl_seconds = ttl.total_seconds()
        self._clock = clock
        self._entries: OrderedDict[str, tuple[CacheEntry, float]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def _expired(self, stored_at: float) -> bool:
        return self._clock() - stored_at > self._ttl_seconds

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return a live entry and mark it most recently used."""
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                self._misses += 1
                return None

            entry, stored_at = item
            if self._expired(stored_at):
                del self._entries[key]
                self._misses += 1
                logger.debug("Evicted expired cache entry", extra={"key": key})
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        """Insert or refresh an entry, evicting the least recently used."""
        with self._lock:
            self._entries[key] = (entry, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted least recently used entry", extra={"key": evicted})

    def has(self, key: str) -> bool:
        """True if a live entry exists. Does not touch LRU order or counters."""
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return False
            if self._expired(item[1]):
                del self._entries[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_size=self._max_entries,
                hits=self._hits,
                misses=self._misses,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
