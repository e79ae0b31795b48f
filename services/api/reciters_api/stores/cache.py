"""In-process cache with a fixed time-to-live.

Entries are stored with their creation time and invalidated lazily:
- `get` drops an entry once it is older than the TTL
- there is no background sweep and no capacity bound

Keys are free-form strings; callers namespace them (e.g. "search_<term>").
"""

from dataclasses import dataclass
import threading
import time
from typing import Any, Callable

# TTL constants (in seconds)
CACHE_TTL_SECONDS = 300  # 5 minutes


@dataclass
class CacheEntry:
    data: Any
    timestamp: float


class TTLCache:
    """Key/value store whose entries expire CACHE_TTL_SECONDS after `set`."""

    def __init__(
        self,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize an empty cache.

        Args:
            ttl: Entry lifetime in seconds.
            clock: Source of the current time in seconds (monotonic by default).
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any existing entry."""
        with self._lock:
            self._entries[key] = CacheEntry(data=value, timestamp=self._clock())

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired.

        Expired entries are removed on access.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if self._expired(entry, self._clock()):
                del self._entries[key]
                return None

            return entry.data

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            How many unexpired entries were dropped.
        """
        with self._lock:
            live = self._live_count()
            self._entries.clear()
            return live

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp > self.ttl

    def _live_count(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if not self._expired(entry, now))

    # len() and `in` see only unexpired entries, like `get`.

    def __len__(self) -> int:
        with self._lock:
            return self._live_count()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not self._expired(entry, self._clock())
