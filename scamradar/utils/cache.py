# scamradar/utils/cache.py
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

MISS = object()


class TTLCache:
    """
    Small in-process TTL cache owned by exactly one adapter.

    Entries expire ``ttl_seconds`` after they were written (checked on read).
    When full, the oldest *write* is evicted (FIFO, not LRU). ``clock`` is
    injectable so tests can move time forward.
    """

    def __init__(self, ttl_seconds: float, max_entries: int = 500,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}

    def get(self, key: Hashable) -> Any:
        """Return the cached value or ``MISS``. ``None`` is a legitimate value."""
        hit = self._entries.get(key)
        if hit is None:
            return MISS
        value, inserted_at = hit
        if self._clock() - inserted_at > self.ttl_seconds:
            del self._entries[key]
            return MISS
        return value

    def set(self, key: Hashable, value: Any) -> None:
        if key in self._entries:
            # a rewrite moves the key to the back of the eviction queue
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        self._entries[key] = (value, self._clock())

    def peek_stale(self, key: Hashable) -> Optional[Any]:
        """Return an entry even if it has expired (stale-on-error fallback)."""
        hit = self._entries.get(key)
        return None if hit is None else hit[0]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not MISS
