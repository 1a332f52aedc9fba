# scamradar/utils/ratelimit.py
# Sliding-window request limiter, one window per client key.
from __future__ import annotations

import threading
import time
from collections import OrderedDict, deque
from typing import Callable, Deque


class RateLimiter:
    """
    At most ``limit`` hits per ``window`` seconds per key. Tracks at most
    ``max_clients`` keys; once full, keys it has never seen are refused.
    """

    def __init__(self, limit: int = 30, window: float = 60.0, max_clients: int = 10_000,
                 clock: Callable[[], float] = time.monotonic):
        self.limit = max(1, int(limit))
        self.window = float(window)
        self.max_clients = max(1, int(max_clients))
        self.clock = clock
        self._hits: "OrderedDict[str, Deque[float]]" = OrderedDict()
        self.lock = threading.Lock()

    def _prune(self, now: float) -> None:
        for key in list(self._hits):
            q = self._hits[key]
            while q and now - q[0] >= self.window:
                q.popleft()
            if not q:
                del self._hits[key]

    def hit(self, key: str) -> bool:
        """Record one request for ``key``; True means it is over the limit."""
        with self.lock:
            now = self.clock()
            q = self._hits.get(key)
            if q is None:
                if len(self._hits) >= self.max_clients:
                    self._prune(now)
                if len(self._hits) >= self.max_clients:
                    return True
                q = self._hits[key] = deque()

            # drop timestamps older than the window
            while q and now - q[0] >= self.window:
                q.popleft()
            if len(q) >= self.limit:
                return True
            q.append(now)
            return False

    def reset(self) -> None:
        with self.lock:
            self._hits.clear()

    def __len__(self) -> int:
        return len(self._hits)


__all__ = ["RateLimiter"]
