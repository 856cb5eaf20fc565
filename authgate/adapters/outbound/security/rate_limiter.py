# authgate/adapters/outbound/security/rate_limiter.py

"""
In-memory request counter per subject.

Each subject gets a counter whose window is fixed when the counter is
created; once the window has elapsed the next request starts a fresh
counter at 1. Expired counters are dropped lazily, and the cache is bounded
so an abusive client cannot grow it without limit.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from authgate.application.ports.outbound import IRateLimiter

logger = logging.getLogger(__name__)


@dataclass
class _WindowCounter:
    count: int
    expires_at: float


class InMemoryRateLimiter(IRateLimiter):

    def __init__(
            self,
            window_seconds: int = 60,
            max_size: int = 10000,
            clock: Callable[[], float] = time.monotonic,
    ):
        self._window_seconds = window_seconds
        self.max_size = max_size
        self._clock = clock
        # Insertion order == window start order, so expired counters sit at the front
        self._counters: "OrderedDict[str, _WindowCounter]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    async def check_and_increment(self, subject: str) -> int:
        now = self._clock()
        with self._lock:
            counter = self._counters.get(subject)
            if counter is None or counter.expires_at <= now:
                counter = _WindowCounter(count=0, expires_at=now + self._window_seconds)
                self._counters[subject] = counter
                self._counters.move_to_end(subject)
                self._evict(now)
            counter.count += 1
            return counter.count

    def _evict(self, now: float) -> None:
        # Caller holds the lock
        while self._counters:
            oldest_subject, oldest = next(iter(self._counters.items()))
            if oldest.expires_at > now and len(self._counters) <= self.max_size:
                break
            del self._counters[oldest_subject]

    def size(self) -> int:
        with self._lock:
            return len(self._counters)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
