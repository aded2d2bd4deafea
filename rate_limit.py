"""Best-effort fixed-window rate limiting keyed by client IP.

Counting is delegated to ``limits`` with its in-memory storage. The
store is owned by the app instance (``app.state.rate_limiter``) and does
not coordinate across workers or instances.
"""
from __future__ import annotations

import time
from typing import Callable, Optional

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter

from models import RateLimitDecision, RateLimitRecord
from utils import seconds_until


class RateLimitStore:
    def __init__(
        self,
        max_requests: int = 10,
        window_s: int = 60,
        storage: Optional[Storage] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.item = RateLimitItemPerSecond(max_requests, window_s)
        self.storage = storage or MemoryStorage()
        self.limiter = FixedWindowRateLimiter(self.storage)
        self._clock = clock

    @property
    def max_requests(self) -> int:
        return self.item.amount

    @property
    def window_s(self) -> int:
        return self.item.get_expiry()

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it fits the budget."""
        allowed = self.limiter.hit(self.item, key)
        stats = self.limiter.get_window_stats(self.item, key)
        if allowed:
            return RateLimitDecision(allowed=True, remaining=stats.remaining)
        return RateLimitDecision(
            allowed=False,
            remaining=0,
            retry_after_seconds=seconds_until(stats.reset_time, self._clock()),
        )

    def get(self, key: str) -> Optional[RateLimitRecord]:
        count = self.storage.get(self.item.key_for(key))
        if not count:
            return None
        reset_time = self.limiter.get_window_stats(self.item, key).reset_time
        return RateLimitRecord(window_start=reset_time - self.window_s, count=count)
