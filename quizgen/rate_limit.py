"""In-memory fixed-window rate limiter for the HTTP boundary.

One instance is constructed per process (see ``quizgen.main``) and owns its
state; expired windows are evicted by ``sweep()``, which the app runs on a
timer via ``run_sweeper``.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from quizgen.config import setup_logging

logger = setup_logging()

IP_HEADERS = ("cf-connecting-ip", "x-real-ip", "x-forwarded-for", "x-client-ip")


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


class RateLimiter:
    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _live_entry(self, key: str) -> Optional[RateLimitEntry]:
        entry = self._entries.get(key)
        if entry is None or self._clock() > entry.reset_at:
            return None
        return entry

    def check(self, key: str) -> bool:
        """Count a request against ``key``; False when the limit is exceeded."""
        entry = self._live_entry(key)
        if entry is None:
            self._entries[key] = RateLimitEntry(count=1, reset_at=self._clock() + self.window_seconds)
            return True
        if entry.count >= self.max_requests:
            return False
        entry.count += 1
        return True

    def remaining(self, key: str) -> int:
        entry = self._live_entry(key)
        if entry is None:
            return self.max_requests
        return max(0, self.max_requests - entry.count)

    def retry_after(self, key: str) -> int:
        """Whole seconds until the window for ``key`` resets (0 if not limited)."""
        entry = self._live_entry(key)
        if entry is None:
            return 0
        return max(1, int(entry.reset_at - self._clock() + 0.999))

    def headers(self, key: str) -> Dict[str, str]:
        out = {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(self.remaining(key)),
        }
        reset = self.retry_after(key)
        if reset:
            out["X-RateLimit-Reset"] = str(reset)
        return out

    def sweep(self) -> int:
        """Evict expired entries; returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
        for key in expired:
            del self._entries[key]
        return len(expired)


async def run_sweeper(limiter: RateLimiter, interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        removed = limiter.sweep()
        if removed:
            logger.debug("Rate limiter evicted %d expired entries", removed)


def client_ip(headers, fallback: Optional[str] = None) -> str:
    """First client IP from common proxy headers, else ``fallback`` or "unknown"."""
    for header in IP_HEADERS:
        value = headers.get(header)
        if value:
            ip = value.split(",")[0].strip()
            if ip:
                return ip
    return fallback or "unknown"
