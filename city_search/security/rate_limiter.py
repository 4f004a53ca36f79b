"""
Fixed-window request limiter keyed by client identifier.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Request

from city_search.config import settings


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    remaining: int
    reset_at: float


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """
    Allows `max_requests` per identifier in each `window_seconds` window.
    """

    def __init__(
        self,
        *,
        max_requests: Optional[int] = None,
        window_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests or settings.RATE_LIMIT_MAX_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def check(self, identifier: str) -> RateLimitStatus:
        now = self._clock()

        with self._lock:
            self._prune(now)
            window = self._windows.get(identifier)

            if window is None or now >= window.reset_at:
                window = _Window(count=1, reset_at=now + self.window_seconds)
                self._windows[identifier] = window
                return RateLimitStatus(True, self.max_requests - 1, window.reset_at)

            if window.count >= self.max_requests:
                return RateLimitStatus(False, 0, window.reset_at)

            window.count += 1
            return RateLimitStatus(
                True,
                self.max_requests - window.count,
                window.reset_at,
            )

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)


def get_client_ip(request: Request) -> str:
    """
    Best-effort client address: X-Forwarded-For, X-Real-IP, then the peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    return "unknown"
