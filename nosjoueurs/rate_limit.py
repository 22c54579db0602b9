"""In-memory fixed-window rate limiting keyed by client."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateLimitResult:
    """Outcome of a single rate limit check."""

    allowed: bool
    remaining: int


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each key.

    State lives in the instance, so each application builds its own limiters
    and keys never share a budget. Suitable for a single process.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter."""
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, key: str) -> RateLimitResult:
        """Count a request for ``key`` and report whether it is allowed."""
        now = self._clock()
        self._cleanup(now)

        window = self._windows.get(key)
        if window is None:
            if self.max_requests <= 0:
                return RateLimitResult(allowed=False, remaining=0)
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return RateLimitResult(allowed=True, remaining=self.max_requests - 1)

        if window.count < self.max_requests:
            window.count += 1
            return RateLimitResult(
                allowed=True, remaining=self.max_requests - window.count
            )

        return RateLimitResult(allowed=False, remaining=0)

    def _cleanup(self, now: float) -> None:
        expired = [key for key, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]
