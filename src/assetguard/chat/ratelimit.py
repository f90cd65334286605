"""Per-identity request throttling for the chat layer.

The limiter is handed to the orchestrator; the guard never sees it.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

MAX_REQUESTS_PER_WINDOW = 15
RATE_LIMIT_WINDOW_SECONDS = 60.0


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    remaining: int
    reset_in: int = 0  # whole seconds until a slot frees up


@runtime_checkable
class RateLimiter(Protocol):
    @property
    def max_requests(self) -> int: ...
    def hit(self, key: str) -> RateDecision: ...
    def peek(self, key: str) -> RateDecision: ...


class SlidingWindowRateLimiter:
    """At most `max_requests` hits per key within any `window_seconds` span.

    Timestamps older than the window are dropped on access, and keys with
    no recent hits are removed, so memory follows active identities only.
    """

    def __init__(
        self,
        max_requests: int = MAX_REQUESTS_PER_WINDOW,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max

    def _expire(self, key: str, now: float) -> deque[float]:
        hits = self._hits.get(key)
        if hits is None:
            return deque()
        while hits and now - hits[0] >= self._window:
            hits.popleft()
        if not hits:
            del self._hits[key]
        return hits

    def _decision(self, hits: deque[float], now: float, *, counted: bool) -> RateDecision:
        used = len(hits)
        if used < self._max or (counted and used == self._max):
            return RateDecision(allowed=True, remaining=self._max - used)
        reset_in = math.ceil(hits[0] + self._window - now)
        return RateDecision(allowed=False, remaining=0, reset_in=max(reset_in, 1))

    def hit(self, key: str) -> RateDecision:
        """Count one request for key if there is room."""
        with self._lock:
            now = self._clock()
            hits = self._expire(key, now)
            if len(hits) >= self._max:
                return self._decision(hits, now, counted=False)
            hits.append(now)
            self._hits[key] = hits
            return self._decision(hits, now, counted=True)

    def peek(self, key: str) -> RateDecision:
        """Report the state for key without counting a request."""
        with self._lock:
            now = self._clock()
            return self._decision(self._expire(key, now), now, counted=False)

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)
