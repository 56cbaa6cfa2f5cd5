"""
HTTP middleware — per-client rate limiting.

Fixed window counter keyed by the socket peer address. A client's window
starts with its first request and resets window_sec later. State is
in-memory and process-wide; it is lost on restart.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from backend_txarchive.txarchive_logging import get_logger

logger = get_logger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests, please try again later."


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after_sec: float


class FixedWindowRateLimiter:
    """Counts hits per key within a fixed window; max_requests hits are allowed per window."""

    def __init__(
        self,
        max_requests: int = 100,
        window_sec: float = 15 * 60,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_sec <= 0:
            raise ValueError("window_sec must be positive")
        self._max = max_requests
        self._window = window_sec
        self._clock = clock
        # key -> (window_start, hits)
        self._windows: dict[str, tuple[float, int]] = {}
        self._next_sweep = clock() + window_sec
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateDecision:
        now = self._clock()
        with self._lock:
            start, hits = self._windows.get(key, (now, 0))
            if now - start >= self._window:
                start, hits = now, 0
            hits += 1
            self._windows[key] = (start, hits)
            if now >= self._next_sweep:
                self._evict_expired(now)
                self._next_sweep = now + self._window
        reset_after = max(0.0, start + self._window - now)
        return RateDecision(
            allowed=hits <= self._max,
            limit=self._max,
            remaining=max(0, self._max - hits),
            reset_after_sec=reset_after,
        )

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self._window]
        for k in expired:
            del self._windows[k]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests over the limit with 429 before they reach any route."""

    def __init__(self, app: ASGIApp, limiter: FixedWindowRateLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        key = client_key(request)
        decision = self.limiter.hit(key)
        reset_sec = str(math.ceil(decision.reset_after_sec))
        headers = {
            "RateLimit-Limit": str(decision.limit),
            "RateLimit-Remaining": str(decision.remaining),
            "RateLimit-Reset": reset_sec,
        }
        if not decision.allowed:
            logger.warning("rate_limit_exceeded", client=key, path=request.url.path)
            return JSONResponse(
                {"error": RATE_LIMITED_MESSAGE},
                status_code=429,
                headers={**headers, "Retry-After": reset_sec},
            )
        response = await call_next(request)
        response.headers.update(headers)
        return response
