"""
Fixed-window rate limiting for /internal routes

Each client IP gets `max_requests` per `window_seconds`. Counters live in
process memory, so limits are per worker process.
"""
import time
from threading import Lock
from typing import Dict, Optional, Tuple

from fastapi import HTTPException, Request, status

from config import get_settings

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class FixedWindowRateLimiter:
    """Thread-safe per-key request counter with a fixed time window"""

    def __init__(self, max_requests: int, window_seconds: float):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.windows: Dict[str, Tuple[int, float]] = {}  # key -> (count, window_start)
        self.lock = Lock()
        self._last_sweep: Optional[float] = None

    def hit(self, key: str, now: Optional[float] = None) -> bool:
        """
        Count one request for key.

        Returns:
            True if allowed, False if the key is over its limit
        """
        now = time.monotonic() if now is None else now
        with self.lock:
            # Sweep at most once per window so idle clients do not pile up
            if self._last_sweep is None or now - self._last_sweep >= self.window_seconds:
                self._drop_expired(now)
                self._last_sweep = now

            count, started = self.windows.get(key, (0, now))
            if now - started >= self.window_seconds:
                count, started = 0, now
            count += 1
            self.windows[key] = (count, started)
            return count <= self.max_requests

    def retry_after(self, key: str, now: Optional[float] = None) -> int:
        """Seconds until key's window resets"""
        now = time.monotonic() if now is None else now
        with self.lock:
            if key not in self.windows:
                return 0
            _, started = self.windows[key]
            return max(0, int(started + self.window_seconds - now) + 1)

    def cleanup_expired(self, now: Optional[float] = None):
        """Remove all keys whose window has passed"""
        now = time.monotonic() if now is None else now
        with self.lock:
            self._drop_expired(now)

    def _drop_expired(self, now: float):
        expired_keys = [k for k, (_, started) in self.windows.items()
                        if now - started >= self.window_seconds]
        for key in expired_keys:
            del self.windows[key]

    def reset(self):
        """Clear all counters"""
        with self.lock:
            self.windows.clear()


# Shared limiter (created on first use from settings)
_limiter: Optional[FixedWindowRateLimiter] = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    global _limiter
    if _limiter is None:
        settings = get_settings()
        _limiter = FixedWindowRateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    return _limiter


async def enforce_rate_limit(request: Request):
    """
    FastAPI dependency - raises 429 when the client IP is over its limit
    """
    limiter = get_rate_limiter()
    key = request.client.host if request.client else "unknown"
    if not limiter.hit(key):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=RATE_LIMIT_MESSAGE,
            headers={"Retry-After": str(limiter.retry_after(key))},
        )
