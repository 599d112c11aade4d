"""
Tests for the fixed-window rate limiter.
"""

from middleware.rate_limit import FixedWindowRateLimiter


def test_allows_up_to_limit():
    limiter = FixedWindowRateLimiter(max_requests=3, window_seconds=60)

    assert [limiter.hit("1.2.3.4", now=0.0) for _ in range(4)] == [True, True, True, False]


def test_keys_are_independent():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)

    assert limiter.hit("a", now=0.0)
    assert limiter.hit("b", now=0.0)
    assert not limiter.hit("a", now=1.0)


def test_window_resets():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)

    assert limiter.hit("a", now=0.0)
    assert not limiter.hit("a", now=59.0)
    assert limiter.hit("a", now=60.0)


def test_retry_after():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)

    assert limiter.retry_after("a", now=0.0) == 0
    limiter.hit("a", now=0.0)
    assert limiter.retry_after("a", now=30.0) == 31


def test_reset():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)
    limiter.hit("a", now=0.0)

    limiter.reset()

    assert limiter.hit("a", now=1.0)


def test_expired_keys_are_dropped():
    limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=1)

    for second in range(10_000):
        limiter.hit(f"10.0.{second // 256}.{second % 256}", now=float(second))

    assert len(limiter.windows) == 1


def test_live_windows_survive_cleanup():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60)
    limiter.hit("old", now=0.0)
    limiter.hit("new", now=30.0)

    limiter.cleanup_expired(now=61.0)

    assert list(limiter.windows) == ["new"]
    assert not limiter.hit("new", now=62.0)
