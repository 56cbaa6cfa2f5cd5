"""
Tests for the fixed-window rate limiter and its middleware.
"""

from __future__ import annotations

import dataclasses

import pytest
from fastapi.testclient import TestClient

from backend_txarchive.api_server.middleware import RATE_LIMITED_MESSAGE, FixedWindowRateLimiter
from backend_txarchive.api_server.server import create_app

VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_limiter_allows_up_to_max_then_blocks():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(3, 60, clock=clock)
    decisions = [limiter.hit("1.2.3.4") for _ in range(4)]
    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions] == [2, 1, 0, 0]


def test_limiter_window_resets():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(2, 60, clock=clock)
    limiter.hit("a")
    limiter.hit("a")
    assert limiter.hit("a").allowed is False

    clock.now += 59
    assert limiter.hit("a").allowed is False
    clock.now += 1
    decision = limiter.hit("a")
    assert decision.allowed is True
    assert decision.reset_after_sec == pytest.approx(60.0)


def test_limiter_keys_are_independent():
    limiter = FixedWindowRateLimiter(1, 60, clock=FakeClock())
    assert limiter.hit("a").allowed is True
    assert limiter.hit("a").allowed is False
    assert limiter.hit("b").allowed is True


def test_limiter_rejects_bad_config():
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(0, 60)
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(1, 0)


def test_101st_request_rejected_before_fetch(client, rpc_node):
    """100 requests per window are allowed; the 101st gets 429 and never reaches the RPC node."""
    for _ in range(100):
        assert client.get("/health").status_code == 200

    r = client.get(f"/transactions/{VALID_WALLET}")
    assert r.status_code == 429
    assert r.json() == {"error": RATE_LIMITED_MESSAGE}
    assert r.headers["RateLimit-Limit"] == "100"
    assert r.headers["RateLimit-Remaining"] == "0"
    assert int(r.headers["Retry-After"]) > 0
    assert rpc_node.calls == []


def test_allowed_response_carries_limit_headers(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.headers["RateLimit-Limit"] == "100"
    assert r.headers["RateLimit-Remaining"] == "99"


def test_window_from_settings(settings, rpc_node):
    app = create_app(dataclasses.replace(settings, rate_limit_max=2), transport=rpc_node.transport())
    with TestClient(app) as c:
        assert c.get("/health").status_code == 200
        assert c.get("/health").status_code == 200
        assert c.get("/health").status_code == 429
        app.state.rate_limiter.reset()
        assert c.get("/health").status_code == 200


def test_expired_keys_swept_once_per_window():
    """Stale clients are dropped by a sweep that runs at most once per window."""
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(5, 60, clock=clock)
    for key in ("a", "b", "c"):
        limiter.hit(key)
    assert len(limiter._windows) == 3

    clock.now += 30
    limiter.hit("d")
    assert len(limiter._windows) == 4

    # Window elapsed: the next hit sweeps a, b, c (d is still inside its window)
    clock.now += 30
    limiter.hit("e")
    assert set(limiter._windows) == {"d", "e"}
    assert limiter._next_sweep == clock.now + 60

    # No new sweep until the next window even though d has now expired
    clock.now += 45
    limiter.hit("f")
    assert set(limiter._windows) == {"d", "e", "f"}
    assert limiter.hit("d").remaining == 4
