"""Tests for the sliding-window rate limiting middleware."""

import threading
from collections.abc import Callable

import pytest

from turnstile.context import RequestContext
from turnstile.errors import ConfigurationError
from turnstile.http.request import HttpRequest
from turnstile.middleware.rate_limit import (
    RATE_LIMIT_MESSAGE,
    InMemoryRateTracker,
    RateLimitConfig,
    RateLimitingMiddleware,
)
from turnstile.result import Continue, Terminate


def _limiter(limit: int, clock: Callable[[], float]) -> RateLimitingMiddleware:
    return RateLimitingMiddleware(RateLimitConfig(requests_per_minute=limit), clock=clock)


def _from(ip: str | None = None) -> RequestContext:
    headers = {"X-Forwarded-For": ip} if ip is not None else None
    return RequestContext.for_request(HttpRequest.build("/api/profile", headers=headers))


class TestRateLimitConfig:
    def test_defaults(self) -> None:
        cfg = RateLimitConfig()
        assert cfg.requests_per_minute == 60
        assert cfg.window_seconds == 60.0
        assert cfg.key_header == "X-Forwarded-For"
        assert cfg.default_client == "127.0.0.1"

    @pytest.mark.parametrize("limit", [0, -1])
    def test_rejects_non_positive_limit(self, limit: int) -> None:
        with pytest.raises(ConfigurationError):
            RateLimitConfig(requests_per_minute=limit)

    def test_rejects_non_positive_window(self) -> None:
        with pytest.raises(ConfigurationError):
            RateLimitConfig(window_seconds=0)


class TestRateLimiting:
    def test_blocks_after_limit(self, clock) -> None:
        mw = _limiter(3, clock)
        results = [mw(_from("1.2.3.4")) for _ in range(4)]
        assert [type(r) for r in results] == [Continue, Continue, Continue, Terminate]
        blocked = results[-1]
        assert blocked.response.status == 429
        assert blocked.response.body == RATE_LIMIT_MESSAGE

    def test_rejected_attempt_is_not_recorded(self, clock) -> None:
        tracker = InMemoryRateTracker()
        mw = RateLimitingMiddleware(
            RateLimitConfig(requests_per_minute=2), tracker=tracker, clock=clock
        )
        for _ in range(5):
            mw(_from("1.2.3.4"))
        assert tracker.count("1.2.3.4") == 2

    def test_window_resets_after_sixty_seconds(self, clock) -> None:
        mw = _limiter(1, clock)
        assert isinstance(mw(_from("1.2.3.4")), Continue)
        clock.advance(30)
        assert isinstance(mw(_from("1.2.3.4")), Terminate)
        clock.advance(30)
        assert isinstance(mw(_from("1.2.3.4")), Continue)

    def test_entry_exactly_window_old_has_expired(self, clock) -> None:
        mw = _limiter(1, clock)
        start = clock.now
        mw(_from("1.2.3.4"))
        clock.now = start + 59.5
        assert isinstance(mw(_from("1.2.3.4")), Terminate)
        clock.now = start + 60.0
        assert isinstance(mw(_from("1.2.3.4")), Continue)

    def test_window_slides(self, clock) -> None:
        mw = _limiter(2, clock)
        mw(_from("a"))  # t=0
        clock.advance(40)
        mw(_from("a"))  # t=40
        clock.advance(10)
        assert isinstance(mw(_from("a")), Terminate)  # t=50, both still inside
        clock.advance(10)
        assert isinstance(mw(_from("a")), Continue)  # t=60, first expired

    def test_limit_is_per_client(self, clock) -> None:
        mw = _limiter(1, clock)
        assert isinstance(mw(_from("10.0.0.1")), Continue)
        assert isinstance(mw(_from("10.0.0.1")), Terminate)
        assert isinstance(mw(_from("10.0.0.2")), Continue)

    def test_missing_header_uses_placeholder_client(self, clock) -> None:
        mw = _limiter(1, clock)
        assert mw.client_key(_from()) == "127.0.0.1"
        assert isinstance(mw(_from()), Continue)
        assert isinstance(mw(_from("127.0.0.1")), Terminate)

    def test_first_forwarded_hop_identifies_client(self, clock) -> None:
        mw = _limiter(1, clock)
        assert mw.client_key(_from("203.0.113.7, 10.0.0.1")) == "203.0.113.7"

    def test_retry_after_header(self, clock) -> None:
        mw = _limiter(1, clock)
        mw(_from("a"))
        clock.advance(15.5)
        blocked = mw(_from("a"))
        assert isinstance(blocked, Terminate)
        assert blocked.response.headers["Retry-After"] == "45"

    def test_idle_clients_are_not_evicted(self, clock) -> None:
        tracker = InMemoryRateTracker()
        mw = RateLimitingMiddleware(tracker=tracker, clock=clock)
        mw(_from("a"))
        mw(_from("b"))
        clock.advance(3600)
        mw(_from("c"))
        assert tracker.clients() == frozenset({"a", "b", "c"})

    def test_reset(self, clock) -> None:
        mw = _limiter(1, clock)
        mw(_from("a"))
        mw.reset()
        assert isinstance(mw(_from("a")), Continue)

    def test_emits_event_when_blocked(self, clock, events) -> None:
        mw = _limiter(1, clock)
        mw(_from("a"))
        mw(_from("a"))
        assert [e.name for e in events] == ["rate_limit.exceeded"]
        assert events[0].details["client"] == "a"
        assert events[0].path == "/api/profile"

    def test_concurrent_requests_never_exceed_limit(self) -> None:
        limit = 25
        mw = RateLimitingMiddleware(RateLimitConfig(requests_per_minute=limit))
        barrier = threading.Barrier(8)
        outcomes: list[bool] = []
        outcomes_lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            for _ in range(20):
                allowed = isinstance(mw(_from("shared")), Continue)
                with outcomes_lock:
                    outcomes.append(allowed)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(outcomes) == 160
        assert sum(outcomes) == limit
