"""Per-client rate limiting middleware.

Sliding-window limiter: each client may make ``requests_per_minute`` requests
within any trailing ``window_seconds``. Counters live in a ``RateTracker`` so
tests can substitute a fake and deployments can swap the backing store.

Known limitation: the in-memory tracker never evicts clients that stop
sending requests, so its table grows with the number of distinct client ids
seen over the life of the process.
"""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from turnstile.context import RequestContext
from turnstile.errors import ConfigurationError
from turnstile.events import EventSink, emit_event
from turnstile.result import MiddlewareResult

logger = logging.getLogger("turnstile.rate_limit")

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Try again later."


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Configuration for per-client rate limiting."""

    requests_per_minute: int = 60
    window_seconds: float = 60.0
    key_header: str | None = "X-Forwarded-For"
    default_client: str = "127.0.0.1"

    def __post_init__(self) -> None:
        if self.requests_per_minute < 1:
            msg = f"requests_per_minute must be at least 1, got {self.requests_per_minute}"
            raise ConfigurationError(msg)
        if self.window_seconds <= 0:
            msg = f"window_seconds must be positive, got {self.window_seconds}"
            raise ConfigurationError(msg)


class RateTracker(Protocol):
    """Backing store for rate-limit counters.

    ``check_and_record`` must be atomic per client: two concurrent calls for
    the same key can never both observe room under the limit and both record.
    Returns ``(allowed, retry_after_seconds, recorded_count)``.
    """

    def check_and_record(
        self, key: str, now: float, limit: int, window: float
    ) -> tuple[bool, int, int]: ...

    def reset(self) -> None: ...


class InMemoryRateTracker:
    """Process-local tracker: client id -> timestamps inside the window."""

    __slots__ = ("_lock", "_state")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: dict[str, list[float]] = {}

    def check_and_record(
        self, key: str, now: float, limit: int, window: float
    ) -> tuple[bool, int, int]:
        with self._lock:
            stamps = self._state.get(key)
            if stamps is None:
                stamps = self._state[key] = []
            # An entry exactly `window` seconds old has expired.
            stamps[:] = [ts for ts in stamps if now - ts < window]

            if len(stamps) >= limit:
                retry_after = max(1, math.ceil(stamps[0] + window - now))
                return False, retry_after, len(stamps)

            stamps.append(now)
            return True, 0, len(stamps)

    def count(self, key: str) -> int:
        """Number of timestamps currently recorded for *key*."""
        with self._lock:
            return len(self._state.get(key, ()))

    def clients(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._state)

    def reset(self) -> None:
        with self._lock:
            self._state.clear()


class RateLimitingMiddleware:
    """Terminates with 429 once a client exceeds its window budget.

    A rejected attempt is not recorded, so it does not extend the block.

    Usage::

        builder.use(RateLimitingMiddleware(RateLimitConfig(requests_per_minute=5)))
    """

    __slots__ = ("_clock", "_config", "_sink", "_tracker")

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        tracker: RateTracker | None = None,
        clock: Callable[[], float] = time.monotonic,
        sink: EventSink | None = None,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._tracker: RateTracker = tracker if tracker is not None else InMemoryRateTracker()
        self._clock = clock
        self._sink = sink

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    @property
    def tracker(self) -> RateTracker:
        return self._tracker

    def client_key(self, context: RequestContext) -> str:
        """Identify the client from the forwarding header, first hop wins."""
        cfg = self._config
        if cfg.key_header:
            raw = context.request.headers.get(cfg.key_header)
            if raw:
                forwarded = raw.split(",")[0].strip()
                if forwarded:
                    return forwarded
        return cfg.default_client

    def reset(self) -> None:
        """Forget every client's history."""
        self._tracker.reset()

    def __call__(self, context: RequestContext) -> MiddlewareResult:
        cfg = self._config
        key = self.client_key(context)
        allowed, retry_after, count = self._tracker.check_and_record(
            key, self._clock(), cfg.requests_per_minute, cfg.window_seconds
        )
        if not allowed:
            logger.warning("Rate limit exceeded for %s", key)
            emit_event(
                "rate_limit.exceeded",
                context,
                details={"client": key, "retry_after": retry_after},
                sink=self._sink,
            )
            return context.terminate(
                429,
                RATE_LIMIT_MESSAGE,
                headers={"Retry-After": str(retry_after)},
            )

        logger.debug(
            "Rate limit check passed for %s (%d/%d)", key, count, cfg.requests_per_minute
        )
        return context.proceed()
