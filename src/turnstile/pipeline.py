"""Middleware pipeline and its fluent builder.

The builder is mutable during setup; ``build()`` freezes the stage list into
a ``MiddlewarePipeline`` that is read-only and safe to share between threads.

Order is the caller's responsibility and it matters: authentication must be
added before authorization, rate limiting before anything expensive.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from typing import assert_never

from turnstile.config import DEFAULT_POLICY, PathPolicy
from turnstile.context import RequestContext
from turnstile.errors import ConfigurationError
from turnstile.events import EventSink
from turnstile.identity import IdentityStore
from turnstile.middleware.auth import AuthenticationMiddleware
from turnstile.middleware.permissions import AuthorizationMiddleware
from turnstile.middleware.protocol import Middleware
from turnstile.middleware.rate_limit import RateLimitConfig, RateLimitingMiddleware, RateTracker
from turnstile.middleware.request_log import LoggingMiddleware
from turnstile.middleware.validation import ValidationConfig, ValidationMiddleware
from turnstile.result import Continue, MiddlewareResult, Terminate


class MiddlewarePipeline:
    """An ordered, immutable sequence of middleware.

    ``execute()`` folds the stages over a ``Continue`` accumulator and stops
    at the first ``Terminate``, whose response is returned untouched.
    """

    __slots__ = ("_middleware",)

    def __init__(self, middleware: tuple[Middleware, ...] = ()) -> None:
        self._middleware = tuple(middleware)

    @staticmethod
    def builder() -> PipelineBuilder:
        return PipelineBuilder()

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return self._middleware

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middleware)

    def __repr__(self) -> str:
        names = ", ".join(_stage_name(mw) for mw in self._middleware)
        return f"MiddlewarePipeline([{names}])"

    def execute(self, context: RequestContext) -> MiddlewareResult:
        """Run every stage in order until one terminates or all continue."""
        result: MiddlewareResult = Continue(context)
        for middleware in self._middleware:
            match result:
                case Terminate():
                    return result
                case Continue(context=current):
                    result = middleware(current)
                case _:
                    assert_never(result)
            if not isinstance(result, (Continue, Terminate)):
                msg = (
                    f"Middleware {_stage_name(middleware)} returned "
                    f"{type(result).__name__}, expected Continue or Terminate"
                )
                raise TypeError(msg)
        return result


class PipelineBuilder:
    """Fluent assembly of a ``MiddlewarePipeline``.

    Shared options (path policy, identity store, event sink, clock) are
    handed to every named stage the builder creates::

        pipeline = (
            PipelineBuilder()
            .logging()
            .rate_limiting(max_requests_per_minute=5)
            .authentication()
            .authorization()
            .validation()
            .use(lambda ctx: ctx.proceed())
            .build()
        )
    """

    __slots__ = ("_clock", "_identity_store", "_middleware", "_policy", "_sink")

    def __init__(
        self,
        *,
        policy: PathPolicy = DEFAULT_POLICY,
        identity_store: IdentityStore | None = None,
        sink: EventSink | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._middleware: list[Middleware] = []
        self._policy = policy
        self._identity_store = identity_store
        self._sink = sink
        self._clock = clock

    @property
    def policy(self) -> PathPolicy:
        return self._policy

    @property
    def identity_store(self) -> IdentityStore | None:
        return self._identity_store

    @property
    def sink(self) -> EventSink | None:
        return self._sink

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    def use(self, middleware: Middleware) -> PipelineBuilder:
        """Append any middleware: a callable object or a plain function."""
        if not callable(middleware):
            msg = f"Middleware must be callable, got {type(middleware).__name__}"
            raise ConfigurationError(msg)
        self._middleware.append(middleware)
        return self

    def logging(self) -> PipelineBuilder:
        return self.use(LoggingMiddleware(clock=self._clock, sink=self._sink))

    def rate_limiting(
        self,
        max_requests_per_minute: int = 60,
        *,
        tracker: RateTracker | None = None,
    ) -> PipelineBuilder:
        config = RateLimitConfig(requests_per_minute=max_requests_per_minute)
        return self.use(
            RateLimitingMiddleware(config, tracker=tracker, clock=self._clock, sink=self._sink)
        )

    def authentication(self) -> PipelineBuilder:
        return self.use(
            AuthenticationMiddleware(self._identity_store, policy=self._policy, sink=self._sink)
        )

    def authorization(self) -> PipelineBuilder:
        return self.use(AuthorizationMiddleware(policy=self._policy, sink=self._sink))

    def validation(self, config: ValidationConfig | None = None) -> PipelineBuilder:
        if config is None:
            config = ValidationConfig(api_prefix=self._policy.api_prefix)
        return self.use(ValidationMiddleware(config, sink=self._sink))

    def build(self) -> MiddlewarePipeline:
        """Freeze the stages added so far into a pipeline."""
        return MiddlewarePipeline(tuple(self._middleware))

    def __len__(self) -> int:
        return len(self._middleware)


def _stage_name(middleware: object) -> str:
    name = getattr(middleware, "__name__", None)
    return name if name is not None else type(middleware).__name__
